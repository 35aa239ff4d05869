"""License holder (tenant admin) endpoints. Platform admin only."""
from typing import Optional

from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db, verify_admin_token
from wellpulse.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from wellpulse.schemas import LicenseIssueRequest, LicenseOut, LicenseUpdateRequest, Page
from wellpulse.services.licenses import (
    get_license,
    issue_license,
    list_licenses,
    revoke_license,
    rotate_license,
    update_license_holder,
)

router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.post("", response_model=LicenseOut, status_code=http_status.HTTP_201_CREATED)
async def issue_endpoint(body: LicenseIssueRequest, db: Session = Depends(get_db)):
    """
    Issue a license to a tenant admin.

    Raises:
        400: invalid holder fields or seat limit
        403: ``domain_not_verified``
        409: email already holds a license
    """
    return issue_license(
        db,
        domain=body.domain,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone=body.phone,
        seat_limit=body.seat_limit,
    )


@router.get("", response_model=Page[LicenseOut])
async def list_endpoint(
    q: Optional[str] = None,
    domain: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
):
    items, total = list_licenses(db, q=q, domain=domain, status=status, page=page, limit=limit)
    return Page[LicenseOut](
        items=[LicenseOut.model_validate(item) for item in items],
        total=total,
        page=max(1, page),
        limit=min(MAX_PAGE_SIZE, max(1, limit)),
    )


@router.get("/{admin_id}", response_model=LicenseOut)
async def get_endpoint(admin_id: int, db: Session = Depends(get_db)):
    return get_license(db, admin_id)


@router.patch("/{admin_id}", response_model=LicenseOut)
async def update_endpoint(admin_id: int, body: LicenseUpdateRequest, db: Session = Depends(get_db)):
    return update_license_holder(db, admin_id, **body.model_dump(exclude_unset=True))


@router.post("/{admin_id}/license/rotate", response_model=LicenseOut)
async def rotate_endpoint(admin_id: int, db: Session = Depends(get_db)):
    """New license key, issued now. A revoked license stays revoked."""
    return rotate_license(db, admin_id)


@router.post("/{admin_id}/license/revoke", response_model=LicenseOut)
async def revoke_endpoint(admin_id: int, db: Session = Depends(get_db)):
    return revoke_license(db, admin_id)
