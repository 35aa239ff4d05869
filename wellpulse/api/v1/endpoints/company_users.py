"""Company user endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status as http_status
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db
from wellpulse.schemas import CompanyUserCreate, CompanyUserOut, CompanyUserUpdate, SuccessResponse
from wellpulse.services.company_users import (
    create_company_user,
    delete_company_user,
    list_company_users,
    update_company_user,
)

router = APIRouter()


@router.get("", response_model=List[CompanyUserOut])
async def list_endpoint(
    domain: str = Query(..., min_length=1),
    q: Optional[str] = None,
    role: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return list_company_users(db, domain, q=q, role=role)


@router.post("", response_model=CompanyUserOut, status_code=http_status.HTTP_201_CREATED)
async def create_endpoint(body: CompanyUserCreate, db: Session = Depends(get_db)):
    """
    Add a user to a tenant, consuming one seat.

    Example:
        Response (409) when the tenant is full:
            {
                "detail": "Seat limit reached (2/2). Please contact super admin.",
                "code": "SEAT_LIMIT_REACHED",
                "seat_limit": 2,
                "used_seats": 2
            }
    """
    return create_company_user(db, body.domain, body.email, name=body.name, role=body.role)


@router.patch("/{user_id}", response_model=CompanyUserOut)
async def update_endpoint(user_id: int, body: CompanyUserUpdate, db: Session = Depends(get_db)):
    return update_company_user(db, user_id, name=body.name, role=body.role)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_endpoint(user_id: int, db: Session = Depends(get_db)):
    delete_company_user(db, user_id)
    return SuccessResponse(message="User deleted")
