"""Domain verification endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db, get_resolver, get_verification_config, verify_admin_token
from wellpulse.core.config import VerificationConfig
from wellpulse.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from wellpulse.core.rate_limit import RATE_LIMITS, limiter
from wellpulse.db.models import DomainVerification
from wellpulse.schemas import (
    DnsInstruction,
    DomainCheckResponse,
    DomainVerificationOut,
    DomainVerificationUpdate,
    DomainVerifyRequest,
    Page,
    SuccessResponse,
)
from wellpulse.services.dns import TxtResolver
from wellpulse.services.domain_verification import (
    VerificationPatch,
    check_verification,
    delete_verification,
    dns_instruction,
    effective_status,
    get_verification,
    initiate_verification,
    list_verifications,
    preview_verification,
    rotate_verification,
    update_verification,
)

router = APIRouter()


def _out(record: DomainVerification) -> DomainVerificationOut:
    out = DomainVerificationOut.model_validate(record)
    return out.model_copy(update={"status": effective_status(record)})


@router.post("/verify/preview", response_model=DnsInstruction)
async def preview_endpoint(
    body: DomainVerifyRequest,
    config: VerificationConfig = Depends(get_verification_config),
):
    """The TXT record a tenant would publish. Nothing is stored."""
    return preview_verification(body.domain, body.ttl, config=config)


@router.post("/verify/initiate", response_model=DnsInstruction)
async def initiate_endpoint(
    body: DomainVerifyRequest,
    db: Session = Depends(get_db),
    config: VerificationConfig = Depends(get_verification_config),
):
    """
    Issue a TXT challenge for a domain, replacing any earlier one.

    Example:
        Request:
            POST /api/v1/domains/verify/initiate
            {"domain": "acme.com"}

        Response (200):
            {
                "record_type": "TXT",
                "host": "_gp-verify",
                "value": "gp-verify=k3j9x0q1lmv2a8c",
                "ttl": 3600,
                "fqdn": "_gp-verify.acme.com",
                "domain": "acme.com",
                "expires_at": "2025-06-09T10:00:00Z"
            }
    """
    record = initiate_verification(db, body.domain, body.ttl, config=config)
    return DnsInstruction(
        **dns_instruction(record.domain, record.host, record.token, record.ttl),
        expires_at=record.expires_at,
    )


@router.get("/verify/check", response_model=DomainCheckResponse)
@limiter.limit(RATE_LIMITS["domain_check"])
def check_endpoint(
    request: Request,
    domain: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    resolver: TxtResolver = Depends(get_resolver),
):
    """
    Look up the challenge in public DNS.

    A miss or a resolver failure still answers 200; ``matched`` is false
    and ``resolver_error`` says what went wrong. 404 when no challenge was
    issued, 410 when it has expired.
    """
    result = check_verification(db, domain, resolver)
    return DomainCheckResponse(
        status=result.status,
        domain=result.domain,
        fqdn=result.fqdn,
        expected=result.token,
        matched=result.matched,
        attempts=result.attempts,
        answers=result.answers,
        raw_answers=result.raw_answers,
        resolver_error=result.resolver_error,
        verified_at=result.verified_at,
        last_checked_at=result.last_checked_at,
    )


@router.get("", response_model=Page[DomainVerificationOut], dependencies=[Depends(verify_admin_token)])
async def list_endpoint(
    status: Optional[str] = None,
    q: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
):
    items, total = list_verifications(db, status=status, q=q, page=page, limit=limit)
    return Page[DomainVerificationOut](
        items=[_out(item) for item in items],
        total=total,
        page=max(1, page),
        limit=min(MAX_PAGE_SIZE, max(1, limit)),
    )


@router.get("/{verification_id}", response_model=DomainVerificationOut, dependencies=[Depends(verify_admin_token)])
async def get_endpoint(verification_id: int, db: Session = Depends(get_db)):
    return _out(get_verification(db, verification_id))


@router.patch("/{verification_id}", response_model=DomainVerificationOut, dependencies=[Depends(verify_admin_token)])
async def update_endpoint(
    verification_id: int,
    body: DomainVerificationUpdate,
    db: Session = Depends(get_db),
    config: VerificationConfig = Depends(get_verification_config),
):
    """Change domain, host or TTL. A real change restarts verification with a new token."""
    patch = VerificationPatch(**body.model_dump(exclude_unset=True))
    return _out(update_verification(db, verification_id, patch, config=config))


@router.post("/{verification_id}/rotate", response_model=DomainVerificationOut,
             dependencies=[Depends(verify_admin_token)])
async def rotate_endpoint(
    verification_id: int,
    db: Session = Depends(get_db),
    config: VerificationConfig = Depends(get_verification_config),
):
    return _out(rotate_verification(db, verification_id, config=config))


@router.delete("/{verification_id}", response_model=SuccessResponse, dependencies=[Depends(verify_admin_token)])
async def delete_endpoint(verification_id: int, db: Session = Depends(get_db)):
    delete_verification(db, verification_id)
    return SuccessResponse(message="Domain verification deleted")
