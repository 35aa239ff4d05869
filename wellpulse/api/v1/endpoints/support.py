"""Support content and support request endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status as http_status
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db, get_notification_config, get_notification_queue
from wellpulse.core.config import NotificationConfig
from wellpulse.core.errors import NotFoundError
from wellpulse.core.rate_limit import RATE_LIMITS, limiter
from wellpulse.schemas import (
    SupportContentIn,
    SupportContentOut,
    SupportRequestIn,
    SupportRequestOut,
    SupportStatusUpdate,
)
from wellpulse.services.notifications import NotificationQueue
from wellpulse.services.support import (
    get_active_content,
    list_support_requests,
    submit_support_request,
    update_support_status,
    upsert_content,
)

router = APIRouter()


@router.get("/content", response_model=SupportContentOut)
async def get_content_endpoint(domain: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    content = get_active_content(db, domain)
    if content is None:
        raise NotFoundError("No support content configured for this domain")
    return content


@router.put("/content", response_model=SupportContentOut)
async def put_content_endpoint(body: SupportContentIn, db: Session = Depends(get_db)):
    return upsert_content(db, body.domain, tips=body.tips, eap=body.eap, hr=body.hr, crisis=body.crisis)


@router.post("/requests", response_model=SupportRequestOut, status_code=http_status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["support_submit"])
async def submit_request_endpoint(
    request: Request,
    body: SupportRequestIn,
    db: Session = Depends(get_db),
    notifications: Optional[NotificationQueue] = Depends(get_notification_queue),
    config: NotificationConfig = Depends(get_notification_config),
):
    """
    Record a support request and notify the tenant's HR/EAP/crisis contacts.

    422 when the tenant has nobody to route it to.
    """
    return submit_support_request(
        db,
        **body.model_dump(),
        notifications=notifications,
        config=config,
    )


@router.get("/requests", response_model=List[SupportRequestOut])
async def list_requests_endpoint(
    domain: str = Query(..., min_length=1),
    employee_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return list_support_requests(db, domain, employee_id=employee_id, status=status, limit=limit)


@router.patch("/requests/{request_id}/status", response_model=SupportRequestOut)
async def update_status_endpoint(request_id: int, body: SupportStatusUpdate, db: Session = Depends(get_db)):
    return update_support_status(db, request_id, body.domain, body.status)
