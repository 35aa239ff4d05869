"""Weekly report endpoints."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db, get_dispatch_config, get_notification_queue, verify_admin_token
from wellpulse.core.config import DispatchConfig
from wellpulse.core.errors import NoRecipientsError
from wellpulse.core.logging_config import get_logger
from wellpulse.core.rate_limit import RATE_LIMITS, limiter
from wellpulse.core.sanitization import require_domain, validate_email
from wellpulse.schemas import ReportEmailRequest, ReportEmailResponse, WeeklySummary
from wellpulse.services.licenses import active_license_emails
from wellpulse.services.notifications import Notification, NotificationQueue
from wellpulse.services.report_pdf import pdf_filename, render_summary_pdf
from wellpulse.services.reports import build_weekly_summary, render_summary_email

logger = get_logger(__name__)
router = APIRouter()


@router.get("/weekly", response_model=WeeklySummary)
async def weekly_endpoint(
    domain: str = Query(..., min_length=1),
    start: Optional[str] = None,
    end: Optional[str] = None,
    db: Session = Depends(get_db),
    config: DispatchConfig = Depends(get_dispatch_config),
):
    """
    Severity counts and top themes for one tenant.

    With no dates the current ISO week (Monday to Sunday, UTC) is used; with
    one date the other is six days away.

    Example:
        Response (200):
            {
                "domain": "acme.com",
                "week_ending": "2025-06-08",
                "window": {"start": "2025-06-02T00:00:00Z", "end": "2025-06-08T23:59:59.999999Z"},
                "total": 12, "red": 2, "amber": 3, "green": 7,
                "themes": [{"topic": "workload", "count": 4}]
            }
    """
    return build_weekly_summary(db, require_domain(domain), start=start, end=end, theme_limit=config.theme_limit)


@router.get("/weekly/pdf")
async def weekly_pdf_endpoint(
    domain: str = Query(..., min_length=1),
    start: Optional[str] = None,
    end: Optional[str] = None,
    db: Session = Depends(get_db),
    config: DispatchConfig = Depends(get_dispatch_config),
):
    summary = build_weekly_summary(db, require_domain(domain), start=start, end=end, theme_limit=config.theme_limit)
    return Response(
        content=render_summary_pdf(summary),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(summary)}"'},
    )


@router.post("/weekly/email", response_model=ReportEmailResponse, dependencies=[Depends(verify_admin_token)])
@limiter.limit(RATE_LIMITS["report_email"])
async def weekly_email_endpoint(
    request: Request,
    body: ReportEmailRequest,
    db: Session = Depends(get_db),
    config: DispatchConfig = Depends(get_dispatch_config),
    notifications: Optional[NotificationQueue] = Depends(get_notification_queue),
):
    """
    Email a summary on demand (admin only).

    Goes to ``recipients`` when given, otherwise to the tenant's active
    license holders. This does not write a dispatch receipt, so the weekly
    job still sends its own copy.
    """
    domain = require_domain(body.domain)
    summary = build_weekly_summary(db, domain, start=body.start, end=body.end, theme_limit=config.theme_limit)

    if body.recipients:
        recipients = []
        for address in body.recipients:
            email = validate_email(address, field="recipients")
            if email not in recipients:
                recipients.append(email)
    else:
        recipients = active_license_emails(db, domain)
    if not recipients:
        raise NoRecipientsError("No recipients: issue a license for this domain or pass recipients")

    subject, text, html = render_summary_email(summary)
    queued = False
    if notifications is not None:
        queued = notifications.enqueue(Notification(
            recipients=recipients,
            subject=subject,
            body=text,
            html=html,
            kind="weekly_report_manual",
        ))
    logger.info("weekly_report_email_requested", domain=domain, recipients=len(recipients), queued=queued)
    return ReportEmailResponse(queued=queued, recipients=len(recipients), week_ending=summary.week_ending)
