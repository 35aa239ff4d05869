"""Support tool content and employee support requests."""
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from wellpulse.core.config import NotificationConfig
from wellpulse.core.constants import MAX_LIST_LIMIT, SUPPORT_STATUSES, SUPPORT_TYPES
from wellpulse.core.errors import NoRecipientsError, NotFoundError, ValidationError
from wellpulse.core.logging_config import get_logger
from wellpulse.core.sanitization import MAX_NOTE_LENGTH, extract_emails, require_domain, sanitize_text
from wellpulse.core.utils import utc_now
from wellpulse.db.models import SupportRequest, SupportToolContent
from wellpulse.services.licenses import active_license_emails
from wellpulse.services.notifications import Notification, NotificationQueue

logger = get_logger(__name__)


def _strings(values: Optional[Sequence[str]]) -> List[str]:
    return [str(value).strip() for value in values or [] if str(value).strip()]


def get_active_content(db: Session, domain: str) -> Optional[SupportToolContent]:
    return (
        db.query(SupportToolContent)
        .filter(SupportToolContent.domain == require_domain(domain), SupportToolContent.is_active.is_(True))
        .order_by(SupportToolContent.updated_at.desc(), SupportToolContent.id.desc())
        .first()
    )


def upsert_content(
    db: Session,
    domain: str,
    tips: Optional[Sequence[str]] = None,
    eap: Optional[Sequence[str]] = None,
    hr: Optional[Sequence[str]] = None,
    crisis: Optional[Sequence[str]] = None,
) -> SupportToolContent:
    """Replace the domain's active support content, bumping its version."""
    domain = require_domain(domain)
    content = get_active_content(db, domain)
    if content is None:
        content = SupportToolContent(domain=domain, version=1, is_active=True)
        db.add(content)
    else:
        content.version = (content.version or 0) + 1

    content.tips = _strings(tips)
    content.eap = _strings(eap)
    content.hr = _strings(hr)
    content.crisis = _strings(crisis)
    db.commit()
    db.refresh(content)
    return content


def route_recipients(
    db: Session,
    domain: str,
    support_type: str,
    fallback_email: Optional[str] = None,
) -> List[str]:
    """
    Who hears about a support request.

    Contacts for the requested channel come first (crisis, eap, otherwise
    hr), then every other configured channel, then the tenant's active
    license holders, then the optional global fallback.
    """
    candidates: List[str] = []
    content = get_active_content(db, domain)
    if content is not None:
        if support_type == "crisis":
            candidates.extend(content.crisis or [])
        elif support_type == "eap":
            candidates.extend(content.eap or [])
        else:
            candidates.extend(content.hr or [])
        candidates.extend(content.hr or [])
        candidates.extend(content.eap or [])
        candidates.extend(content.crisis or [])

    recipients = extract_emails(candidates)
    for address in active_license_emails(db, domain):
        if address not in recipients:
            recipients.append(address)
    if fallback_email:
        fallback = fallback_email.strip().lower()
        if fallback and fallback not in recipients:
            recipients.append(fallback)
    return recipients


def submit_support_request(
    db: Session,
    domain: str,
    employee_id: str = "",
    support_type: str = "hr",
    message: str = "",
    contact_name: str = "",
    contact_email: str = "",
    contact_phone: str = "",
    checkin_id: str = "",
    notifications: Optional[NotificationQueue] = None,
    config: Optional[NotificationConfig] = None,
    now: Optional[datetime] = None,
) -> SupportRequest:
    """
    Record a support request and route it to HR/EAP/crisis contacts.

    Unknown support types are stored as ``other`` and routed like HR.

    Raises:
        NoRecipientsError: nobody is configured to receive it
    """
    domain = require_domain(domain)
    support_type = support_type if support_type in SUPPORT_TYPES else "other"
    fallback = config.support_fallback_email if config else None

    recipients = route_recipients(db, domain, support_type, fallback)
    if not recipients:
        raise NoRecipientsError(
            "No support routing contact configured for this domain. Configure HR/EAP emails first."
        )

    request = SupportRequest(
        domain=domain,
        employee_id=str(employee_id or "").strip(),
        support_type=support_type,
        message=sanitize_text(message or "", max_length=MAX_NOTE_LENGTH, strip_html=True),
        contact_name=str(contact_name or "").strip(),
        contact_email=str(contact_email or "").strip(),
        contact_phone=str(contact_phone or "").strip(),
        checkin_id=str(checkin_id or "").strip(),
        status="new",
        status_updated_at=now or utc_now(),
        routed_to=len(recipients),
        submitted_at=now or utc_now(),
    )
    db.add(request)
    db.commit()
    db.refresh(request)

    logger.info("support_request_submitted", domain=domain, request_id=request.id,
                support_type=support_type, routed_to=len(recipients))

    if notifications is not None:
        notifications.enqueue(support_notification(request, recipients))
    return request


def support_notification(request: SupportRequest, recipients: List[str]) -> Notification:
    body = (
        "Support request submitted\n\n"
        f"Domain: {request.domain}\n"
        f"Support type: {request.support_type}\n"
        f"Check-in reference: {request.checkin_id or 'N/A'}\n"
        f"Employee reference: {request.employee_id or 'Anonymous'}\n\n"
        "Contact details (optional)\n"
        f"Name: {request.contact_name or 'Not provided'}\n"
        f"Email: {request.contact_email or 'Not provided'}\n"
        f"Phone: {request.contact_phone or 'Not provided'}\n\n"
        "User message\n"
        f"{request.message or 'No additional message'}\n"
    )
    return Notification(
        recipients=recipients,
        subject=f"Support request - {request.domain}",
        body=body,
        kind="support_request",
    )


def list_support_requests(
    db: Session,
    domain: str,
    employee_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 100,
) -> List[SupportRequest]:
    query = db.query(SupportRequest).filter(SupportRequest.domain == require_domain(domain))
    if employee_id:
        query = query.filter(SupportRequest.employee_id == employee_id.strip())
    if status and status in SUPPORT_STATUSES:
        query = query.filter(SupportRequest.status == status)

    limit = min(MAX_LIST_LIMIT, max(1, limit))
    return query.order_by(SupportRequest.submitted_at.desc(), SupportRequest.id.desc()).limit(limit).all()


def update_support_status(
    db: Session,
    request_id: int,
    domain: str,
    status: str,
    now: Optional[datetime] = None,
) -> SupportRequest:
    """Admin-driven status change; resolved_at is only set when entering ``resolved``."""
    domain = require_domain(domain)
    status = str(status or "").strip()
    if status not in SUPPORT_STATUSES:
        raise ValidationError("status must be one of: new, in_progress, resolved", field="status")

    request = db.query(SupportRequest).filter(
        SupportRequest.id == request_id,
        SupportRequest.domain == domain,
    ).first()
    if request is None:
        raise NotFoundError("Support request not found for this domain")

    now = now or utc_now()
    if status == "resolved":
        if request.status != "resolved":
            request.resolved_at = now
    else:
        request.resolved_at = None
    request.status = status
    request.status_updated_at = now
    db.commit()
    db.refresh(request)
    return request
