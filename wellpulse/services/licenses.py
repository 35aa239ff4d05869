"""License registry: admin licenses bound to verified tenant domains."""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellpulse.core.constants import LICENSE_ACTIVE, LICENSE_REVOKED, MAX_PAGE_SIZE
from wellpulse.core.errors import (
    ConflictError,
    NotFoundError,
    PreconditionError,
    SeatLimitReached,
    ValidationError,
)
from wellpulse.core.logging_config import get_logger
from wellpulse.core.sanitization import (
    MAX_NAME_LENGTH,
    normalize_domain,
    parse_seat_limit,
    sanitize_text,
    validate_email,
    validate_phone,
)
from wellpulse.core.security import generate_license_key
from wellpulse.core.utils import utc_now
from wellpulse.db.models import AdminUser, CompanyUser
from wellpulse.services.domain_verification import get_verification_by_domain, is_domain_verified

logger = get_logger(__name__)

KEY_ATTEMPTS = 3


def _required_name(value: Optional[str], field: str) -> str:
    try:
        name = sanitize_text(value or "", max_length=MAX_NAME_LENGTH)
    except ValueError as e:
        raise ValidationError(str(e), field=field)
    if not name:
        raise ValidationError(f"{field} is required", field=field)
    return name


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(AdminUser.id).filter(AdminUser.email == email)
    if exclude_id is not None:
        query = query.filter(AdminUser.id != exclude_id)
    return query.first() is not None


def issue_license(
    db: Session,
    domain: str,
    first_name: str,
    last_name: str,
    email: str,
    phone: Optional[str] = None,
    seat_limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> AdminUser:
    """
    Create a license holder for a verified domain.

    Raises:
        ValidationError: missing/invalid holder fields or seat limit
        PreconditionError: the domain has not been verified
        ConflictError: the email already holds a license
    """
    now = now or utc_now()
    first_name = _required_name(first_name, "first_name")
    last_name = _required_name(last_name, "last_name")
    email = validate_email(email)
    phone = validate_phone(phone)
    seat_limit = parse_seat_limit(seat_limit)

    domain = normalize_domain(domain)
    if not domain:
        raise ValidationError("domain is required", field="domain")

    verification = get_verification_by_domain(db, domain)
    if verification is None or not is_domain_verified(db, domain):
        raise PreconditionError(
            "Domain must be verified before creating admin",
            code="domain_not_verified",
            field="domain",
        )

    if _email_taken(db, email):
        raise ConflictError("Email already exists", field="email")

    # Key collisions are astronomically rare; the unique column is the real guard
    for _ in range(KEY_ATTEMPTS):
        holder = AdminUser(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            domain=verification.domain,
            license_key=generate_license_key(domain, email),
            license_status=LICENSE_ACTIVE,
            issued_at=now,
            seat_limit=seat_limit,
        )
        try:
            db.add(holder)
            db.commit()
            db.refresh(holder)
            logger.info("license_issued", domain=domain, admin_id=holder.id, seat_limit=seat_limit)
            return holder
        except IntegrityError:
            db.rollback()
            if _email_taken(db, email):
                raise ConflictError("Email already exists", field="email")
            continue

    raise ConflictError("Failed to generate unique license key")


def get_license(db: Session, admin_id: int) -> AdminUser:
    holder = db.query(AdminUser).filter(AdminUser.id == admin_id).first()
    if holder is None:
        raise NotFoundError("Admin not found")
    return holder


def list_licenses(
    db: Session,
    q: Optional[str] = None,
    domain: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[AdminUser], int]:
    query = db.query(AdminUser)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            AdminUser.first_name.ilike(pattern),
            AdminUser.last_name.ilike(pattern),
            AdminUser.email.ilike(pattern),
            AdminUser.license_key.ilike(pattern),
        ))
    if domain:
        query = query.filter(AdminUser.domain == normalize_domain(domain))
    if status:
        if status not in (LICENSE_ACTIVE, LICENSE_REVOKED):
            raise ValidationError("status must be one of: active, revoked", field="status")
        query = query.filter(AdminUser.license_status == status)

    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    total = query.count()
    items = (
        query.order_by(AdminUser.created_at.desc(), AdminUser.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def update_license_holder(db: Session, admin_id: int, **fields) -> AdminUser:
    """Update profile fields and seat limit; license key and status are untouched."""
    holder = get_license(db, admin_id)

    if fields.get("first_name"):
        holder.first_name = _required_name(fields["first_name"], "first_name")
    if fields.get("last_name"):
        holder.last_name = _required_name(fields["last_name"], "last_name")
    if fields.get("email"):
        email = validate_email(fields["email"])
        if _email_taken(db, email, exclude_id=holder.id):
            raise ConflictError("Email already exists", field="email")
        holder.email = email
    if fields.get("phone"):
        holder.phone = validate_phone(fields["phone"])
    if "seat_limit" in fields:
        holder.seat_limit = parse_seat_limit(fields["seat_limit"])

    db.commit()
    db.refresh(holder)
    return holder


def rotate_license(db: Session, admin_id: int, now: Optional[datetime] = None) -> AdminUser:
    """Replace the license key and restart issued_at. Status is left as it is."""
    holder = get_license(db, admin_id)

    for _ in range(KEY_ATTEMPTS):
        holder.license_key = generate_license_key(holder.domain, holder.email)
        holder.issued_at = now or utc_now()
        try:
            db.commit()
            db.refresh(holder)
            logger.info("license_rotated", domain=holder.domain, admin_id=holder.id)
            return holder
        except IntegrityError:
            db.rollback()
            holder = get_license(db, admin_id)

    raise ConflictError("Failed to generate unique license key")


def revoke_license(db: Session, admin_id: int) -> AdminUser:
    """Revoke a license. There is no way back; issue a new license instead."""
    holder = get_license(db, admin_id)
    holder.license_status = LICENSE_REVOKED
    db.commit()
    db.refresh(holder)
    logger.info("license_revoked", domain=holder.domain, admin_id=holder.id)
    return holder


def has_active_license(db: Session, domain: str) -> bool:
    return db.query(AdminUser.id).filter(
        AdminUser.domain == domain,
        AdminUser.license_status == LICENSE_ACTIVE,
    ).first() is not None


def active_license_domains(db: Session) -> List[str]:
    rows = (
        db.query(AdminUser.domain)
        .filter(AdminUser.license_status == LICENSE_ACTIVE)
        .distinct()
        .order_by(AdminUser.domain)
        .all()
    )
    return [domain for (domain,) in rows]


def active_license_emails(db: Session, domain: str) -> List[str]:
    """Lowercased, de-duplicated emails of active holders, oldest license first."""
    rows = (
        db.query(AdminUser.email)
        .filter(AdminUser.domain == domain, AdminUser.license_status == LICENSE_ACTIVE)
        .order_by(AdminUser.issued_at, AdminUser.id)
        .all()
    )
    emails: List[str] = []
    for (email,) in rows:
        address = str(email or "").strip().lower()
        if address and address not in emails:
            emails.append(address)
    return emails


def current_seat_limit(db: Session, domain: str) -> Optional[int]:
    """Seat limit of the most recently issued active license (``None`` = unlimited)."""
    holder = (
        db.query(AdminUser)
        .filter(AdminUser.domain == domain, AdminUser.license_status == LICENSE_ACTIVE)
        .order_by(AdminUser.issued_at.desc(), AdminUser.id.desc())
        .first()
    )
    if holder is None or not holder.seat_limit or holder.seat_limit < 1:
        return None
    return holder.seat_limit


def enforce_seat_limit(db: Session, domain: str) -> None:
    """
    Refuse a new tenant user once the domain has used all of its seats.

    Raises:
        SeatLimitReached: used seats >= the current license's seat limit
    """
    seat_limit = current_seat_limit(db, domain)
    if seat_limit is None:
        return
    used_seats = db.query(func.count(CompanyUser.id)).filter(CompanyUser.domain == domain).scalar() or 0
    if used_seats >= seat_limit:
        logger.info("seat_limit_reached", domain=domain, used_seats=used_seats, seat_limit=seat_limit)
        raise SeatLimitReached(used_seats=used_seats, seat_limit=seat_limit)


def require_tenant_access(db: Session, domain: str) -> None:
    """
    Gate tenant-scoped writes on a verified domain with a live license.

    Raises:
        PreconditionError: ``domain_not_verified`` or ``no_active_license``
    """
    if not is_domain_verified(db, domain):
        raise PreconditionError("Domain not verified.", code="domain_not_verified", field="domain")
    if not has_active_license(db, domain):
        raise PreconditionError("No active license for this domain.", code="no_active_license", field="domain")
