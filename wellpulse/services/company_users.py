"""Company (tenant) user management."""
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellpulse.core.constants import USER_ROLES
from wellpulse.core.errors import ConflictError, NotFoundError, ValidationError
from wellpulse.core.logging_config import get_logger
from wellpulse.core.sanitization import MAX_NAME_LENGTH, require_domain, sanitize_text, validate_email
from wellpulse.db.models import CompanyUser
from wellpulse.services.licenses import enforce_seat_limit, require_tenant_access

logger = get_logger(__name__)


def _validate_role(role: str) -> str:
    if role not in USER_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(USER_ROLES)}", field="role")
    return role


def create_company_user(
    db: Session,
    domain: str,
    email: str,
    name: str = "",
    role: str = "employee",
) -> CompanyUser:
    """
    Add a user to a tenant.

    Raises:
        ValidationError: bad email or role
        PreconditionError: domain not verified / no active license
        ConflictError: email already registered
        SeatLimitReached: the tenant has used all licensed seats
    """
    domain = require_domain(domain)
    email = validate_email(email)
    role = _validate_role(role)
    name = sanitize_text(name or "", max_length=MAX_NAME_LENGTH)

    require_tenant_access(db, domain)

    if db.query(CompanyUser.id).filter(CompanyUser.email == email).first():
        raise ConflictError("Email already exists", field="email")

    enforce_seat_limit(db, domain)

    user = CompanyUser(domain=domain, email=email, name=name, role=role)
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already exists", field="email")
    db.refresh(user)

    logger.info("company_user_created", domain=domain, user_id=user.id, role=role)
    return user


def list_company_users(
    db: Session,
    domain: str,
    q: Optional[str] = None,
    role: Optional[str] = None,
) -> List[CompanyUser]:
    query = db.query(CompanyUser).filter(CompanyUser.domain == require_domain(domain))
    if role:
        query = query.filter(CompanyUser.role == _validate_role(role))
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(CompanyUser.email.ilike(pattern), CompanyUser.name.ilike(pattern)))
    return query.order_by(CompanyUser.created_at.desc(), CompanyUser.id.desc()).all()


def get_company_user(db: Session, user_id: int) -> CompanyUser:
    user = db.query(CompanyUser).filter(CompanyUser.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_company_user(
    db: Session,
    user_id: int,
    name: Optional[str] = None,
    role: Optional[str] = None,
) -> CompanyUser:
    user = get_company_user(db, user_id)
    if name is not None:
        user.name = sanitize_text(name, max_length=MAX_NAME_LENGTH)
    if role is not None:
        user.role = _validate_role(role)
    db.commit()
    db.refresh(user)
    return user


def delete_company_user(db: Session, user_id: int) -> None:
    """Remove a user, freeing their seat."""
    user = get_company_user(db, user_id)
    db.delete(user)
    db.commit()
