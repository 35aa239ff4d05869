"""Domain ownership verification via DNS TXT challenge.

Lifecycle::

    initiate ──> pending ──check(match)──> verified
                    │                         │
                    └── expires_at passes ──> (expired, derived)
    update/rotate (domain, host or ttl changed) ──> pending with a new token

A failed lookup never moves a record backwards: ``check`` only ever
promotes to ``verified`` and otherwise just records the attempt.
"""
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellpulse.core.config import VerificationConfig, settings
from wellpulse.core.constants import (
    MAX_PAGE_SIZE,
    VERIFICATION_PENDING,
    VERIFICATION_STATUSES,
    VERIFICATION_VERIFIED,
)
from wellpulse.core.errors import ConflictError, ExpiredError, NotFoundError, ValidationError
from wellpulse.core.logging_config import get_logger
from wellpulse.core.sanitization import validate_domain
from wellpulse.core.security import generate_challenge_token
from wellpulse.core.utils import to_utc, utc_now
from wellpulse.db.models import DomainVerification
from wellpulse.services.dns import TxtResolver, lookup_txt, token_matches

logger = get_logger(__name__)

HOST_LABEL_RE = re.compile(r"^[A-Za-z0-9_-]{1,63}$")
EXPIRED = "expired"


class VerificationState(BaseModel):
    """The mutable fields of a verification record, as a plain value."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    domain: str
    host: str
    ttl: int
    token: str
    status: str
    verified_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None
    attempts: int = 0


class VerificationPatch(BaseModel):
    domain: Optional[str] = None
    host: Optional[str] = None
    ttl: Optional[int] = None


class VerificationCheck(BaseModel):
    """Outcome of one DNS check, including what the resolvers actually saw."""

    status: str
    domain: str
    fqdn: str
    token: str
    matched: bool
    attempts: int
    answers: List[str]
    raw_answers: List[List[str]]
    resolver_error: Optional[Dict[str, str]] = None
    verified_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None


def _config(config: Optional[VerificationConfig]) -> VerificationConfig:
    return config or settings.verification_config()


def _validate_ttl(ttl: Any) -> int:
    if isinstance(ttl, bool):
        raise ValidationError("TTL must be a positive number", field="ttl")
    try:
        value = int(ttl)
    except (TypeError, ValueError):
        raise ValidationError("TTL must be a positive number", field="ttl")
    if value <= 0:
        raise ValidationError("TTL must be a positive number", field="ttl")
    return value


def _validate_host(host: str) -> str:
    host = host.strip()
    if not HOST_LABEL_RE.match(host):
        raise ValidationError("Host must be a single DNS label", field="host")
    return host


def fresh_proof(now: datetime, config: VerificationConfig) -> Dict[str, Any]:
    """Fields of a brand-new, unproven challenge."""
    return {
        "token": generate_challenge_token(now),
        "status": VERIFICATION_PENDING,
        "verified_at": None,
        "last_checked_at": None,
        "attempts": 0,
        "expires_at": now + timedelta(days=config.verification_ttl_days),
    }


def apply_change(
    state: VerificationState,
    patch: VerificationPatch,
    now: datetime,
    config: VerificationConfig,
    force_reset: bool = False,
) -> VerificationState:
    """
    Compute the record that results from editing domain, host or TTL.

    Any actual change to those fields invalidates the current proof: a new
    token is issued, status returns to pending, verification timestamps and
    attempts are cleared and the expiry window restarts. A patch that
    changes nothing returns ``state`` unchanged unless ``force_reset``
    (token rotation) is set.
    """
    updates: Dict[str, Any] = {}

    if patch.domain is not None:
        domain = validate_domain(patch.domain)
        if domain != state.domain:
            updates["domain"] = domain

    if patch.host is not None and patch.host.strip():
        host = _validate_host(patch.host)
        if host != state.host:
            updates["host"] = host

    if patch.ttl is not None:
        ttl = _validate_ttl(patch.ttl)
        if ttl != state.ttl:
            updates["ttl"] = ttl

    if not updates and not force_reset:
        return state

    updates.update(fresh_proof(now, config))
    return state.model_copy(update=updates)


def _store(record: DomainVerification, state: VerificationState) -> None:
    for field, value in state.model_dump().items():
        setattr(record, field, value)


def is_expired(record: DomainVerification, now: Optional[datetime] = None) -> bool:
    if record.expires_at is None:
        return False
    return to_utc(record.expires_at) < (now or utc_now())


def effective_status(record: DomainVerification, now: Optional[datetime] = None) -> str:
    """Stored status, or ``expired`` for an unproven record past its window."""
    if record.status != VERIFICATION_VERIFIED and is_expired(record, now):
        return EXPIRED
    return record.status


def dns_instruction(domain: str, host: str, value: str, ttl: int) -> Dict[str, Any]:
    """What the tenant must publish in their zone."""
    return {
        "record_type": "TXT",
        "host": host,
        "value": value,
        "ttl": ttl,
        "fqdn": f"{host}.{domain}",
        "domain": domain,
    }


def preview_verification(
    domain: str,
    ttl: Optional[int] = None,
    config: Optional[VerificationConfig] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Show the TXT record a tenant would publish, without persisting anything."""
    config = _config(config)
    domain = validate_domain(domain)
    final_ttl = config.default_ttl if ttl is None else _validate_ttl(ttl)
    return dns_instruction(domain, config.host_prefix, generate_challenge_token(now or utc_now()), final_ttl)


def initiate_verification(
    db: Session,
    domain: str,
    ttl: Optional[int] = None,
    config: Optional[VerificationConfig] = None,
    now: Optional[datetime] = None,
) -> DomainVerification:
    """
    Issue (or re-issue) the TXT challenge for a domain.

    Upserts by domain: whatever state existed before, pending or verified,
    is replaced by a fresh pending challenge.

    Raises:
        ValidationError: malformed domain or non-positive TTL
    """
    config = _config(config)
    now = now or utc_now()
    domain = validate_domain(domain)
    final_ttl = config.default_ttl if ttl is None else _validate_ttl(ttl)

    state = VerificationState(
        domain=domain,
        host=config.host_prefix,
        ttl=final_ttl,
        **fresh_proof(now, config),
    )

    for _ in range(2):
        record = db.query(DomainVerification).filter(DomainVerification.domain == domain).first()
        if record is None:
            record = DomainVerification(domain=domain)
            db.add(record)
        _store(record, state)
        try:
            db.commit()
            break
        except IntegrityError:
            # A concurrent initiate inserted the same domain; overwrite it instead
            db.rollback()
    else:
        raise ConflictError("Could not initiate verification, please retry", field="domain")

    db.refresh(record)
    logger.info("domain_verification_initiated", domain=domain, expires_at=record.expires_at.isoformat())
    return record


def get_verification_by_domain(db: Session, domain: str) -> Optional[DomainVerification]:
    return db.query(DomainVerification).filter(DomainVerification.domain == domain).first()


def check_verification(
    db: Session,
    domain: str,
    resolver: TxtResolver,
    now: Optional[datetime] = None,
) -> VerificationCheck:
    """
    Look for the challenge token in the domain's TXT records.

    A resolver error or a miss leaves status untouched; attempts and
    last_checked_at are updated either way. Resolver errors come back in
    ``resolver_error`` for the caller to diagnose.

    Raises:
        ValidationError: malformed domain
        NotFoundError: no challenge was ever issued for the domain
        ExpiredError: the challenge window has passed; initiate again
    """
    now = now or utc_now()
    domain = validate_domain(domain)

    record = get_verification_by_domain(db, domain)
    if record is None:
        raise NotFoundError("No verification found. Initiate first.")
    if is_expired(record, now):
        raise ExpiredError("Token expired. Initiate a new verification.")

    fqdn = record.fqdn
    lookup = lookup_txt(resolver, fqdn)
    matched = token_matches(record.token, lookup.normalized)

    record.attempts = (record.attempts or 0) + 1
    record.last_checked_at = now
    if matched:
        record.status = VERIFICATION_VERIFIED
        record.verified_at = now
    db.commit()
    db.refresh(record)

    logger.info(
        "domain_verification_checked",
        domain=domain,
        matched=matched,
        status=record.status,
        attempts=record.attempts,
        resolver_error=lookup.error["code"] if lookup.error else None,
    )

    return VerificationCheck(
        status=record.status,
        domain=record.domain,
        fqdn=fqdn,
        token=record.token,
        matched=matched,
        attempts=record.attempts,
        answers=lookup.normalized,
        raw_answers=lookup.raw,
        resolver_error=lookup.error,
        verified_at=record.verified_at,
        last_checked_at=record.last_checked_at,
    )


def get_verification(db: Session, verification_id: int) -> DomainVerification:
    record = db.query(DomainVerification).filter(DomainVerification.id == verification_id).first()
    if record is None:
        raise NotFoundError("Domain not found")
    return record


def list_verifications(
    db: Session,
    status: Optional[str] = None,
    q: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[DomainVerification], int]:
    """Newest first, filtered by stored status and a domain/token search."""
    query = db.query(DomainVerification)
    if status:
        if status not in VERIFICATION_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(VERIFICATION_STATUSES)}", field="status")
        query = query.filter(DomainVerification.status == status)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(DomainVerification.domain.ilike(pattern), DomainVerification.token.ilike(pattern)))

    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    total = query.count()
    items = (
        query.order_by(DomainVerification.created_at.desc(), DomainVerification.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def update_verification(
    db: Session,
    verification_id: int,
    patch: VerificationPatch,
    config: Optional[VerificationConfig] = None,
    now: Optional[datetime] = None,
    force_reset: bool = False,
) -> DomainVerification:
    """Edit domain/host/TTL; a real change restarts verification."""
    config = _config(config)
    now = now or utc_now()
    record = get_verification(db, verification_id)

    current = VerificationState.model_validate(record)
    updated = apply_change(current, patch, now, config, force_reset=force_reset)
    if updated is current:
        return record

    if updated.domain != current.domain and get_verification_by_domain(db, updated.domain):
        raise ConflictError("Domain is already registered", field="domain")

    _store(record, updated)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Domain is already registered", field="domain")
    db.refresh(record)

    logger.info("domain_verification_reset", domain=record.domain, verification_id=record.id, rotated=force_reset)
    return record


def rotate_verification(
    db: Session,
    verification_id: int,
    config: Optional[VerificationConfig] = None,
    now: Optional[datetime] = None,
) -> DomainVerification:
    """Issue a new token for the same domain; the domain must prove itself again."""
    return update_verification(db, verification_id, VerificationPatch(), config=config, now=now, force_reset=True)


def delete_verification(db: Session, verification_id: int) -> None:
    record = get_verification(db, verification_id)
    domain = record.domain
    db.delete(record)
    db.commit()
    logger.info("domain_verification_deleted", domain=domain, verification_id=verification_id)


def is_domain_verified(db: Session, domain: str) -> bool:
    return db.query(DomainVerification.id).filter(
        DomainVerification.domain == domain,
        DomainVerification.status == VERIFICATION_VERIFIED,
    ).first() is not None
