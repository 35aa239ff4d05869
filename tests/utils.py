"""Test doubles and data builders."""
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from wellpulse.core.config import VerificationConfig
from wellpulse.core.errors import DeliveryError
from wellpulse.db.models import AdminUser, CheckinQuestion, DomainVerification
from wellpulse.services.checkins import create_question
from wellpulse.services.dns import TxtLookupError
from wellpulse.services.domain_verification import check_verification, initiate_verification
from wellpulse.services.licenses import issue_license


class StubResolver:
    """In-memory TXT zone. Unknown names answer like an empty record set."""

    def __init__(self):
        self.records: Dict[str, List[List[str]]] = {}
        self.errors: Dict[str, TxtLookupError] = {}
        self.calls: List[str] = []

    def publish(self, fqdn: str, *chunks: str) -> None:
        self.records.setdefault(fqdn, []).append(list(chunks))

    def fail(self, fqdn: str, name: str = "Timeout", code: str = "ETIMEOUT", message: str = "timed out") -> None:
        self.errors[fqdn] = TxtLookupError(name, code, message)

    def resolve_txt(self, fqdn: str) -> List[List[str]]:
        self.calls.append(fqdn)
        if fqdn in self.errors:
            raise self.errors[fqdn]
        if fqdn not in self.records:
            raise TxtLookupError("NoAnswer", "ENODATA", f"no TXT records at {fqdn}")
        return [list(record) for record in self.records[fqdn]]


class RecordingNotifier:
    """Keeps every message; fails for subjects that mention a domain in ``fail_domains``."""

    def __init__(self, fail_domains: Sequence[str] = ()):
        self.sent: List[dict] = []
        self.fail_domains = set(fail_domains)

    def send(self, recipients, subject, body, html=None):
        if any(domain in subject for domain in self.fail_domains):
            raise DeliveryError(f"refused: {subject}")
        self.sent.append({"recipients": list(recipients), "subject": subject, "body": body, "html": html})


class FakeQueue:
    """Stands in for NotificationQueue; nothing is delivered."""

    def __init__(self):
        self.items = []

    def enqueue(self, notification) -> bool:
        self.items.append(notification)
        return True


def verify_domain(
    db: Session,
    domain: str = "acme.com",
    now: Optional[datetime] = None,
    config: Optional[VerificationConfig] = None,
) -> DomainVerification:
    """Initiate and complete verification through a resolver that serves the token."""
    record = initiate_verification(db, domain, config=config or VerificationConfig(), now=now)
    resolver = StubResolver()
    resolver.publish(record.fqdn, record.token)
    check_verification(db, domain, resolver, now=now)
    db.refresh(record)
    return record


def license_holder(
    db: Session,
    domain: str = "acme.com",
    email: str = "lead@acme.com",
    seat_limit=None,
    now: Optional[datetime] = None,
) -> AdminUser:
    return issue_license(db, domain, "Ada", "Lovelace", email, seat_limit=seat_limit, now=now)


def licensed_tenant(
    db: Session,
    domain: str = "acme.com",
    email: str = "lead@acme.com",
    seat_limit=None,
    now: Optional[datetime] = None,
) -> AdminUser:
    verify_domain(db, domain, now=now)
    return license_holder(db, domain, email, seat_limit=seat_limit, now=now)


def question(
    db: Session,
    domain: str = "acme.com",
    text: str = "Do you feel supported by your manager?",
    options: Sequence[str] = ("Yes", "No", "Neutral"),
    **kwargs,
) -> CheckinQuestion:
    return create_question(db, domain, text, options=list(options), **kwargs)
