"""DomainVerification model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime

from wellpulse.db.base import Base
from wellpulse.core.constants import VERIFICATION_PENDING, VERIFY_HOST_PREFIX, DEFAULT_TXT_TTL


class DomainVerification(Base):
    __tablename__ = "domain_verifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), unique=True, nullable=False, index=True)
    host = Column(String(63), nullable=False, default=VERIFY_HOST_PREFIX)
    ttl = Column(Integer, nullable=False, default=DEFAULT_TXT_TTL)
    token = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=VERIFICATION_PENDING, index=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)
    attempts = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    @property
    def fqdn(self) -> str:
        return f"{self.host}.{self.domain}"
