"""AdminUser model (license holder)."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime, Index

from wellpulse.db.base import Base
from wellpulse.core.constants import LICENSE_ACTIVE


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(254), unique=True, nullable=False)
    phone = Column(String(20), nullable=True)

    # Domain is checked against a verified DomainVerification at issue time
    domain = Column(String(253), nullable=False, index=True)

    license_key = Column(String(40), unique=True, nullable=False, index=True)
    license_status = Column(String(20), nullable=False, default=LICENSE_ACTIVE)
    issued_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    seat_limit = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    __table_args__ = (
        Index("idx_admin_users_domain_status", "domain", "license_status"),
    )
