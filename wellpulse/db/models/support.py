"""Support content and support request models."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Index

from wellpulse.db.base import Base


class SupportToolContent(Base):
    __tablename__ = "support_tool_contents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), nullable=False, index=True)
    # Free-text entries; routing pulls email addresses out of them
    tips = Column(JSON, nullable=False, default=list)
    eap = Column(JSON, nullable=False, default=list)
    hr = Column(JSON, nullable=False, default=list)
    crisis = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )


class SupportRequest(Base):
    __tablename__ = "support_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), nullable=False)
    employee_id = Column(String(100), nullable=False, default="", index=True)
    support_type = Column(String(20), nullable=False, default="hr", index=True)
    message = Column(Text, nullable=False, default="")
    contact_name = Column(String(200), nullable=False, default="")
    contact_email = Column(String(254), nullable=False, default="")
    contact_phone = Column(String(20), nullable=False, default="")
    checkin_id = Column(String(50), nullable=False, default="")
    status = Column(String(20), nullable=False, default="new", index=True)
    status_updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    routed_to = Column(Integer, nullable=False, default=0)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    __table_args__ = (
        Index("idx_support_requests_domain_submitted", "domain", "submitted_at"),
    )
