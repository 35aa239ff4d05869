"""CheckinResponse model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, Index

from wellpulse.db.base import Base


class CheckinResponse(Base):
    __tablename__ = "checkin_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), nullable=False)
    employee_id = Column(String(100), nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    # Snapshots: [{question_id, question, option, description, is_positive, is_support}]
    answers = Column(JSON, nullable=False, default=list)
    support_requested = Column(Boolean, nullable=False, default=False, index=True)
    acked = Column(Boolean, nullable=False, default=False)
    acked_at = Column(DateTime(timezone=True), nullable=True)
    meta = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_checkin_responses_domain_submitted", "domain", "submitted_at"),
    )
