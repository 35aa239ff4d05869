"""CheckinQuestion model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, UniqueConstraint

from wellpulse.db.base import Base


class CheckinQuestion(Base):
    __tablename__ = "checkin_questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), nullable=False, index=True)
    question = Column(String(500), nullable=False)
    # Empty list means free-form answers
    options = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    is_positive = Column(Boolean, nullable=False, default=True)
    is_support = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    __table_args__ = (
        UniqueConstraint("domain", "question", name="uq_question_domain_text"),
    )
