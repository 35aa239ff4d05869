"""WeeklyReportDispatch model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint

from wellpulse.db.base import Base


class WeeklyReportDispatch(Base):
    __tablename__ = "weekly_report_dispatches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), nullable=False, index=True)
    week_ending = Column(String(10), nullable=False)  # YYYY-MM-DD
    recipients = Column(JSON, nullable=False, default=list)
    sent_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    __table_args__ = (
        # One receipt per domain per week; the dispatch job's idempotency key
        UniqueConstraint("domain", "week_ending", name="uq_dispatch_domain_week"),
    )
