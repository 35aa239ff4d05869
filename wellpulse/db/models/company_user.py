"""CompanyUser model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime

from wellpulse.db.base import Base


class CompanyUser(Base):
    __tablename__ = "company_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(253), nullable=False, index=True)
    name = Column(String(200), nullable=False, default="")
    email = Column(String(254), unique=True, nullable=False)
    role = Column(String(20), nullable=False, default="employee", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
