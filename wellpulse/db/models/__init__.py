"""Database models."""
from wellpulse.db.models.domain_verification import DomainVerification
from wellpulse.db.models.admin_user import AdminUser
from wellpulse.db.models.company_user import CompanyUser
from wellpulse.db.models.checkin_question import CheckinQuestion
from wellpulse.db.models.checkin_response import CheckinResponse
from wellpulse.db.models.weekly_report_dispatch import WeeklyReportDispatch
from wellpulse.db.models.support import SupportRequest, SupportToolContent

__all__ = [
    "DomainVerification",
    "AdminUser",
    "CompanyUser",
    "CheckinQuestion",
    "CheckinResponse",
    "WeeklyReportDispatch",
    "SupportRequest",
    "SupportToolContent",
]
