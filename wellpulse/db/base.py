"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from wellpulse.db.models.domain_verification import DomainVerification  # noqa: F401, E402
from wellpulse.db.models.admin_user import AdminUser  # noqa: F401, E402
from wellpulse.db.models.company_user import CompanyUser  # noqa: F401, E402
from wellpulse.db.models.checkin_question import CheckinQuestion  # noqa: F401, E402
from wellpulse.db.models.checkin_response import CheckinResponse  # noqa: F401, E402
from wellpulse.db.models.weekly_report_dispatch import WeeklyReportDispatch  # noqa: F401, E402
from wellpulse.db.models.support import SupportRequest, SupportToolContent  # noqa: F401, E402
