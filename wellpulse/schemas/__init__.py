"""Pydantic schemas for request/response validation."""
from wellpulse.schemas.auth import AdminLoginRequest
from wellpulse.schemas.common import ErrorResponse, Page, SuccessResponse
from wellpulse.schemas.domain import (
    DnsInstruction,
    DomainCheckResponse,
    DomainVerificationOut,
    DomainVerificationUpdate,
    DomainVerifyRequest,
)
from wellpulse.schemas.license import LicenseIssueRequest, LicenseOut, LicenseUpdateRequest
from wellpulse.schemas.company_user import CompanyUserCreate, CompanyUserOut, CompanyUserUpdate
from wellpulse.schemas.checkin import (
    AckRequest,
    AnswerIn,
    CheckinOut,
    CheckinSubmit,
    QuestionCreate,
    QuestionOut,
    QuestionUpdate,
)
from wellpulse.schemas.support import (
    SupportContentIn,
    SupportContentOut,
    SupportRequestIn,
    SupportRequestOut,
    SupportStatusUpdate,
)
from wellpulse.schemas.report import (
    DispatchResult,
    ReportEmailRequest,
    ReportEmailResponse,
    ReportWindow,
    ThemeCount,
    WeeklySummary,
)

__all__ = [
    "AdminLoginRequest",
    "ErrorResponse",
    "Page",
    "SuccessResponse",
    "DnsInstruction",
    "DomainCheckResponse",
    "DomainVerificationOut",
    "DomainVerificationUpdate",
    "DomainVerifyRequest",
    "LicenseIssueRequest",
    "LicenseOut",
    "LicenseUpdateRequest",
    "CompanyUserCreate",
    "CompanyUserOut",
    "CompanyUserUpdate",
    "AckRequest",
    "AnswerIn",
    "CheckinOut",
    "CheckinSubmit",
    "QuestionCreate",
    "QuestionOut",
    "QuestionUpdate",
    "SupportContentIn",
    "SupportContentOut",
    "SupportRequestIn",
    "SupportRequestOut",
    "SupportStatusUpdate",
    "DispatchResult",
    "ReportEmailRequest",
    "ReportEmailResponse",
    "ReportWindow",
    "ThemeCount",
    "WeeklySummary",
]
