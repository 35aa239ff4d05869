"""Weekly report schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class ThemeCount(BaseModel):
    topic: str
    count: int


class ReportWindow(BaseModel):
    start: datetime
    end: datetime


class WeeklySummary(BaseModel):
    domain: str
    week_ending: str
    window: ReportWindow
    total: int
    red: int
    amber: int
    green: int
    themes: List[ThemeCount]


class DispatchResult(BaseModel):
    domain: str
    week_ending: Optional[str] = None
    status: str
    reason: Optional[str] = None
    recipients: int = 0


class ReportEmailRequest(BaseModel):
    domain: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    recipients: Optional[List[str]] = None


class ReportEmailResponse(BaseModel):
    queued: bool
    recipients: int
    week_ending: str
