"""Support content and support request schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class SupportContentIn(BaseModel):
    domain: str
    tips: List[str] = []
    eap: List[str] = []
    hr: List[str] = []
    crisis: List[str] = []


class SupportContentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    domain: str
    tips: List[str]
    eap: List[str]
    hr: List[str]
    crisis: List[str]
    version: int
    updated_at: Optional[datetime] = None


class SupportRequestIn(BaseModel):
    domain: str
    employee_id: str = ""
    support_type: str = "hr"
    message: str = ""
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    checkin_id: str = ""


class SupportRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    domain: str
    employee_id: str
    support_type: str
    message: str
    contact_name: str
    contact_email: str
    contact_phone: str
    checkin_id: str
    status: str
    status_updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    routed_to: int
    submitted_at: datetime


class SupportStatusUpdate(BaseModel):
    domain: str
    status: str
