"""License holder (admin user) schemas."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class LicenseIssueRequest(BaseModel):
    domain: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    seat_limit: Any = None


class LicenseUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    seat_limit: Any = None


class LicenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    domain: str
    license_key: str
    license_status: str
    issued_at: datetime
    seat_limit: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
