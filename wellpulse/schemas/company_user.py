"""Company user schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class CompanyUserCreate(BaseModel):
    domain: str
    email: str
    name: str = ""
    role: str = "employee"


class CompanyUserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None


class CompanyUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    domain: str
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
