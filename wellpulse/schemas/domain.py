"""Domain verification schemas."""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DomainVerifyRequest(BaseModel):
    domain: str = Field(..., min_length=1, max_length=253)
    ttl: Optional[int] = None


class DnsInstruction(BaseModel):
    record_type: str = "TXT"
    host: str
    value: str
    ttl: int
    fqdn: str
    domain: str
    expires_at: Optional[datetime] = None


class DomainVerificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    domain: str
    host: str
    ttl: int
    token: str
    status: str
    verified_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None
    attempts: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DomainVerificationUpdate(BaseModel):
    domain: Optional[str] = None
    host: Optional[str] = None
    ttl: Optional[int] = None


class DomainCheckResponse(BaseModel):
    status: str
    domain: str
    fqdn: str
    expected: str
    matched: bool
    attempts: int
    answers: List[str]
    raw_answers: List[List[str]]
    resolver_error: Optional[Dict[str, str]] = None
    verified_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None
