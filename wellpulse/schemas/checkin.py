"""Check-in question and response schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    domain: str
    question: str
    options: List[str] = []
    description: Optional[str] = None
    is_positive: bool = True
    is_support: bool = False
    is_active: bool = True


class QuestionUpdate(BaseModel):
    question: Optional[str] = None
    options: Optional[List[str]] = None
    description: Optional[str] = None
    is_positive: Optional[bool] = None
    is_support: Optional[bool] = None
    is_active: Optional[bool] = None


class QuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    domain: str
    question: str
    options: List[str]
    description: Optional[str] = None
    is_positive: bool
    is_support: bool
    is_active: bool


class AnswerIn(BaseModel):
    question_id: int
    option: str = ""
    description: Optional[str] = None


class CheckinSubmit(BaseModel):
    domain: str
    employee_id: str = Field(..., alias="employeeId")
    answers: List[AnswerIn]
    meta: Dict[str, Any] = {}
    support_requested: Optional[bool] = None

    model_config = ConfigDict(populate_by_name=True)


class AnswerSnapshot(BaseModel):
    question_id: int
    question: str
    option: str
    description: str = ""
    is_positive: bool = True
    is_support: bool = False


class CheckinOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    domain: str
    employee_id: str
    submitted_at: datetime
    answers: List[AnswerSnapshot]
    support_requested: bool
    acked: bool
    acked_at: Optional[datetime] = None
    meta: Dict[str, Any] = {}


class AckRequest(BaseModel):
    acked: bool = True
