"""Check-in question bank and response endpoints."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status as http_status
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db, get_notification_queue
from wellpulse.core.rate_limit import RATE_LIMITS, limiter
from wellpulse.schemas import (
    AckRequest,
    CheckinOut,
    CheckinSubmit,
    QuestionCreate,
    QuestionOut,
    QuestionUpdate,
    SuccessResponse,
)
from wellpulse.services.checkins import (
    create_question,
    delete_question,
    get_question,
    list_questions,
    list_responses,
    set_acknowledged,
    submit_checkin,
    update_question,
)
from wellpulse.services.notifications import NotificationQueue

router = APIRouter()


@router.get("/questions", response_model=List[QuestionOut])
async def list_questions_endpoint(
    domain: str = Query(..., min_length=1),
    active: Optional[bool] = None,
    db: Session = Depends(get_db),
):
    return list_questions(db, domain, active=active)


@router.post("/questions", response_model=QuestionOut, status_code=http_status.HTTP_201_CREATED)
async def create_question_endpoint(body: QuestionCreate, db: Session = Depends(get_db)):
    return create_question(db, **body.model_dump())


@router.get("/questions/{question_id}", response_model=QuestionOut)
async def get_question_endpoint(question_id: int, db: Session = Depends(get_db)):
    return get_question(db, question_id)


@router.put("/questions/{question_id}", response_model=QuestionOut)
async def update_question_endpoint(question_id: int, body: QuestionUpdate, db: Session = Depends(get_db)):
    return update_question(db, question_id, **body.model_dump(exclude_unset=True))


@router.delete("/questions/{question_id}", response_model=SuccessResponse)
async def delete_question_endpoint(question_id: int, db: Session = Depends(get_db)):
    delete_question(db, question_id)
    return SuccessResponse(message="Question deleted")


@router.post("/responses", response_model=CheckinOut, status_code=http_status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["checkin_submit"])
async def submit_endpoint(
    request: Request,
    body: CheckinSubmit,
    db: Session = Depends(get_db),
    notifications: Optional[NotificationQueue] = Depends(get_notification_queue),
):
    """
    Record an employee check-in.

    Answers are validated against the domain's active questions and stored
    as snapshots. The admin email is queued after the row is committed, so
    a mail outage never fails the submission.

    Example:
        Request:
            POST /api/v1/checkin/responses
            {
                "domain": "acme.com",
                "employeeId": "emp-42",
                "answers": [{"question_id": 1, "option": "Yes"}]
            }
    """
    return submit_checkin(
        db,
        body.domain,
        body.employee_id,
        [answer.model_dump() for answer in body.answers],
        meta=body.meta,
        support_requested=body.support_requested,
        notifications=notifications,
    )


@router.get("/responses", response_model=List[CheckinOut])
async def list_responses_endpoint(
    domain: str = Query(..., min_length=1),
    employee_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return list_responses(db, domain, employee_id=employee_id, start=start, end=end, limit=limit)


@router.patch("/responses/{response_id}/ack", response_model=CheckinOut)
async def ack_endpoint(response_id: int, body: AckRequest, db: Session = Depends(get_db)):
    return set_acknowledged(db, response_id, body.acked)
