"""Check-in question bank and response submission."""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellpulse.core.constants import MAX_LIST_LIMIT
from wellpulse.core.errors import ConflictError, NotFoundError, ValidationError
from wellpulse.core.logging_config import get_logger
from wellpulse.core.sanitization import (
    MAX_NOTE_LENGTH,
    MAX_QUESTION_LENGTH,
    require_domain,
    sanitize_text,
)
from wellpulse.core.utils import to_utc, utc_now
from wellpulse.db.models import CheckinQuestion, CheckinResponse
from wellpulse.services.licenses import active_license_emails
from wellpulse.services.notifications import Notification, NotificationQueue

logger = get_logger(__name__)

SUPPORT_WORDS = ("yes", "help", "support", "need", "contact")


def _clean_options(options: Optional[Sequence[str]]) -> List[str]:
    cleaned: List[str] = []
    for option in options or []:
        text = sanitize_text(str(option), max_length=200)
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _clean_question(question: Optional[str]) -> str:
    text = sanitize_text(question or "", max_length=MAX_QUESTION_LENGTH)
    if not text:
        raise ValidationError("question is required", field="question")
    return text


def create_question(
    db: Session,
    domain: str,
    question: str,
    options: Optional[Sequence[str]] = None,
    description: Optional[str] = None,
    is_positive: bool = True,
    is_support: bool = False,
    is_active: bool = True,
) -> CheckinQuestion:
    domain = require_domain(domain)
    text = _clean_question(question)

    existing = db.query(CheckinQuestion.id).filter(
        CheckinQuestion.domain == domain,
        CheckinQuestion.question == text,
    ).first()
    if existing:
        raise ConflictError("Question with this text already exists", field="question")

    record = CheckinQuestion(
        domain=domain,
        question=text,
        options=_clean_options(options),
        description=description,
        is_positive=is_positive,
        is_support=is_support,
        is_active=is_active,
    )
    try:
        db.add(record)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Question with this text already exists", field="question")
    db.refresh(record)
    return record


def list_questions(db: Session, domain: str, active: Optional[bool] = None) -> List[CheckinQuestion]:
    query = db.query(CheckinQuestion).filter(CheckinQuestion.domain == require_domain(domain))
    if active is not None:
        query = query.filter(CheckinQuestion.is_active == active)
    return query.order_by(CheckinQuestion.id).all()


def get_question(db: Session, question_id: int) -> CheckinQuestion:
    record = db.query(CheckinQuestion).filter(CheckinQuestion.id == question_id).first()
    if record is None:
        raise NotFoundError("Question not found")
    return record


def update_question(db: Session, question_id: int, **fields) -> CheckinQuestion:
    """Edit a question. Past responses keep their own snapshot of it."""
    record = get_question(db, question_id)

    if fields.get("question") is not None:
        text = _clean_question(fields["question"])
        if text != record.question:
            clash = db.query(CheckinQuestion.id).filter(
                CheckinQuestion.domain == record.domain,
                CheckinQuestion.question == text,
                CheckinQuestion.id != record.id,
            ).first()
            if clash:
                raise ConflictError("Question with this text already exists", field="question")
            record.question = text
    if fields.get("options") is not None:
        record.options = _clean_options(fields["options"])
    for name in ("description", "is_positive", "is_support", "is_active"):
        if fields.get(name) is not None:
            setattr(record, name, fields[name])

    db.commit()
    db.refresh(record)
    return record


def delete_question(db: Session, question_id: int) -> None:
    record = get_question(db, question_id)
    db.delete(record)
    db.commit()


def option_means_support(option: Optional[str]) -> bool:
    """Whether the chosen option on a support question asks for help."""
    text = str(option or "").lower().strip()
    if not text:
        return False
    if "prefer not" in text or "no" in text:
        return False
    return any(word in text for word in SUPPORT_WORDS)


def snapshot_answers(
    db: Session,
    domain: str,
    answers: Sequence[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Validate answers against the domain's active questions and freeze them.

    The snapshot copies question text and flags so later edits to the
    question bank do not rewrite history.
    """
    ids = [answer.get("question_id") for answer in answers]
    questions = db.query(CheckinQuestion).filter(
        CheckinQuestion.id.in_([qid for qid in ids if qid is not None]),
        CheckinQuestion.domain == domain,
        CheckinQuestion.is_active.is_(True),
    ).all()
    by_id = {question.id: question for question in questions}

    snapshots = []
    for answer in answers:
        question = by_id.get(answer.get("question_id"))
        if question is None:
            raise ValidationError("Question not found or not in this domain", field="answers")

        option = str(answer.get("option") or "")
        if question.options and option not in question.options:
            raise ValidationError(f"Invalid option for question: {question.question}", field="answers")

        description = sanitize_text(answer.get("description") or "", max_length=MAX_NOTE_LENGTH)
        snapshots.append({
            "question_id": question.id,
            "question": question.question,
            "option": option,
            "description": description,
            "is_positive": True if question.is_positive is None else bool(question.is_positive),
            "is_support": bool(question.is_support),
        })
    return snapshots


def submit_checkin(
    db: Session,
    domain: str,
    employee_id: str,
    answers: Sequence[Dict[str, Any]],
    meta: Optional[Dict[str, Any]] = None,
    support_requested: Optional[bool] = None,
    notifications: Optional[NotificationQueue] = None,
    now: Optional[datetime] = None,
) -> CheckinResponse:
    """
    Store one employee check-in, then queue the admin notification.

    The response row is committed before anything is queued; delivery
    problems only show up in the logs.

    Raises:
        ValidationError: missing fields, unknown/inactive question, option
            not offered by the question
    """
    domain = require_domain(domain)
    employee_id = str(employee_id or "").strip()
    if not employee_id or not answers:
        raise ValidationError("domain, employeeId and answers are required.")

    snapshots = snapshot_answers(db, domain, answers)
    if support_requested is None:
        support_requested = any(
            snapshot["is_support"] and option_means_support(snapshot["option"])
            for snapshot in snapshots
        )

    response = CheckinResponse(
        domain=domain,
        employee_id=employee_id,
        answers=snapshots,
        support_requested=support_requested,
        meta=meta or {},
        submitted_at=now or utc_now(),
    )
    db.add(response)
    db.commit()
    db.refresh(response)

    logger.info(
        "checkin_submitted",
        domain=domain,
        response_id=response.id,
        answers=len(snapshots),
        support_requested=support_requested,
    )

    if notifications is not None:
        notification = checkin_notification(db, response)
        if notification is not None:
            notifications.enqueue(notification)

    return response


def checkin_notification(db: Session, response: CheckinResponse) -> Optional[Notification]:
    """Admin email for a new check-in, or None when the tenant has no active admin."""
    recipients = active_license_emails(db, response.domain)
    if not recipients:
        logger.info("checkin_notification_skipped", domain=response.domain, reason="no_recipients")
        return None

    lines = []
    for index, answer in enumerate(response.answers, start=1):
        line = f"{index}. {answer['question']}\n   -> {answer['option']}"
        if answer.get("description"):
            line += f"\n   Note: {answer['description']}"
        lines.append(line)

    submitted = to_utc(response.submitted_at).strftime("%Y-%m-%d %H:%M UTC")
    flag = "\nSupport requested: yes\n" if response.support_requested else ""
    body = (
        "A new check-in was submitted.\n\n"
        f"Employee: {response.employee_id}\n"
        f"Domain:   {response.domain}\n"
        f"When:     {submitted}\n"
        f"{flag}\n"
        "Answers:\n"
        + "\n\n".join(lines)
    )
    return Notification(
        recipients=recipients,
        subject=f"New Check-In - {response.employee_id} ({response.domain})",
        body=body,
        kind="checkin",
    )


def list_responses(
    db: Session,
    domain: str,
    employee_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = 100,
) -> List[CheckinResponse]:
    query = db.query(CheckinResponse).filter(CheckinResponse.domain == require_domain(domain))
    if employee_id:
        query = query.filter(CheckinResponse.employee_id == employee_id.strip())
    if start is not None:
        query = query.filter(CheckinResponse.submitted_at >= to_utc(start))
    if end is not None:
        query = query.filter(CheckinResponse.submitted_at <= to_utc(end))

    limit = min(MAX_LIST_LIMIT, max(1, limit))
    return query.order_by(CheckinResponse.submitted_at.desc(), CheckinResponse.id.desc()).limit(limit).all()


def set_acknowledged(db: Session, response_id: int, acked: bool, now: Optional[datetime] = None) -> CheckinResponse:
    response = db.query(CheckinResponse).filter(CheckinResponse.id == response_id).first()
    if response is None:
        raise NotFoundError("Response not found")
    response.acked = acked
    response.acked_at = (now or utc_now()) if acked else None
    db.commit()
    db.refresh(response)
    return response
