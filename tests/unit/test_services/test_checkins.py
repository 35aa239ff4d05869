"""Unit tests for the question bank and check-in submission."""
from datetime import datetime, timezone

import pytest

from wellpulse.core.errors import ConflictError, NotFoundError, ValidationError
from wellpulse.services.checkins import (
    create_question,
    delete_question,
    list_questions,
    list_responses,
    option_means_support,
    set_acknowledged,
    submit_checkin,
    update_question,
)
from tests.utils import FakeQueue, licensed_tenant, question

NOW = datetime(2025, 6, 4, 12, 30, tzinfo=timezone.utc)


@pytest.mark.unit
class TestQuestionBank:

    def test_create_cleans_options(self, db_session):
        record = create_question(db_session, "Acme.com", " How is your workload? ", options=["Fine", "Fine", " Heavy "])
        assert record.domain == "acme.com"
        assert record.question == "How is your workload?"
        assert record.options == ["Fine", "Heavy"]
        assert record.is_active is True

    def test_duplicate_text_in_domain(self, db_session):
        question(db_session)
        with pytest.raises(ConflictError):
            question(db_session)
        question(db_session, domain="beta.io")

    def test_empty_question(self, db_session):
        with pytest.raises(ValidationError) as info:
            create_question(db_session, "acme.com", "   ")
        assert info.value.field == "question"

    def test_update_and_list_active(self, db_session):
        first = question(db_session)
        question(db_session, text="Are you sleeping well?")

        update_question(db_session, first.id, is_active=False)

        assert [q.question for q in list_questions(db_session, "acme.com", active=True)] == ["Are you sleeping well?"]
        assert len(list_questions(db_session, "acme.com")) == 2

    def test_update_text_clash(self, db_session):
        first = question(db_session)
        question(db_session, text="Are you sleeping well?")
        with pytest.raises(ConflictError):
            update_question(db_session, first.id, question="Are you sleeping well?")

    def test_delete(self, db_session):
        record = question(db_session)
        delete_question(db_session, record.id)
        with pytest.raises(NotFoundError):
            delete_question(db_session, record.id)


@pytest.mark.unit
class TestSupportDetection:

    @pytest.mark.parametrize("option,expected", [
        ("Yes", True),
        ("Yes, I need help", True),
        ("Please contact me", True),
        ("No", False),
        ("Prefer not to say", False),
        ("", False),
        ("Maybe later", False),
    ])
    def test_option_means_support(self, option, expected):
        assert option_means_support(option) is expected


@pytest.mark.unit
class TestSubmit:

    def test_snapshot_freezes_question(self, db_session):
        record = question(db_session, is_positive=False)
        response = submit_checkin(
            db_session, "acme.com", "emp-1",
            [{"question_id": record.id, "option": "No", "description": "Too many meetings"}],
            now=NOW,
        )

        update_question(db_session, record.id, question="Reworded question")
        db_session.refresh(response)

        snapshot = response.answers[0]
        assert snapshot["question"] == "Do you feel supported by your manager?"
        assert snapshot["option"] == "No"
        assert snapshot["description"] == "Too many meetings"
        assert snapshot["is_positive"] is False
        assert response.support_requested is False

    def test_required_fields(self, db_session):
        with pytest.raises(ValidationError):
            submit_checkin(db_session, "acme.com", "", [{"question_id": 1, "option": "Yes"}])
        with pytest.raises(ValidationError):
            submit_checkin(db_session, "acme.com", "emp-1", [])

    def test_question_from_other_domain(self, db_session):
        foreign = question(db_session, domain="beta.io")
        with pytest.raises(ValidationError) as info:
            submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": foreign.id, "option": "Yes"}])
        assert str(info.value) == "Question not found or not in this domain"

    def test_inactive_question(self, db_session):
        record = question(db_session, is_active=False)
        with pytest.raises(ValidationError):
            submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "Yes"}])

    def test_invalid_option(self, db_session):
        record = question(db_session)
        with pytest.raises(ValidationError) as info:
            submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "Sometimes"}])
        assert str(info.value) == "Invalid option for question: Do you feel supported by your manager?"

    def test_free_text_question_accepts_any_option(self, db_session):
        record = question(db_session, text="Anything else?", options=())
        response = submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "All good"}])
        assert response.answers[0]["option"] == "All good"

    def test_support_requested_detected(self, db_session):
        record = question(db_session, text="Would you like someone to reach out?",
                          options=("Yes", "No"), is_support=True)
        response = submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "Yes"}])
        assert response.support_requested is True

    def test_explicit_support_flag_wins(self, db_session):
        record = question(db_session, is_support=True)
        response = submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "Yes"}],
                                  support_requested=False)
        assert response.support_requested is False

    def test_notification_queued_for_admins(self, db_session):
        licensed_tenant(db_session)
        record = question(db_session)
        queue = FakeQueue()

        submit_checkin(db_session, "acme.com", "emp-7", [{"question_id": record.id, "option": "Yes"}],
                       notifications=queue, now=NOW)

        assert len(queue.items) == 1
        notification = queue.items[0]
        assert notification.recipients == ["lead@acme.com"]
        assert notification.subject == "New Check-In - emp-7 (acme.com)"
        assert "2025-06-04 12:30 UTC" in notification.body
        assert "-> Yes" in notification.body

    def test_no_admin_no_notification(self, db_session):
        record = question(db_session)
        queue = FakeQueue()
        response = submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "Yes"}],
                                  notifications=queue)
        assert response.id is not None
        assert queue.items == []


@pytest.mark.unit
class TestResponses:

    def test_list_filters(self, db_session):
        record = question(db_session)
        answers = [{"question_id": record.id, "option": "Yes"}]
        submit_checkin(db_session, "acme.com", "emp-1", answers, now=datetime(2025, 6, 2, tzinfo=timezone.utc))
        submit_checkin(db_session, "acme.com", "emp-2", answers, now=datetime(2025, 6, 5, tzinfo=timezone.utc))

        assert [r.employee_id for r in list_responses(db_session, "acme.com")] == ["emp-2", "emp-1"]
        assert [r.employee_id for r in list_responses(db_session, "acme.com", employee_id="emp-1")] == ["emp-1"]
        after = list_responses(db_session, "acme.com", start=datetime(2025, 6, 3, tzinfo=timezone.utc))
        assert [r.employee_id for r in after] == ["emp-2"]

    def test_acknowledge(self, db_session):
        record = question(db_session)
        response = submit_checkin(db_session, "acme.com", "emp-1", [{"question_id": record.id, "option": "Yes"}])

        acked = set_acknowledged(db_session, response.id, True, now=NOW)
        assert acked.acked is True
        assert acked.acked_at is not None

        cleared = set_acknowledged(db_session, response.id, False)
        assert cleared.acked is False
        assert cleared.acked_at is None

    def test_acknowledge_missing(self, db_session):
        with pytest.raises(NotFoundError):
            set_acknowledged(db_session, 99, True)
