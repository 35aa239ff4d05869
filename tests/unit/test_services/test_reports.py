"""Unit tests for weekly summary aggregation and rendering."""
from datetime import datetime, timezone

import pytest

from wellpulse.core.errors import ValidationError
from wellpulse.services.checkins import submit_checkin
from wellpulse.services.reports import (
    build_weekly_summary,
    render_summary_email,
    render_summary_html,
    render_summary_text,
    resolve_window,
)
from tests.utils import question

UTC = timezone.utc


def at(day, hour=9, minute=0, second=0):
    return datetime(2025, 6, day, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def week_of_checkins(db_session):
    """Four check-ins in the week of 2025-06-02 plus one just after it."""
    manager = question(db_session)
    workload = question(db_session, text="How is your workload?", options=("Manageable", "Too heavy"))

    def submit(q, option, when, note=""):
        submit_checkin(db_session, "acme.com", "emp-1",
                       [{"question_id": q.id, "option": option, "description": note}], now=when)

    submit(manager, "Yes", at(2))
    submit(manager, "No", at(3))
    submit(manager, "Neutral", at(4))
    submit(workload, "Too heavy", at(8, 23, 59, 59), note="constant stress")
    submit(manager, "No", at(9, 0, 0, 1))
    return db_session


@pytest.mark.unit
class TestResolveWindow:

    def test_defaults_to_iso_week(self):
        start, end = resolve_window(now=at(4, 15))
        assert start == datetime(2025, 6, 2, tzinfo=UTC)
        assert end == datetime(2025, 6, 8, 23, 59, 59, 999999, tzinfo=UTC)

    def test_start_only(self):
        start, end = resolve_window(start="2025-06-02")
        assert start == datetime(2025, 6, 2, tzinfo=UTC)
        assert end.date().isoformat() == "2025-06-08"

    def test_end_only(self):
        start, end = resolve_window(end="2025-06-08T10:00:00Z")
        assert start == datetime(2025, 6, 2, tzinfo=UTC)
        assert end == datetime(2025, 6, 8, 23, 59, 59, 999999, tzinfo=UTC)

    def test_both_bounds_expand_to_whole_days(self):
        start, end = resolve_window(start=at(3, 14), end=at(3, 15))
        assert start == datetime(2025, 6, 3, tzinfo=UTC)
        assert end == datetime(2025, 6, 3, 23, 59, 59, 999999, tzinfo=UTC)

    def test_start_after_end(self):
        with pytest.raises(ValidationError):
            resolve_window(start="2025-06-09", end="2025-06-02")

    def test_unparseable(self):
        with pytest.raises(ValidationError) as info:
            resolve_window(start="last tuesday")
        assert info.value.field == "start"


@pytest.mark.unit
class TestBuildWeeklySummary:

    def test_counts_and_themes(self, week_of_checkins):
        summary = build_weekly_summary(week_of_checkins, "acme.com", start="2025-06-02")

        assert summary.week_ending == "2025-06-08"
        assert summary.total == 4
        assert (summary.red, summary.amber, summary.green) == (1, 2, 1)
        assert [(t.topic, t.count) for t in summary.themes] == [
            ("support", 3), ("manager", 3), ("workload", 1),
        ]

    def test_counts_add_up(self, week_of_checkins):
        summary = build_weekly_summary(week_of_checkins, "acme.com", now=at(5))
        assert summary.red + summary.amber + summary.green == summary.total

    def test_deterministic(self, week_of_checkins):
        first = build_weekly_summary(week_of_checkins, "acme.com", start="2025-06-02")
        second = build_weekly_summary(week_of_checkins, "acme.com", start="2025-06-02")
        assert first == second

    def test_theme_limit(self, week_of_checkins):
        summary = build_weekly_summary(week_of_checkins, "acme.com", start="2025-06-02", theme_limit=1)
        assert [t.topic for t in summary.themes] == ["support"]

    def test_other_domain_is_empty(self, week_of_checkins):
        summary = build_weekly_summary(week_of_checkins, "beta.io", start="2025-06-02")
        assert summary.total == 0
        assert summary.themes == []


@pytest.mark.unit
class TestRendering:

    def test_text_and_html(self, week_of_checkins):
        summary = build_weekly_summary(week_of_checkins, "acme.com", start="2025-06-02")

        text = render_summary_text(summary)
        assert "Domain: acme.com" in text
        assert "Total submissions: 4" in text
        assert "  - support: 3" in text

        html = render_summary_html(summary)
        assert "<li><b>Red:</b> 1</li>" in html
        assert "<li>manager: 3</li>" in html

    def test_email_parts(self, db_session):
        summary = build_weekly_summary(db_session, "acme.com", start="2025-06-02")
        subject, text, html = render_summary_email(summary)
        assert subject == "Weekly wellbeing summary - acme.com - 2025-06-08"
        assert "No recurring theme extracted this week." in text
        assert "No recurring theme extracted this week." in html
