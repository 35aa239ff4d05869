"""Weekly wellbeing summary: aggregation and email rendering.

``build_weekly_summary`` is read-only. JSON, PDF and email renderings are
all derived from the same ``WeeklySummary`` so they cannot disagree.
"""
import html
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from wellpulse.core.constants import AMBER, GREEN, RED
from wellpulse.core.errors import ValidationError
from wellpulse.core.utils import DateLike, end_of_day, iso_week_range, parse_datelike, start_of_day, utc_now
from wellpulse.db.models import CheckinResponse
from wellpulse.schemas.report import ReportWindow, ThemeCount, WeeklySummary
from wellpulse.services.severity import response_severity
from wellpulse.services.themes import count_themes, top_themes

DEFAULT_THEME_LIMIT = 3


def resolve_window(
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """
    Turn optional bounds into an inclusive [start-of-day, end-of-day] window.

    With no bounds the window is the ISO week (Monday to Sunday) holding
    ``now``. With one bound the other is six days away.
    """
    try:
        start_dt = parse_datelike(start) if start is not None else None
        end_dt = parse_datelike(end) if end is not None else None
    except ValueError as e:
        raise ValidationError(str(e), field="start" if start is not None else "end")

    if start_dt is None and end_dt is None:
        return iso_week_range(now or utc_now())

    if end_dt is None:
        end_dt = start_dt + timedelta(days=6)
    if start_dt is None:
        start_dt = end_dt - timedelta(days=6)

    window_start, window_end = start_of_day(start_dt), end_of_day(end_dt)
    if window_start > window_end:
        raise ValidationError("start must be on or before end", field="start")
    return window_start, window_end


def build_weekly_summary(
    db: Session,
    domain: str,
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    now: Optional[datetime] = None,
    theme_limit: int = DEFAULT_THEME_LIMIT,
) -> WeeklySummary:
    """Severity counts and top themes for a domain's check-ins in a window."""
    window_start, window_end = resolve_window(start, end, now)

    responses = (
        db.query(CheckinResponse)
        .filter(
            CheckinResponse.domain == domain,
            CheckinResponse.submitted_at >= window_start,
            CheckinResponse.submitted_at <= window_end,
        )
        .order_by(CheckinResponse.submitted_at, CheckinResponse.id)
        .all()
    )

    counts = {RED: 0, AMBER: 0, GREEN: 0}
    all_answers = []
    for response in responses:
        answers = response.answers or []
        counts[response_severity(answers)] += 1
        all_answers.extend(answers)

    themes = top_themes(count_themes(all_answers), limit=theme_limit)

    return WeeklySummary(
        domain=domain,
        week_ending=window_end.date().isoformat(),
        window=ReportWindow(start=window_start, end=window_end),
        total=len(responses),
        red=counts[RED],
        amber=counts[AMBER],
        green=counts[GREEN],
        themes=[ThemeCount(**theme) for theme in themes],
    )


def summary_subject(summary: WeeklySummary) -> str:
    return f"Weekly wellbeing summary - {summary.domain} - {summary.week_ending}"


def render_summary_text(summary: WeeklySummary) -> str:
    if summary.themes:
        themes = "\n".join(f"  - {theme.topic}: {theme.count}" for theme in summary.themes)
    else:
        themes = "  - No recurring theme extracted this week."
    return (
        "Weekly Wellbeing Summary\n\n"
        f"Domain: {summary.domain}\n"
        f"Week Ending: {summary.week_ending}\n\n"
        f"Total submissions: {summary.total}\n"
        f"Red: {summary.red}\n"
        f"Amber: {summary.amber}\n"
        f"Green: {summary.green}\n\n"
        "Top themes\n"
        f"{themes}\n\n"
        "This summary is anonymized and excludes personal identifiers.\n"
    )


def render_summary_html(summary: WeeklySummary) -> str:
    if summary.themes:
        themes = "".join(
            f"<li>{html.escape(theme.topic)}: {theme.count}</li>" for theme in summary.themes
        )
    else:
        themes = "<li>No recurring theme extracted this week.</li>"
    return (
        "<h2>Weekly Wellbeing Summary</h2>"
        f"<p><b>Domain:</b> {html.escape(summary.domain)}</p>"
        f"<p><b>Week Ending:</b> {summary.week_ending}</p>"
        "<ul>"
        f"<li><b>Total submissions:</b> {summary.total}</li>"
        f"<li><b>Red:</b> {summary.red}</li>"
        f"<li><b>Amber:</b> {summary.amber}</li>"
        f"<li><b>Green:</b> {summary.green}</li>"
        "</ul>"
        "<h3>Top themes</h3>"
        f"<ul>{themes}</ul>"
        "<p><i>This summary is anonymized and excludes personal identifiers.</i></p>"
    )


def render_summary_email(summary: WeeklySummary) -> Tuple[str, str, str]:
    """Subject, plain-text body and HTML body for a summary email."""
    return summary_subject(summary), render_summary_text(summary), render_summary_html(summary)
