"""
Weekly report dispatch.

Every licensed domain gets one summary email per week. The receipt table's
unique (domain, week_ending) constraint is the idempotency key: a second
cycle in the same window, or a second process racing this one, finds the
receipt (or loses the insert) and reports ``already_sent``.
"""
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from wellpulse.core.config import DispatchConfig
from wellpulse.core.constants import (
    DISPATCH_FAILED,
    DISPATCH_SENT,
    DISPATCH_SKIPPED,
    REASON_ALREADY_SENT,
    REASON_NO_RECIPIENTS,
)
from wellpulse.core.logging_config import get_logger
from wellpulse.core.utils import Clock, previous_week_range, to_utc, utc_now
from wellpulse.db import get_db_context
from wellpulse.db.models import WeeklyReportDispatch
from wellpulse.schemas.report import DispatchResult
from wellpulse.services.licenses import active_license_domains, active_license_emails
from wellpulse.services.notifications import Notifier
from wellpulse.services.reports import (
    DEFAULT_THEME_LIMIT,
    build_weekly_summary,
    render_summary_html,
    render_summary_text,
    summary_subject,
)

logger = get_logger(__name__)

JOB_ID = "weekly_report_dispatch"


def in_dispatch_window(now: datetime, config: DispatchConfig) -> bool:
    now = to_utc(now)
    return now.weekday() == config.weekday and config.start_hour <= now.hour < config.end_hour


def dispatch_for_domain(
    db: Session,
    domain: str,
    notifier: Notifier,
    start: datetime,
    end: datetime,
    theme_limit: int = DEFAULT_THEME_LIMIT,
) -> DispatchResult:
    """Send one domain's summary for [start, end] unless it already went out."""
    summary = build_weekly_summary(db, domain, start=start, end=end, theme_limit=theme_limit)
    week_ending = summary.week_ending

    existing = db.query(WeeklyReportDispatch.id).filter(
        WeeklyReportDispatch.domain == domain,
        WeeklyReportDispatch.week_ending == week_ending,
    ).first()
    if existing:
        return DispatchResult(domain=domain, week_ending=week_ending,
                              status=DISPATCH_SKIPPED, reason=REASON_ALREADY_SENT)

    recipients = active_license_emails(db, domain)
    if not recipients:
        logger.info("weekly_report_skipped", domain=domain, week_ending=week_ending, reason=REASON_NO_RECIPIENTS)
        return DispatchResult(domain=domain, week_ending=week_ending,
                              status=DISPATCH_SKIPPED, reason=REASON_NO_RECIPIENTS)

    notifier.send(
        recipients,
        summary_subject(summary),
        render_summary_text(summary),
        render_summary_html(summary),
    )

    try:
        db.add(WeeklyReportDispatch(
            domain=domain,
            week_ending=week_ending,
            recipients=recipients,
            sent_at=utc_now(),
        ))
        db.commit()
    except IntegrityError:
        # Another worker recorded this week first
        db.rollback()
        logger.warning("weekly_report_receipt_conflict", domain=domain, week_ending=week_ending)
        return DispatchResult(domain=domain, week_ending=week_ending,
                              status=DISPATCH_SKIPPED, reason=REASON_ALREADY_SENT)

    logger.info("weekly_report_sent", domain=domain, week_ending=week_ending, recipients=len(recipients))
    return DispatchResult(domain=domain, week_ending=week_ending,
                          status=DISPATCH_SENT, recipients=len(recipients))


def run_weekly_dispatch_once(
    db: Session,
    notifier: Notifier,
    now: Optional[datetime] = None,
    theme_limit: int = DEFAULT_THEME_LIMIT,
) -> List[DispatchResult]:
    """
    One dispatch cycle over every domain holding an active license.

    The covered range is the seven days ending yesterday. A failure for one
    domain is logged and reported as ``failed``; the others still run.
    """
    start, end = previous_week_range(now or utc_now())
    week_ending = end.date().isoformat()

    results: List[DispatchResult] = []
    for domain in active_license_domains(db):
        try:
            results.append(dispatch_for_domain(db, domain, notifier, start, end, theme_limit))
        except Exception as e:
            db.rollback()
            logger.error("weekly_report_failed", domain=domain, week_ending=week_ending, error=str(e))
            results.append(DispatchResult(domain=domain, week_ending=week_ending,
                                          status=DISPATCH_FAILED, reason=str(e)))

    logger.info(
        "weekly_dispatch_cycle_complete",
        week_ending=week_ending,
        sent=sum(1 for r in results if r.status == DISPATCH_SENT),
        skipped=sum(1 for r in results if r.status == DISPATCH_SKIPPED),
        failed=sum(1 for r in results if r.status == DISPATCH_FAILED),
    )
    return results


class WeeklyReportScheduler:
    """Runs a dispatch cycle on an interval, but only inside the weekly window."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: Notifier,
        config: DispatchConfig,
        clock: Clock = utc_now,
    ):
        self.session_factory = session_factory
        self.notifier = notifier
        self.config = config
        self.clock = clock
        self._scheduler: Optional[BackgroundScheduler] = None

    def tick(self) -> List[DispatchResult]:
        now = self.clock()
        if not in_dispatch_window(now, self.config):
            return []
        with get_db_context(self.session_factory) as db:
            return run_weekly_dispatch_once(db, self.notifier, now=now, theme_limit=self.config.theme_limit)

    def _run(self) -> None:
        try:
            self.tick()
        except Exception:
            logger.exception("weekly_dispatch_tick_failed")

    def start(self) -> None:
        if self._scheduler is not None:
            return
        self._scheduler = BackgroundScheduler(
            job_defaults={"coalesce": True, "max_instances": 1},
            timezone="UTC",
        )
        self._scheduler.add_job(
            self._run,
            IntervalTrigger(seconds=self.config.interval_seconds),
            id=JOB_ID,
            name="Weekly report dispatch",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("weekly_dispatch_scheduler_started", interval_seconds=self.config.interval_seconds)

    def shutdown(self) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("weekly_dispatch_scheduler_stopped")

    @property
    def running(self) -> bool:
        return self._scheduler is not None
