"""Time helpers shared by the verification, report and dispatch services."""
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Tuple, Union

Clock = Callable[[], datetime]

DateLike = Union[date, datetime, str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone (naive values are assumed UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datelike(value: DateLike) -> datetime:
    """Accept a date, datetime or ISO string and return an aware UTC datetime."""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid date: {value!r}")
    if isinstance(value, datetime):
        return to_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def start_of_day(dt: datetime) -> datetime:
    return to_utc(dt).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    return to_utc(dt).replace(hour=23, minute=59, second=59, microsecond=999999)


def iso_week_range(now: datetime) -> Tuple[datetime, datetime]:
    """Monday 00:00 through Sunday 23:59:59.999999 of the ISO week holding ``now``."""
    now = to_utc(now)
    monday = start_of_day(now - timedelta(days=now.weekday()))
    return monday, end_of_day(monday + timedelta(days=6))


def previous_week_range(now: datetime) -> Tuple[datetime, datetime]:
    """The seven full days ending at the end of yesterday."""
    end = end_of_day(to_utc(now) - timedelta(days=1))
    start = start_of_day(end - timedelta(days=6))
    return start, end
