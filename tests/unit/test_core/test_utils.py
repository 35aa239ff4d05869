"""Tests for UTC and week boundary helpers."""
from datetime import date, datetime, timedelta, timezone

import pytest

from wellpulse.core.utils import (
    end_of_day,
    iso_week_range,
    parse_datelike,
    previous_week_range,
    to_utc,
)

UTC = timezone.utc


@pytest.mark.unit
class TestParsing:

    def test_naive_is_utc(self):
        assert to_utc(datetime(2025, 6, 2, 9)) == datetime(2025, 6, 2, 9, tzinfo=UTC)

    def test_offset_converted(self):
        value = datetime(2025, 6, 2, 11, tzinfo=timezone(timedelta(hours=2)))
        assert to_utc(value) == datetime(2025, 6, 2, 9, tzinfo=UTC)

    def test_z_suffix(self):
        assert parse_datelike("2025-06-02T09:00:00Z") == datetime(2025, 6, 2, 9, tzinfo=UTC)

    def test_date(self):
        assert parse_datelike(date(2025, 6, 2)) == datetime(2025, 6, 2, tzinfo=UTC)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_datelike("next tuesday")


@pytest.mark.unit
class TestWeekRanges:

    def test_iso_week_midweek(self):
        start, end = iso_week_range(datetime(2025, 6, 4, 15, tzinfo=UTC))  # Wednesday
        assert start == datetime(2025, 6, 2, tzinfo=UTC)
        assert end == datetime(2025, 6, 8, 23, 59, 59, 999999, tzinfo=UTC)

    def test_iso_week_on_sunday(self):
        start, end = iso_week_range(datetime(2025, 6, 8, 23, 0, tzinfo=UTC))
        assert start.date() == date(2025, 6, 2)
        assert end.date() == date(2025, 6, 8)

    def test_previous_week_ends_yesterday(self):
        start, end = previous_week_range(datetime(2025, 6, 9, 9, 30, tzinfo=UTC))  # Monday
        assert end == end_of_day(datetime(2025, 6, 8, tzinfo=UTC))
        assert start == datetime(2025, 6, 2, tzinfo=UTC)
        assert (end - start) < timedelta(days=7)
