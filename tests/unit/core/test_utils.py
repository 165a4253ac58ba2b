"""
Unit Tests for Core Utilities.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from calendar_server.core.utils import (
    iter_days,
    month_bounds,
    parse_day,
    to_utc_day,
    utc_now,
    week_bounds,
)


class TestUtcNow:
    def test_is_naive(self):
        assert utc_now().tzinfo is None

    def test_is_close_to_real_utc(self):
        real = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(utc_now() - real) < timedelta(seconds=5)


class TestToUtcDay:
    def test_date_unchanged(self):
        assert to_utc_day(date(2025, 10, 8)) == date(2025, 10, 8)

    def test_naive_datetime_truncated(self):
        assert to_utc_day(datetime(2025, 10, 8, 23, 59, 59)) == date(2025, 10, 8)

    def test_aware_datetime_converted_first(self):
        tokyo_morning = datetime(2025, 10, 9, 2, 0, tzinfo=timezone(timedelta(hours=9)))
        assert to_utc_day(tokyo_morning) == date(2025, 10, 8)


class TestParseDay:
    def test_valid(self):
        assert parse_day("2025-10-08") == date(2025, 10, 8)

    def test_leap_day(self):
        assert parse_day("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize(
        "value",
        ["", "2025-13-01", "2025-02-30", "2023-02-29", "08-10-2025", "2025/10/08",
         "2025-1-8", "20251008", "2025-10-08T00:00:00", " 2025-10-08", "٢٠٢٥-١٠-٠٨"],
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_day(value)


class TestWeekBounds:
    @pytest.mark.parametrize("offset", range(7))
    def test_every_weekday_maps_to_same_monday(self, offset):
        monday = date(2025, 10, 6)
        assert week_bounds(monday + timedelta(days=offset)) == (monday, date(2025, 10, 13))

    def test_spans_year_boundary(self):
        assert week_bounds(date(2026, 1, 1)) == (date(2025, 12, 29), date(2026, 1, 5))

    @pytest.mark.parametrize("day", [date(9999, 12, 27), date(9999, 12, 31)])
    def test_last_week_of_calendar_is_open_ended(self, day):
        assert week_bounds(day) == (date(9999, 12, 27), None)

    def test_week_ending_exactly_at_calendar_end(self):
        assert week_bounds(date(9999, 12, 24)) == (date(9999, 12, 20), date(9999, 12, 27))

    def test_first_week_of_calendar(self):
        assert week_bounds(date.min) == (date.min, date(1, 1, 8))


class TestMonthBounds:
    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2025, 10, 8), (date(2025, 10, 1), date(2025, 11, 1))),
            (date(2025, 10, 31), (date(2025, 10, 1), date(2025, 11, 1))),
            (date(2025, 12, 15), (date(2025, 12, 1), date(2026, 1, 1))),
            (date(2024, 2, 29), (date(2024, 2, 1), date(2024, 3, 1))),
        ],
    )
    def test_bounds(self, day, expected):
        assert month_bounds(day) == expected

    def test_december_9999_is_open_ended(self):
        assert month_bounds(date.max) == (date(9999, 12, 1), None)

    def test_november_9999_still_bounded(self):
        assert month_bounds(date(9999, 11, 30)) == (date(9999, 11, 1), date(9999, 12, 1))


class TestIterDays:
    def test_half_open(self):
        days = list(iter_days(date(2025, 10, 30), date(2025, 11, 2)))
        assert days == [date(2025, 10, 30), date(2025, 10, 31), date(2025, 11, 1)]

    def test_empty_when_start_not_before_end(self):
        assert list(iter_days(date(2025, 10, 8), date(2025, 10, 8))) == []
        assert list(iter_days(date(2025, 10, 9), date(2025, 10, 8))) == []

    def test_open_end_stops_at_calendar_end(self):
        assert list(iter_days(date(9999, 12, 30), None)) == [date(9999, 12, 30), date.max]
