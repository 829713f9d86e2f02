"""Tests for time-window resolution."""
from datetime import date, datetime

import pytest

from fieldops.dashboard.dates import TimeWindow, format_for_query, resolve_time_window

NOW = datetime(2024, 6, 15, 14, 30)  # Saturday


class TestCalendarFrames:
    """Tests for day/week/month windows."""

    def test_day(self):
        window = resolve_time_window('day', now=NOW)
        assert window.start == datetime(2024, 6, 15, 0, 0, 0)
        assert window.end == datetime(2024, 6, 15, 23, 59, 59, 999000)

    def test_week_starts_on_monday(self):
        window = resolve_time_window('week', now=NOW, week_start=0)
        assert window.start == datetime(2024, 6, 10)
        assert window.end == datetime(2024, 6, 16, 23, 59, 59, 999000)

    def test_week_starting_sunday(self):
        window = resolve_time_window('week', now=NOW, week_start=6)
        assert window.start == datetime(2024, 6, 9)
        assert window.end == datetime(2024, 6, 15, 23, 59, 59, 999000)

    def test_week_on_first_day(self):
        window = resolve_time_window('week', now=datetime(2024, 6, 10, 9, 0), week_start=0)
        assert window.start == datetime(2024, 6, 10)

    def test_month(self):
        window = resolve_time_window('month', now=NOW)
        assert window.start == datetime(2024, 6, 1)
        assert window.end == datetime(2024, 6, 30, 23, 59, 59, 999000)

    def test_month_leap_february(self):
        window = resolve_time_window('month', now=datetime(2024, 2, 10))
        assert window.end.date() == date(2024, 2, 29)


class TestRollingFrames:
    """Tests for windows ending now."""

    def test_year_is_rolling(self):
        window = resolve_time_window('year', now=NOW)
        assert window == TimeWindow(datetime(2023, 6, 15, 14, 30), NOW)

    def test_year_from_leap_day(self):
        window = resolve_time_window('year', now=datetime(2024, 2, 29, 12, 0))
        assert window.start == datetime(2023, 2, 28, 12, 0)

    def test_seven_days(self):
        window = resolve_time_window('7days', now=NOW)
        assert window.start == datetime(2024, 6, 9)
        assert window.end == datetime(2024, 6, 15, 23, 59, 59, 999000)


class TestUnboundedFrames:
    """Tests for all/custom."""

    def test_all(self):
        assert resolve_time_window('all', now=NOW) is None

    def test_custom_without_range(self):
        assert resolve_time_window('custom', now=NOW) is None

    def test_custom_with_partial_range(self):
        assert resolve_time_window('custom', (date(2024, 6, 1), None), now=NOW) is None

    def test_custom_dates_cover_whole_days(self):
        window = resolve_time_window('custom', (date(2024, 6, 1), date(2024, 6, 3)), now=NOW)
        assert window.start == datetime(2024, 6, 1)
        assert window.end == datetime(2024, 6, 3, 23, 59, 59, 999000)

    def test_custom_datetimes_kept(self):
        start, end = datetime(2024, 6, 1, 8), datetime(2024, 6, 1, 17)
        assert resolve_time_window('custom', (start, end), now=NOW) == TimeWindow(start, end)


def test_resolution_is_idempotent():
    for time_frame in ('day', 'week', 'month', 'year', 'all', 'custom', '30days'):
        assert resolve_time_window(time_frame, now=NOW) == resolve_time_window(time_frame, now=NOW)


def test_unknown_time_frame():
    with pytest.raises(ValueError):
        resolve_time_window('decade', now=NOW)


def test_format_for_query():
    day = resolve_time_window('day', now=NOW)
    assert format_for_query(day) == ('2024-06-15', '2024-06-15T23:59:59.999')

    year = resolve_time_window('year', now=NOW)
    assert format_for_query(year) == ('2023-06-15T14:30:00.000', '2024-06-15T14:30:00.000')
