"""Unit tests for eligibility window computation."""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from processor.models import WindowStrategy
from processor.time_window import compute_window

NEW_YORK = ZoneInfo('America/New_York')


class TestRollingOffsetWindow:
    """Test cases for the rolling 3h-27h window."""

    def test_window_bounds(self):
        """Test window starts 3 hours after now and spans 24 hours."""
        now = datetime(2024, 1, 15, 21, 0, tzinfo=timezone.utc)

        window = compute_window(now, WindowStrategy.ROLLING_OFFSET, NEW_YORK)

        assert window.start == now + timedelta(hours=3)
        assert window.end == now + timedelta(hours=27)
        assert window.strategy == WindowStrategy.ROLLING_OFFSET

    def test_half_open_boundaries(self):
        """Test start is inclusive and end is exclusive."""
        now = datetime(2024, 1, 15, 21, 0, tzinfo=timezone.utc)
        window = compute_window(now, WindowStrategy.ROLLING_OFFSET, NEW_YORK)

        assert window.contains(now + timedelta(hours=3))
        assert window.contains(now + timedelta(hours=26, minutes=59))
        assert not window.contains(now + timedelta(hours=27))
        assert not window.contains(now + timedelta(hours=2, minutes=59))

    def test_deterministic(self):
        """Test the same now always yields the same window."""
        now = datetime(2024, 3, 9, 12, 30, tzinfo=timezone.utc)

        first = compute_window(now, WindowStrategy.ROLLING_OFFSET, NEW_YORK)
        second = compute_window(now, WindowStrategy.ROLLING_OFFSET, NEW_YORK)

        assert first == second

    def test_naive_now_is_utc(self):
        """Test a naive now is interpreted as UTC."""
        naive = datetime(2024, 1, 15, 21, 0)
        aware = naive.replace(tzinfo=timezone.utc)

        window = compute_window(naive, WindowStrategy.ROLLING_OFFSET, NEW_YORK)

        assert window.start == aware + timedelta(hours=3)


class TestCalendarDayWindow:
    """Test cases for the calendar-day window."""

    def test_window_is_tomorrow_in_reference_timezone(self):
        """Test window covers tomorrow's local calendar day."""
        # 2024-01-16 02:00 UTC is still 2024-01-15 in New York
        now = datetime(2024, 1, 16, 2, 0, tzinfo=timezone.utc)

        window = compute_window(now, WindowStrategy.CALENDAR_DAY, NEW_YORK)

        assert window.start == datetime(2024, 1, 16, tzinfo=NEW_YORK)
        assert window.end == datetime(2024, 1, 17, tzinfo=NEW_YORK)

    @pytest.mark.parametrize('instant, expected', [
        (datetime(2024, 1, 16, 0, 0, tzinfo=NEW_YORK), True),
        (datetime(2024, 1, 16, 23, 59, tzinfo=NEW_YORK), True),
        (datetime(2024, 1, 17, 0, 0, tzinfo=NEW_YORK), False),
        (datetime(2024, 1, 15, 23, 59, tzinfo=NEW_YORK), False),
        # 03:00 UTC on the 17th is the evening of the 16th in New York
        (datetime(2024, 1, 17, 3, 0, tzinfo=timezone.utc), True),
    ])
    def test_date_component_equality(self, instant, expected):
        """Test membership compares local year, month and day."""
        now = datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc)
        window = compute_window(now, WindowStrategy.CALENDAR_DAY, NEW_YORK)

        assert window.contains(instant) is expected

    def test_dst_transition_day(self):
        """Test the window spans a 23-hour day at the spring DST change."""
        now = datetime(2024, 3, 9, 15, 0, tzinfo=timezone.utc)

        window = compute_window(now, WindowStrategy.CALENDAR_DAY, NEW_YORK)

        start_utc = window.start.astimezone(timezone.utc)
        end_utc = window.end.astimezone(timezone.utc)
        assert window.start.date().isoformat() == '2024-03-10'
        assert end_utc - start_utc == timedelta(hours=23)
