"""Eligibility window computation."""
from datetime import datetime, time, timedelta, timezone as dt_timezone, tzinfo

from processor.models import TimeWindow, WindowStrategy

# The scheduler fires a few hours before the start of the target day.
ROLLING_OFFSET = timedelta(hours=3)
ROLLING_SPAN = timedelta(hours=24)


def compute_window(
    now: datetime,
    strategy: WindowStrategy,
    timezone: tzinfo
) -> TimeWindow:
    """
    Compute the window of instants whose events are announced this run.

    Args:
        now: Current instant (naive values are taken as UTC)
        strategy: Window construction strategy
        timezone: Reference timezone for calendar days

    Returns:
        TimeWindow for this run
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt_timezone.utc)

    if strategy == WindowStrategy.CALENDAR_DAY:
        tomorrow = now.astimezone(timezone).date() + timedelta(days=1)
        start = datetime.combine(tomorrow, time.min, tzinfo=timezone)
        end = datetime.combine(
            tomorrow + timedelta(days=1), time.min, tzinfo=timezone
        )
    else:
        start = now + ROLLING_OFFSET
        end = start + ROLLING_SPAN

    return TimeWindow(start=start, end=end, strategy=strategy, timezone=timezone)
