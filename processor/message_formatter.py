"""Rendering of events into announcement text."""
from datetime import datetime, tzinfo
from typing import Optional

from processor.models import Event, MessageStyle

QUOTE_PREFIX = '> '


def format_display_time(instant: datetime, timezone: tzinfo) -> str:
    """
    Render an instant as a local time of day, e.g. '7:00 PM EDT'.

    Args:
        instant: Timezone-aware instant
        timezone: Target timezone

    Returns:
        Time-of-day string
    """
    local = instant.astimezone(timezone)
    return local.strftime('%I:%M %p %Z').lstrip('0').strip()


def headline_clause(name: str, display_time: Optional[str] = None) -> str:
    clause = f'"{name}" is coming up tomorrow'
    if display_time:
        clause += f" at {display_time}"
    return clause


def location_clause(location: Optional[str]) -> str:
    if location and location.strip():
        return f" at {location}!"
    return '!'


def description_clause(description: Optional[str], quoted: bool) -> str:
    if not description or not description.strip():
        return ''
    if quoted:
        description = '\n'.join(
            f"{QUOTE_PREFIX}{line}" for line in description.splitlines()
        )
    return f"\n{description}"


class MessageFormatter:
    """Formats one event into the announcement posted to the channel."""

    def __init__(
        self,
        style: MessageStyle = MessageStyle.QUOTED,
        timezone: Optional[tzinfo] = None
    ):
        """
        Initialize the formatter.

        Args:
            style: Plain or block-quoted description rendering
            timezone: Timezone for the start time; None omits the time
        """
        self.style = style
        self.timezone = timezone

    def format(self, event: Event) -> str:
        """
        Build the announcement text clause by clause.

        Args:
            event: Event to announce

        Returns:
            Announcement text
        """
        display_time = None
        if self.timezone is not None:
            display_time = format_display_time(event.start_time, self.timezone)

        clauses = [
            headline_clause(event.name, display_time),
            location_clause(event.location),
            description_clause(
                event.description,
                quoted=self.style == MessageStyle.QUOTED
            ),
        ]
        return ''.join(clauses)
