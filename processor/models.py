"""Data models for event selection and announcement."""
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Dict, List, Optional


class WindowStrategy(str, Enum):
    """How the eligibility window is built from the current instant."""
    CALENDAR_DAY = 'calendar_day'
    ROLLING_OFFSET = 'rolling_offset'


class MessageStyle(str, Enum):
    """Announcement rendering variant."""
    PLAIN = 'plain'
    QUOTED = 'quoted'


class OutcomeStatus(str, Enum):
    SENT = 'sent'
    SKIPPED = 'skipped'
    FAILED = 'failed'


@dataclass(frozen=True)
class Event:
    """Scheduled event as returned by the event source."""
    id: str
    name: str
    start_time: datetime
    description: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class TimeWindow:
    """Eligibility interval computed once per run."""
    start: datetime
    end: datetime
    strategy: WindowStrategy
    timezone: tzinfo

    def contains(self, instant: datetime) -> bool:
        """
        Check whether an instant falls inside the window.

        Calendar-day windows compare the local (year, month, day) of the
        instant in the reference timezone. Rolling windows are half-open.
        """
        if self.strategy == WindowStrategy.CALENDAR_DAY:
            local = instant.astimezone(self.timezone)
            return local.date() == self.start.date()
        return self.start <= instant < self.end


@dataclass
class NotificationOutcome:
    """Result of handling a single event."""
    event_id: str
    status: OutcomeStatus
    error_detail: Optional[str] = None


@dataclass
class RunResult:
    """Aggregated result of one run."""
    outcomes: List[NotificationOutcome] = field(default_factory=list)
    fatal_error: Optional[str] = None
    events_fetched: int = 0

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def sent(self) -> int:
        return self._count(OutcomeStatus.SENT)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        """Per-event failures do not fail the run; only fatal aborts do."""
        return self.fatal_error is None

    @property
    def errors(self) -> List[str]:
        return [
            f"{outcome.event_id}: {outcome.error_detail}"
            for outcome in self.outcomes
            if outcome.status == OutcomeStatus.FAILED
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'events_fetched': self.events_fetched,
            'sent': self.sent,
            'skipped': self.skipped,
            'failed': self.failed,
            'fatal_error': self.fatal_error,
            'errors': self.errors,
        }
