"""Selection of events falling inside the eligibility window."""
import logging
from typing import List, Optional, Sequence

from processor.models import Event, TimeWindow
from reporting.error_reporter import Reporter

logger = logging.getLogger(__name__)


def select_events(
    events: Sequence[Event],
    window: TimeWindow,
    reporter: Optional[Reporter] = None
) -> List[Event]:
    """
    Filter events to those starting inside the window, ordered by start.

    One diagnostic record is emitted per event considered.

    Args:
        events: Events fetched from the event source
        window: Eligibility window for this run
        reporter: Optional error reporter receiving breadcrumbs

    Returns:
        Selected events in ascending start order (stable for ties)
    """
    selected = []

    for event in events:
        if window.contains(event.start_time):
            message = f"Posting message for event {event.name}"
            selected.append(event)
        else:
            message = (
                f"Skipping event {event.name} since "
                f"{event.start_time.isoformat()} is outside "
                f"{window.start.isoformat()} - {window.end.isoformat()}"
            )

        logger.info(message, extra={'event_id': event.id})
        if reporter is not None:
            reporter.add_breadcrumb('selection', message)

    # sorted() is stable, equal start times keep their input order
    return sorted(selected, key=lambda event: event.start_time)
