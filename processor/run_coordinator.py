"""Single-pass run: validate, fetch, select, dispatch, aggregate."""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List

from messaging.dispatcher import NotificationDispatcher
from processor.config import NotifierConfig, validate_config
from processor.errors import NotifierError
from processor.event_selector import select_events
from processor.message_formatter import MessageFormatter
from processor.models import (
    Event,
    NotificationOutcome,
    OutcomeStatus,
    RunResult,
    WindowStrategy,
)
from processor.time_window import compute_window
from reporting.error_reporter import GuardedReporter, Reporter

logger = logging.getLogger(__name__)


class RunCoordinator:
    """Orchestrates one announcement run against its collaborators."""

    def __init__(self, event_source, channel, reporter: Reporter):
        """
        Initialize the coordinator.

        Args:
            event_source: Client exposing fetch_events(guild_id, api_token)
            channel: Client exposing post_message(channel_id, api_token, text)
            reporter: Error reporter shared by every step of the run; it is
                wrapped so that its failures never change the run
        """
        self.event_source = event_source
        self.channel = channel
        self.reporter = GuardedReporter(reporter)

    def run(self, now: datetime, config: NotifierConfig) -> RunResult:
        """
        Execute one run.

        Configuration and fetch errors abort the run before anything is
        posted and are returned as the result's fatal_error. Per-event
        dispatch failures are recorded as outcomes.

        Args:
            now: Current instant
            config: Run configuration

        Returns:
            RunResult for this run
        """
        try:
            validate_config(config)
            self.reporter.add_breadcrumb('run', 'Configuration validated')

            events = self.event_source.fetch_events(
                config.guild_id, config.api_token
            )
        except NotifierError as e:
            self.reporter.capture_exception(e)
            return RunResult(fatal_error=str(e))

        self.reporter.add_breadcrumb('run', f"Fetched {len(events)} events")

        strategy = config.strategy
        window = compute_window(now, strategy, config.timezone)
        selected = select_events(events, window, self.reporter)

        selected_ids = {id(event) for event in selected}
        skipped = [
            NotificationOutcome(event_id=event.id, status=OutcomeStatus.SKIPPED)
            for event in events
            if id(event) not in selected_ids
        ]

        # Only rolling windows carry a precise instant worth announcing
        formatter = MessageFormatter(
            style=config.style,
            timezone=config.timezone
            if strategy == WindowStrategy.ROLLING_OFFSET else None
        )
        dispatcher = NotificationDispatcher(
            self.channel, config.channel_id, config.api_token, self.reporter
        )

        dispatched = self._dispatch_all(selected, formatter, dispatcher)

        result = RunResult(
            outcomes=dispatched + skipped,
            events_fetched=len(events)
        )
        logger.info(
            f"Run completed: {result.sent} sent, {result.failed} failed, "
            f"{result.skipped} skipped",
            extra=result.to_dict()
        )
        return result

    def _dispatch_all(
        self,
        events: List[Event],
        formatter: MessageFormatter,
        dispatcher: NotificationDispatcher
    ) -> List[NotificationOutcome]:
        """
        Format and dispatch every event concurrently and wait for all.

        Args:
            events: Selected events
            formatter: Message formatter for this run
            dispatcher: Notification dispatcher for this run

        Returns:
            Outcomes in the same order as events
        """
        if not events:
            return []

        def announce(event: Event) -> NotificationOutcome:
            return dispatcher.dispatch(event, formatter.format(event))

        with ThreadPoolExecutor(max_workers=len(events)) as executor:
            futures = [executor.submit(announce, event) for event in events]
            return [future.result() for future in futures]
