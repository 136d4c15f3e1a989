"""Dispatch of formatted announcements with per-event failure isolation."""
import logging

from processor.models import Event, NotificationOutcome, OutcomeStatus
from reporting.error_reporter import Reporter

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends one announcement per call and reports the outcome."""

    def __init__(
        self,
        channel,
        channel_id: str,
        api_token: str,
        reporter: Reporter
    ):
        """
        Initialize the dispatcher.

        Args:
            channel: Messaging client exposing post_message()
            channel_id: Destination channel identifier
            api_token: Bot token
            reporter: Error reporter for failed posts
        """
        self.channel = channel
        self.channel_id = channel_id
        self.api_token = api_token
        self.reporter = reporter

    def dispatch(self, event: Event, text: str) -> NotificationOutcome:
        """
        Post the announcement for an event. Failures are returned, not raised.

        Args:
            event: Event being announced
            text: Formatted announcement

        Returns:
            NotificationOutcome with status sent or failed
        """
        try:
            self.channel.post_message(self.channel_id, self.api_token, text)
        except Exception as e:
            # The reporter logs the failure; one report per failed post
            self.reporter.capture_exception(e, event_id=event.id)
            return NotificationOutcome(
                event_id=event.id,
                status=OutcomeStatus.FAILED,
                error_detail=str(e)
            )

        logger.info(
            f"Posted announcement for event {event.name}",
            extra={'event_id': event.id}
        )
        self.reporter.add_breadcrumb(
            'dispatch', f"Posted announcement for event {event.id}"
        )
        return NotificationOutcome(event_id=event.id, status=OutcomeStatus.SENT)
