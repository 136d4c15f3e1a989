"""AWS Lambda handler for Discord scheduled event announcements."""
import json
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any

from messaging.discord_channel import DiscordChannel
from processor.config import NotifierConfig
from processor.errors import RunAbortedError
from processor.run_coordinator import RunCoordinator
from reporting.error_reporter import ErrorReporter
from source.discord_events import DiscordEventSource

# Attributes every LogRecord carries; anything else came from extra=
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, including fields passed via extra."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler invoked by the EventBridge schedule.

    Args:
        event: EventBridge event payload
        context: Lambda context object

    Returns:
        Response dict with statusCode and run statistics

    Raises:
        RunAbortedError: If the run aborted before dispatch began
        Exception: Any unexpected error, re-raised after logging
    """
    start_time = time.time()
    logger = logging.getLogger(__name__)

    try:
        config = NotifierConfig.from_env()
        setup_logging(config.log_level)

        logger.info(
            "Lambda execution started",
            extra={
                'window_strategy': config.window_strategy,
                'message_style': config.message_style,
                'target_timezone': config.target_timezone
            }
        )

        coordinator = RunCoordinator(
            event_source=DiscordEventSource(timeout=config.timeout_seconds),
            channel=DiscordChannel(timeout=config.timeout_seconds),
            reporter=ErrorReporter()
        )
        result = coordinator.run(datetime.now(timezone.utc), config)

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        raise

    duration = time.time() - start_time

    if not result.succeeded:
        logger.error(
            f"Announcement run aborted: {result.fatal_error}",
            extra={'duration_seconds': round(duration, 2)}
        )
        # Only an exception marks the invocation as failed
        raise RunAbortedError(result.fatal_error)

    logger.info(
        "Lambda execution completed successfully",
        extra={
            'duration_seconds': round(duration, 2),
            'events_sent': result.sent,
            'events_failed': result.failed,
            'events_skipped': result.skipped
        }
    )

    return {
        'statusCode': 200,
        'body': json.dumps({
            'message': 'Announcements completed',
            'statistics': {
                'events_fetched': result.events_fetched,
                'sent': result.sent,
                'skipped': result.skipped,
                'failed': result.failed,
                'duration_seconds': round(duration, 2)
            },
            'errors': result.errors
        })
    }
