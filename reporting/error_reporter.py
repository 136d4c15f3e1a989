"""Advisory error-reporting sink for breadcrumbs and exception reports."""
import logging
import threading
from dataclasses import dataclass
from typing import Any, List, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Breadcrumb:
    category: str
    message: str


class ErrorReporter:
    """
    Collects breadcrumbs for a run and reports exceptions through logging.

    Reporting never raises: a failure inside the sink is logged and dropped
    so the run itself is unaffected.
    """

    MAX_BREADCRUMBS = 100

    def __init__(self):
        self._lock = threading.Lock()
        self.breadcrumbs: List[Breadcrumb] = []
        self.reports: List[dict] = []

    def add_breadcrumb(self, category: str, message: str) -> None:
        """
        Record a short diagnostic message.

        Args:
            category: Short category such as 'selection' or 'dispatch'
            message: Human-readable message
        """
        try:
            with self._lock:
                self.breadcrumbs.append(Breadcrumb(category, message))
                del self.breadcrumbs[:-self.MAX_BREADCRUMBS]
            logger.debug(f"[{category}] {message}")
        except Exception as e:
            logger.warning(f"Failed to record breadcrumb: {e}")

    def capture_exception(self, error: BaseException, **context: Any) -> None:
        """
        Report an exception together with the breadcrumbs recorded so far.

        Args:
            error: Exception to report
            **context: Extra fields such as event_id
        """
        try:
            with self._lock:
                trail = [f"[{b.category}] {b.message}" for b in self.breadcrumbs]
                report = {
                    'error': str(error),
                    'error_type': type(error).__name__,
                    'context': dict(context),
                    'breadcrumbs': trail,
                }
                self.reports.append(report)
            logger.error(
                f"Reported {type(error).__name__}: {error}",
                extra={
                    'error_type': type(error).__name__,
                    'context': report['context'],
                    'breadcrumbs': trail,
                },
                exc_info=(type(error), error, error.__traceback__)
            )
        except Exception as e:
            logger.warning(f"Failed to report exception: {e}")


class Reporter(Protocol):
    """Sink contract. Implementations are advisory and should not raise."""

    def add_breadcrumb(self, category: str, message: str) -> None:
        ...

    def capture_exception(self, error: BaseException, **context: Any) -> None:
        ...


class GuardedReporter:
    """Wraps any Reporter so that a failing sink cannot reach the caller."""

    def __init__(self, reporter: Reporter):
        self._reporter = reporter

    def add_breadcrumb(self, category: str, message: str) -> None:
        try:
            self._reporter.add_breadcrumb(category, message)
        except Exception as e:
            logger.warning(f"Error reporter failed to record breadcrumb: {e}")

    def capture_exception(self, error: BaseException, **context: Any) -> None:
        try:
            self._reporter.capture_exception(error, **context)
        except Exception as e:
            logger.warning(f"Error reporter failed to report {error!r}: {e}")
