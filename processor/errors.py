"""Exceptions raised by the announcer."""


class NotifierError(Exception):
    """Base class for announcer errors."""


class ConfigurationError(NotifierError):
    """Required configuration is missing or invalid. Aborts the run."""


class EventSourceError(NotifierError):
    """Scheduled events could not be fetched. Aborts the run."""


class DispatchError(NotifierError):
    """A single announcement could not be posted."""


class RunAbortedError(NotifierError):
    """Raised by the entry point so the scheduler sees the run as failed."""
