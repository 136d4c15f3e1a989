"""Runtime configuration read from environment variables."""
import os
from dataclasses import dataclass
from typing import Mapping, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from processor.errors import ConfigurationError
from processor.models import MessageStyle, WindowStrategy

DEFAULT_WINDOW_STRATEGY = WindowStrategy.ROLLING_OFFSET.value
DEFAULT_MESSAGE_STYLE = MessageStyle.QUOTED.value
DEFAULT_TIMEZONE = 'America/New_York'


def _parse_timeout(raw: str) -> Union[int, str]:
    """Return the timeout as an int, or the raw text for validation to reject."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        return raw


@dataclass(frozen=True)
class NotifierConfig:
    """Credentials, identifiers and deployment choices for one run."""
    api_token: str
    guild_id: str
    channel_id: str
    window_strategy: str = DEFAULT_WINDOW_STRATEGY
    message_style: str = DEFAULT_MESSAGE_STYLE
    target_timezone: str = DEFAULT_TIMEZONE
    timeout_seconds: Union[int, str] = 30
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> 'NotifierConfig':
        """
        Build configuration from environment variables.

        Missing credentials are read as empty strings and a non-numeric
        timeout is kept as text, so that validation, not construction,
        decides whether the run may proceed.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            NotifierConfig instance
        """
        if environ is None:
            environ = os.environ

        return cls(
            api_token=environ.get('DISCORD_API_TOKEN', ''),
            guild_id=environ.get('DISCORD_GUILD_ID', ''),
            channel_id=environ.get('DISCORD_ANNOUNCEMENTS_CHANNEL_ID', ''),
            window_strategy=environ.get('WINDOW_STRATEGY', DEFAULT_WINDOW_STRATEGY),
            message_style=environ.get('MESSAGE_STYLE', DEFAULT_MESSAGE_STYLE),
            target_timezone=environ.get('TARGET_TIMEZONE', DEFAULT_TIMEZONE),
            timeout_seconds=_parse_timeout(environ.get('TIMEOUT_SECONDS', '30')),
            log_level=environ.get('LOG_LEVEL', 'INFO')
        )

    @property
    def strategy(self) -> WindowStrategy:
        return WindowStrategy(self.window_strategy)

    @property
    def style(self) -> MessageStyle:
        return MessageStyle(self.message_style)

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.target_timezone)


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_config(config: NotifierConfig) -> None:
    """
    Validate configuration before any network call is made.

    Args:
        config: Configuration to check

    Raises:
        ConfigurationError: On the first missing or invalid value
    """
    if _is_blank(config.api_token):
        raise ConfigurationError('Failed to find Discord API token')

    if _is_blank(config.guild_id):
        raise ConfigurationError('Failed to find Discord guild ID')

    if _is_blank(config.channel_id):
        raise ConfigurationError(
            'Failed to find Discord announcements channel ID'
        )

    try:
        WindowStrategy(config.window_strategy)
    except ValueError:
        raise ConfigurationError(
            f"Unknown window strategy: {config.window_strategy!r}"
        ) from None

    try:
        MessageStyle(config.message_style)
    except ValueError:
        raise ConfigurationError(
            f"Unknown message style: {config.message_style!r}"
        ) from None

    try:
        ZoneInfo(config.target_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(
            f"Unknown timezone: {config.target_timezone!r}"
        ) from None

    timeout = config.timeout_seconds
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise ConfigurationError(f"Invalid timeout: {timeout!r}")
