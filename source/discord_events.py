"""Client for a Discord guild's scheduled events."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from processor.errors import EventSourceError
from processor.models import Event

logger = logging.getLogger(__name__)

DISCORD_API_URL = "https://discord.com/api/v10"


def parse_start_time(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a timezone-aware instant.

    Args:
        value: Timestamp such as '2024-01-15T19:00:00.000000+00:00' or
            '2024-01-15T19:00:00Z'

    Returns:
        Timezone-aware datetime; naive timestamps are taken as UTC

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DiscordEventSource:
    """Fetches scheduled events for a guild from the Discord API."""

    def __init__(self, timeout: int = 30, base_url: str = DISCORD_API_URL):
        """
        Initialize the event source.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            base_url: Discord API root
        """
        self.timeout = timeout
        self.base_url = base_url.rstrip('/')

    def fetch_events(self, guild_id: str, api_token: str) -> List[Event]:
        """
        Fetch all scheduled events of a guild in a single request.

        Args:
            guild_id: Discord guild identifier
            api_token: Bot token

        Returns:
            List of Event objects

        Raises:
            EventSourceError: If the request fails or is rejected
        """
        url = f"{self.base_url}/guilds/{guild_id}/scheduled-events"
        logger.info(f"Fetching scheduled events for guild {guild_id}")

        try:
            response = requests.get(
                url,
                headers={
                    'Content-Type': 'application/json',
                    'Authorization': f"Bot {api_token}"
                },
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise EventSourceError(f"Failed to get scheduled events: {e}") from e

        if not response.ok:
            raise EventSourceError(
                f"Failed to get scheduled events: {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise EventSourceError(
                f"Failed to decode scheduled events: {e}"
            ) from e

        if not isinstance(payload, list):
            raise EventSourceError(
                f"Unexpected scheduled events payload: {type(payload).__name__}"
            )

        events = []
        for item in payload:
            try:
                event = self._parse_event(item)
                if event:
                    events.append(event)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Failed to parse scheduled event: {e}")
                continue

        logger.info(f"Successfully fetched {len(events)} events")
        return events

    def _parse_event(self, item: Dict[str, Any]) -> Optional[Event]:
        """
        Parse a single scheduled event object.

        Args:
            item: Scheduled event as returned by Discord

        Returns:
            Event object or None if required fields are missing
        """
        event_id = item.get('id')
        name = item.get('name')
        start = item.get('scheduled_start_time')

        if not event_id or not name or not start:
            logger.warning(
                f"Scheduled event missing required fields: {item.get('id')}"
            )
            return None

        metadata = item.get('entity_metadata') or {}

        return Event(
            id=str(event_id),
            name=name,
            start_time=parse_start_time(start),
            description=item.get('description') or None,
            location=metadata.get('location') or None
        )
