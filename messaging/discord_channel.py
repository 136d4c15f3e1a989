"""Client posting messages to a Discord channel."""
import logging

import requests

from processor.errors import DispatchError
from source.discord_events import DISCORD_API_URL

logger = logging.getLogger(__name__)


class DiscordChannel:
    """Posts plain-content messages through the Discord API."""

    def __init__(self, timeout: int = 30, base_url: str = DISCORD_API_URL):
        self.timeout = timeout
        self.base_url = base_url.rstrip('/')

    def post_message(self, channel_id: str, api_token: str, text: str) -> None:
        """
        Post one message. The message is either fully posted or not at all.

        Args:
            channel_id: Discord channel identifier
            api_token: Bot token
            text: Message content

        Raises:
            DispatchError: If the request fails or is rejected
        """
        url = f"{self.base_url}/channels/{channel_id}/messages"

        try:
            response = requests.post(
                url,
                headers={
                    'Content-Type': 'application/json',
                    'Authorization': f"Bot {api_token}"
                },
                json={'content': text},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise DispatchError(f"Failed to post message: {e}") from e

        if not response.ok:
            raise DispatchError(f"Failed to post message: {response.text}")

        logger.debug(f"Posted message to channel {channel_id}")
