"""Generic JSON webhook adapter."""

import logging
from typing import Optional

import requests

from ..exceptions import DeliveryError
from ..utils.http import create_session
from .base import Bot


class WebhookBot(Bot):
    """Posts messages as JSON to an HTTP endpoint.

    The payload is ``{"self_id", "channel_id", "guild_id", "content"}``,
    which a chat bridge on the other side turns into a platform message.
    """

    def __init__(
        self,
        platform: str,
        self_id: str,
        url: str,
        logger: logging.Logger,
        token: Optional[str] = None,
        timeout: int = 10,
        session: Optional[requests.Session] = None
    ):
        super().__init__(platform, self_id, logger)
        if not url:
            raise ValueError("url is required for webhook bots")
        self.url = url
        self.timeout = timeout
        self.session = session or create_session(retries=2)
        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'

    def send_message(self, channel_id: str, content: str, guild_id: Optional[str] = None) -> None:
        payload = {
            'self_id': self.self_id,
            'channel_id': channel_id,
            'guild_id': guild_id,
            'content': content,
        }
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise DeliveryError(f"Webhook request failed: {e}") from e

        if not response.ok:
            raise DeliveryError(
                f"Webhook error {response.status_code}: {response.text}",
                status_code=response.status_code
            )
        self.logger.debug(f"Message posted to {self.platform}:{channel_id}")
