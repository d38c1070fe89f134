"""Telegram Bot API adapter."""

import logging
from typing import Optional

import requests

from ..exceptions import DeliveryError
from ..utils.http import create_session
from .base import Bot

API_BASE = "https://api.telegram.org"


class TelegramBot(Bot):
    """Sends messages through the Telegram Bot API."""

    def __init__(
        self,
        self_id: str,
        token: str,
        logger: logging.Logger,
        platform: str = "telegram",
        timeout: int = 10,
        session: Optional[requests.Session] = None
    ):
        """Initialize Telegram bot.

        Args:
            self_id: Bot user id (the numeric prefix of the token)
            token: Bot API token
            logger: Logger instance
            platform: Platform identifier used in destinations
            timeout: Request timeout in seconds
            session: HTTP session to use (created if not given)
        """
        super().__init__(platform, self_id, logger)
        if not token:
            raise ValueError("token is required for telegram bots")
        self._token = token
        self.timeout = timeout
        self.session = session or create_session(retries=2)

    def _endpoint(self, method: str) -> str:
        return f"{API_BASE}/bot{self._token}/{method}"

    def _call(self, method: str, payload: Optional[dict] = None) -> dict:
        try:
            response = self.session.post(
                self._endpoint(method),
                json=payload or {},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise DeliveryError(f"Bot API request {method} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code != 200 or not body.get('ok'):
            description = body.get('description') or response.text
            raise DeliveryError(
                f"Bot API error {response.status_code}: {description}",
                status_code=response.status_code
            )
        return body.get('result') or {}

    def start(self) -> None:
        """Verify the token with getMe before going online."""
        me = self._call('getMe')
        if str(me.get('id')) != str(self.self_id):
            raise DeliveryError(f"Token belongs to bot {me.get('id')}, expected {self.self_id}")
        super().start()

    def send_message(self, channel_id: str, content: str, guild_id: Optional[str] = None) -> None:
        """Send a text message. ``guild_id`` has no meaning on Telegram."""
        self._call('sendMessage', {
            'chat_id': channel_id,
            'text': content,
            'disable_web_page_preview': True,
        })
        self.logger.debug(f"Message sent to {self.platform}:{channel_id}")
