"""Bot abstraction and registry of connected bots."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional


class Bot(ABC):
    """A bot identity able to send messages on one platform."""

    def __init__(self, platform: str, self_id: str, logger: logging.Logger):
        """Initialize bot.

        Args:
            platform: Platform identifier (e.g. "telegram")
            self_id: Bot identity on that platform
            logger: Logger instance
        """
        self.platform = platform
        self.self_id = self_id
        self.logger = logger
        self.online = False

    @property
    def sid(self) -> str:
        """Registry key of the bot."""
        return f"{self.platform}:{self.self_id}"

    def start(self) -> None:
        """Connect the bot. Subclasses verify their credentials here."""
        self.online = True

    def stop(self) -> None:
        """Disconnect the bot."""
        self.online = False

    @abstractmethod
    def send_message(self, channel_id: str, content: str, guild_id: Optional[str] = None) -> None:
        """Send a text message to a channel.

        Args:
            channel_id: Target channel
            content: Message text
            guild_id: Group/guild the channel belongs to, if any

        Raises:
            DeliveryError: If the platform rejects the message
        """


class BotRegistry:
    """Bots keyed by ``platform:self_id``."""

    def __init__(self, logger: logging.Logger, bots: Iterable[Bot] = ()):
        self.logger = logger
        self._bots: Dict[str, Bot] = {}
        for bot in bots:
            self.add(bot)

    def add(self, bot: Bot) -> None:
        if bot.sid in self._bots:
            raise ValueError(f"Duplicate bot {bot.sid}")
        self._bots[bot.sid] = bot

    def get(self, platform: str, self_id: str) -> Optional[Bot]:
        """Get a connected bot.

        Args:
            platform: Platform identifier
            self_id: Bot identity

        Returns:
            The bot, or None if unknown or offline
        """
        bot = self._bots.get(f"{platform}:{self_id}")
        if bot is None or not bot.online:
            return None
        return bot

    def all(self) -> List[Bot]:
        return list(self._bots.values())

    def start_all(self) -> None:
        """Connect every bot; a bot that fails to connect stays offline."""
        for bot in self._bots.values():
            try:
                bot.start()
                self.logger.info(f"Bot {bot.sid} online")
            except Exception as e:
                bot.online = False
                self.logger.warning(f"Bot {bot.sid} failed to start: {e}")

    def stop_all(self) -> None:
        for bot in self._bots.values():
            bot.stop()

    def __len__(self) -> int:
        return len(self._bots)
