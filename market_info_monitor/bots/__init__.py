"""Bot adapters for message delivery."""

import logging
from typing import Iterable

from .base import Bot, BotRegistry
from .telegram import TelegramBot
from .webhook import WebhookBot


def create_bot(config, logger: logging.Logger) -> Bot:
    """Create a bot from its configuration section.

    Args:
        config: BotConfig with ``type``, ``platform``, ``self_id``, ``token`` and ``url``
        logger: Logger instance

    Returns:
        Bot instance (not started)

    Raises:
        ValueError: If the bot type is unknown
    """
    if config.type == "telegram":
        return TelegramBot(
            self_id=config.self_id,
            token=config.token,
            logger=logger,
            platform=config.platform
        )
    if config.type == "webhook":
        return WebhookBot(
            platform=config.platform,
            self_id=config.self_id,
            url=config.url,
            logger=logger,
            token=config.token
        )
    raise ValueError(f"Unknown bot type: {config.type}")


def create_registry(configs: Iterable, logger: logging.Logger) -> BotRegistry:
    """Create a registry holding one bot per configuration section."""
    return BotRegistry(logger, [create_bot(config, logger) for config in configs])


__all__ = ["Bot", "BotRegistry", "TelegramBot", "WebhookBot", "create_bot", "create_registry"]
