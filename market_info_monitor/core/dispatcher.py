"""Digest delivery to configured destinations."""

import logging
import time
from typing import Callable, Iterable, List, Optional, Protocol, Tuple, Union

from ..bots.base import Bot, BotRegistry
from ..models.destination import ChannelAssignment, DeliveryResult, DeliveryStatus, Destination


class ChannelLookup(Protocol):
    """Directory operation required by the dispatcher."""

    def resolve_assignee(self, platform: str, channel_id: str) -> Optional[ChannelAssignment]:
        ...


class Dispatcher:
    """Delivers a digest to each destination in order."""

    def __init__(
        self,
        bots: BotRegistry,
        directory: Optional[ChannelLookup],
        logger: logging.Logger,
        delay_seconds: float = 0,
        sleep: Callable[[float], None] = time.sleep
    ):
        """Initialize dispatcher.

        Args:
            bots: Registry of connected bots
            directory: Channel directory used when a destination has no bot identity
            logger: Logger instance
            delay_seconds: Pause between consecutive sends
            sleep: Sleep function
        """
        self.bots = bots
        self.directory = directory
        self.logger = logger
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def _resolve(self, destination: Destination) -> Optional[Destination]:
        """Fill in the bot identity of a destination from the directory.

        Returns:
            Destination with ``self_id`` set, or None if no bot is assigned
        """
        if destination.self_id:
            return destination

        if self.directory is None:
            return None

        assignment = self.directory.resolve_assignee(destination.platform, destination.channel_id)
        if assignment is None:
            return None

        return Destination(
            platform=destination.platform,
            channel_id=destination.channel_id,
            self_id=assignment.assignee,
            guild_id=assignment.guild_id,
        )

    def prepare(self, destination: Destination) -> Union[DeliveryResult, Tuple[Bot, Destination]]:
        """Resolve the bot that should deliver to a destination.

        Args:
            destination: Target destination

        Returns:
            ``(bot, resolved destination)``, or a skipped/failed DeliveryResult
        """
        try:
            resolved = self._resolve(destination)
        except Exception as e:
            self.logger.error(f"Failed to resolve {destination.label}: {e}")
            return DeliveryResult(destination, DeliveryStatus.FAILED, f"lookup failed: {e}")

        if resolved is None:
            self.logger.debug(f"No bot assigned to {destination.label}, skipping")
            return DeliveryResult(destination, DeliveryStatus.SKIPPED, "no assignee")

        bot = self.bots.get(resolved.platform, resolved.self_id)
        if bot is None:
            self.logger.debug(
                f"Bot {resolved.platform}:{resolved.self_id} not online, skipping {destination.label}"
            )
            return DeliveryResult(destination, DeliveryStatus.SKIPPED, "bot offline")

        return bot, resolved

    def send(
        self,
        bot: Bot,
        resolved: Destination,
        content: str,
        destination: Optional[Destination] = None
    ) -> DeliveryResult:
        """Send through a resolved bot, turning exceptions into a failed result."""
        destination = destination or resolved
        try:
            bot.send_message(resolved.channel_id, content, resolved.guild_id)
        except Exception as e:
            self.logger.error(f"Failed to deliver to {destination.label}: {e}")
            return DeliveryResult(destination, DeliveryStatus.FAILED, str(e))

        return DeliveryResult(destination, DeliveryStatus.SENT)

    def deliver(self, content: str, destination: Destination) -> DeliveryResult:
        """Attempt delivery to one destination without pacing.

        Never raises; the outcome is reported in the returned result.

        Args:
            content: Digest text
            destination: Target destination

        Returns:
            DeliveryResult
        """
        target = self.prepare(destination)
        if isinstance(target, DeliveryResult):
            return target
        bot, resolved = target
        return self.send(bot, resolved, content, destination)

    def dispatch(self, content: str, destinations: Iterable[Destination]) -> List[DeliveryResult]:
        """Deliver a digest to every destination.

        Destinations are attempted in list order. The configured delay is
        slept between consecutive send attempts, never before the first.
        A failing destination never stops the remaining ones.

        Args:
            content: Digest text
            destinations: Ordered destinations

        Returns:
            One DeliveryResult per destination
        """
        results = []
        attempts = 0

        for destination in destinations:
            target = self.prepare(destination)
            if isinstance(target, DeliveryResult):
                results.append(target)
                continue

            if attempts and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
            attempts += 1

            bot, resolved = target
            results.append(self.send(bot, resolved, content, destination))

        sent = sum(1 for r in results if r.status == DeliveryStatus.SENT)
        skipped = sum(1 for r in results if r.status == DeliveryStatus.SKIPPED)
        failed = sum(1 for r in results if r.status == DeliveryStatus.FAILED)

        self.logger.info(
            f"Dispatch complete: {sent} sent, {skipped} skipped, {failed} failed"
        )

        return results
