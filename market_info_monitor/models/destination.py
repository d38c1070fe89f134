"""Delivery destination and outcome models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Destination:
    """A configured message delivery target."""

    platform: str
    channel_id: str
    self_id: Optional[str] = None
    guild_id: Optional[str] = None

    def __post_init__(self):
        """Validate required fields and normalize ids to strings."""
        for name in ("channel_id", "self_id", "guild_id"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, str(value))

        if not self.platform:
            raise ValueError("platform is required")
        if not self.channel_id:
            raise ValueError("channel_id is required")

    @property
    def label(self) -> str:
        return f"{self.platform}:{self.channel_id}"


class DeliveryStatus(str, Enum):
    """Delivery outcome enumeration."""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Outcome of one delivery attempt."""

    destination: Destination
    status: DeliveryStatus
    reason: Optional[str] = None

    def __post_init__(self):
        """Convert status to enum if it's a string."""
        if isinstance(self.status, str):
            self.status = DeliveryStatus(self.status)


@dataclass(frozen=True)
class ChannelAssignment:
    """Bot assigned to a channel in the channel directory."""

    platform: str
    channel_id: str
    assignee: str
    guild_id: Optional[str] = None
