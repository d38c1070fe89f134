"""Configuration module for the market info monitor."""

from .database import ChannelDirectory
from .settings import Settings

__all__ = ["ChannelDirectory", "Settings"]
