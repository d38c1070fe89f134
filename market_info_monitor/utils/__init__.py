"""Utility modules for the market info monitor."""

from .http import create_session
from .logger import get_logger, setup_logger
from .platform import get_config_dir, is_windows

__all__ = ["create_session", "get_logger", "setup_logger", "get_config_dir", "is_windows"]
