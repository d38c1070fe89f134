"""Logging configuration for the market info monitor."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

import coloredlogs

ROOT_LOGGER = "market_info_monitor"

# Third-party loggers whose warnings matter to the service: APScheduler
# reports skipped runs when a cycle outlasts the interval.
THIRD_PARTY_LOGGERS = {
    "apscheduler": logging.WARNING,
    "urllib3": logging.WARNING,
}


def _build_handlers(
    log_file: Optional[Path],
    max_size_mb: int,
    backup_count: int,
    console: bool
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        handlers.append(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(coloredlogs.ColoredFormatter(
            fmt='%(asctime)s - %(levelname)s - [%(name)s] %(message)s',
            datefmt='%H:%M:%S'
        ))
        handlers.append(console_handler)

    return handlers


def setup_logger(
    name: str = ROOT_LOGGER,
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_size_mb: int = 10,
    backup_count: int = 5,
    console: bool = True
) -> logging.Logger:
    """Set up a logger with file and console handlers.

    The same handlers are attached to the APScheduler and urllib3 loggers
    so their warnings end up in the service log.

    Args:
        name: Logger name
        log_file: Path to log file (if None, no file logging)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_size_mb: Maximum log file size in MB before rotation
        backup_count: Number of backup log files to keep
        console: Whether to add console handler

    Returns:
        Configured logger instance
    """
    handlers = _build_handlers(log_file, max_size_mb, backup_count, console)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()
    logger.propagate = False
    for handler in handlers:
        logger.addHandler(handler)

    for third_party, third_party_level in THIRD_PARTY_LOGGERS.items():
        other = logging.getLogger(third_party)
        other.setLevel(third_party_level)
        other.handlers.clear()
        other.propagate = False
        for handler in handlers:
            other.addHandler(handler)

    return logger


def get_logger(component: str, parent: Optional[logging.Logger] = None) -> logging.Logger:
    """Get the logger of one component.

    Args:
        component: Component name (e.g. "fetcher")
        parent: Parent logger (the service root logger if not given)

    Returns:
        Child logger sharing the parent's handlers
    """
    parent = parent or logging.getLogger(ROOT_LOGGER)
    return parent.getChild(component)
