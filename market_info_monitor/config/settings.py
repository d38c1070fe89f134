"""Configuration management for the market info monitor."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from ..core.fetcher import DEFAULT_ENDPOINT
from ..models.destination import Destination
from ..utils.platform import get_config_dir


@dataclass
class MarketConfig:
    """Catalog source and change line configuration."""

    endpoint: str = DEFAULT_ENDPOINT
    show_hidden: bool = False
    show_deletion: bool = False
    show_publisher: bool = False
    show_description: bool = False
    timeout: int = 30
    retries: int = 3

    def __post_init__(self):
        """Validate configuration."""
        if not self.endpoint.startswith(('http://', 'https://')):
            raise ValueError("endpoint must be an http(s) URL")

        if self.timeout < 1:
            raise ValueError("timeout must be >= 1 second")

        if not (0 <= self.retries <= 10):
            raise ValueError("retries must be between 0 and 10")


@dataclass
class SchedulerConfig:
    """Scheduler configuration."""

    interval: int = 1800000  # milliseconds

    def __post_init__(self):
        """Validate configuration."""
        if self.interval < 1000:
            raise ValueError("interval must be >= 1000 milliseconds")


@dataclass
class DispatchConfig:
    """Delivery configuration."""

    delay: int = 0  # milliseconds between consecutive sends
    rules: List[Destination] = field(default_factory=list)

    def __post_init__(self):
        """Validate configuration and convert rule mappings."""
        if self.delay < 0:
            raise ValueError("delay must be >= 0")

        self.rules = [
            rule if isinstance(rule, Destination) else Destination(**rule)
            for rule in self.rules
        ]


@dataclass
class BotConfig:
    """One bot identity used for delivery."""

    type: str
    platform: str
    self_id: str
    token: Optional[str] = None
    url: Optional[str] = None

    def __post_init__(self):
        """Validate configuration."""
        valid_types = ["telegram", "webhook"]
        if self.type not in valid_types:
            raise ValueError(f"bot type must be one of {valid_types}")

        self.self_id = str(self.self_id)

        if self.type == "telegram" and not self.token:
            raise ValueError(f"telegram bot {self.self_id} requires a token")

        if self.type == "webhook" and not self.url:
            raise ValueError(f"webhook bot {self.self_id} requires a url")


@dataclass
class DatabaseConfig:
    """Channel directory database configuration."""

    path: Optional[Path] = None

    def __post_init__(self):
        """Set default database path if not specified."""
        if self.path is None:
            self.path = get_config_dir() / 'channels.db'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()


@dataclass
class LoggingConfig:
    """Logging configuration."""

    path: Optional[Path] = None
    level: str = "INFO"
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self):
        """Validate configuration and set defaults."""
        if self.path is None:
            self.path = get_config_dir() / 'service.log'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()

        # Validate log level
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")


@dataclass
class Settings:
    """Main settings container."""

    market: MarketConfig = field(default_factory=MarketConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    bots: List[BotConfig] = field(default_factory=list)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> 'Settings':
        """Build settings from a parsed configuration mapping.

        Raises:
            TypeError: If a section has unknown keys
            ValueError: If a value is invalid
        """
        return cls(
            market=MarketConfig(**(data.get('market') or {})),
            scheduler=SchedulerConfig(**(data.get('scheduler') or {})),
            dispatch=DispatchConfig(**(data.get('dispatch') or {})),
            bots=[BotConfig(**bot) for bot in (data.get('bots') or [])],
            database=DatabaseConfig(**(data.get('database') or {})),
            logging=LoggingConfig(**(data.get('logging') or {})),
        )

    @classmethod
    def from_file(cls, config_path: Path) -> 'Settings':
        """Load settings from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Settings':
        """Load settings from file, or defaults if there is no file.

        Unlike from_file_or_default, an invalid file raises instead of
        falling back to defaults.

        Raises:
            TypeError: If a section has an unknown key
            ValueError: If config is invalid
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        if config_path.exists():
            return cls.from_file(config_path)
        return cls()

    @classmethod
    def from_file_or_default(cls, config_path: Optional[Path] = None) -> 'Settings':
        """Load settings from file or return defaults.

        Args:
            config_path: Path to configuration file (optional)

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        if config_path.exists():
            try:
                return cls.from_file(config_path)
            except Exception as e:
                logging.warning(f"Failed to load config from {config_path}: {e}")
                logging.warning("Using default configuration")
                return cls()
        else:
            logging.info(f"Config file not found at {config_path}, using defaults")
            return cls()

    def to_dict(self) -> dict:
        """Convert to a plain mapping for YAML serialization."""
        return {
            'market': {
                'endpoint': self.market.endpoint,
                'show_hidden': self.market.show_hidden,
                'show_deletion': self.market.show_deletion,
                'show_publisher': self.market.show_publisher,
                'show_description': self.market.show_description,
                'timeout': self.market.timeout,
                'retries': self.market.retries
            },
            'scheduler': {
                'interval': self.scheduler.interval
            },
            'dispatch': {
                'delay': self.dispatch.delay,
                'rules': [
                    {
                        key: value
                        for key, value in (
                            ('platform', rule.platform),
                            ('channel_id', rule.channel_id),
                            ('self_id', rule.self_id),
                            ('guild_id', rule.guild_id),
                        )
                        if value is not None
                    }
                    for rule in self.dispatch.rules
                ]
            },
            'bots': [
                {
                    key: value
                    for key, value in (
                        ('type', bot.type),
                        ('platform', bot.platform),
                        ('self_id', bot.self_id),
                        ('token', bot.token),
                        ('url', bot.url),
                    )
                    if value is not None
                }
                for bot in self.bots
            ],
            'database': {
                'path': str(self.database.path) if self.database.path else None
            },
            'logging': {
                'path': str(self.logging.path) if self.logging.path else None,
                'level': self.logging.level,
                'max_size_mb': self.logging.max_size_mb,
                'backup_count': self.logging.backup_count
            }
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save settings to YAML file.

        Args:
            config_path: Path to save configuration (default: config.yaml in config dir)
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, indent=2,
                      allow_unicode=True)
