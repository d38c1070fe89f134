"""Plugin market update notifier."""

__version__ = "0.1.0"
