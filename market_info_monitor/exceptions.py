"""Exceptions raised by the market info monitor."""


class MarketInfoError(Exception):
    """Base exception for the market info monitor."""


class FetchError(MarketInfoError):
    """The catalog could not be retrieved or parsed."""

    def __init__(self, message: str, endpoint: str = ""):
        super().__init__(message)
        self.endpoint = endpoint


class DeliveryError(MarketInfoError):
    """A bot failed to deliver a message."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
