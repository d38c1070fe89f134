"""Data models for the market info monitor."""

from .change import ChangeEvent, Created, Removed, Updated
from .destination import ChannelAssignment, DeliveryResult, DeliveryStatus, Destination
from .package import (
    CatalogEntry,
    Description,
    LocalizedText,
    PlainText,
    Snapshot,
    resolve_description,
)

__all__ = [
    "CatalogEntry",
    "ChangeEvent",
    "ChannelAssignment",
    "Created",
    "DeliveryResult",
    "DeliveryStatus",
    "Description",
    "Destination",
    "LocalizedText",
    "PlainText",
    "Removed",
    "Snapshot",
    "Updated",
    "resolve_description",
]
