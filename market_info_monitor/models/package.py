"""Catalog entry and snapshot models."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Union


@dataclass(frozen=True)
class LocalizedText:
    """Description published with per-locale variants."""

    zh: Optional[str] = None
    en: Optional[str] = None


@dataclass(frozen=True)
class PlainText:
    """Description published as a single string."""

    text: str


# None means the package has no description at all
Description = Union[LocalizedText, PlainText, None]


def resolve_description(description: Description) -> Optional[str]:
    """Pick the text to display for a description.

    Localized text wins (``zh`` first, then the ``en`` default locale),
    otherwise the plain string is used. Empty strings count as missing.

    Args:
        description: Description variant

    Returns:
        Text to display, or None if nothing usable is present
    """
    if isinstance(description, LocalizedText):
        return description.zh or description.en or None
    if isinstance(description, PlainText):
        return description.text or None
    return None


@dataclass(frozen=True)
class CatalogEntry:
    """One published package as seen in a snapshot."""

    name: str
    version: str
    hidden: bool = False
    publisher: Optional[str] = None
    description: Description = None


@dataclass(frozen=True)
class Snapshot:
    """Catalog state at one poll instant, keyed by package name."""

    entries: Mapping[str, CatalogEntry] = field(default_factory=dict)
    fetched_at: Optional[datetime] = None

    def __post_init__(self):
        """Freeze the entry mapping."""
        object.__setattr__(self, 'entries', MappingProxyType(dict(self.entries)))

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[CatalogEntry],
        show_hidden: bool = False,
        fetched_at: Optional[datetime] = None
    ) -> 'Snapshot':
        """Build a snapshot, dropping hidden entries unless allowed.

        Args:
            entries: Catalog entries in document order
            show_hidden: Keep entries flagged as hidden
            fetched_at: When the catalog was fetched

        Returns:
            Snapshot instance
        """
        mapping: Dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.hidden and not show_hidden:
                continue
            mapping[entry.name] = entry
        return cls(entries=mapping, fetched_at=fetched_at)

    def get(self, name: str) -> Optional[CatalogEntry]:
        return self.entries.get(name)

    def visible(self) -> Iterator[CatalogEntry]:
        """Iterate over entries that are not flagged as hidden."""
        return (entry for entry in self.entries.values() if not entry.hidden)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
