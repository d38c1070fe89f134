"""Change events derived from two snapshots."""

from dataclasses import dataclass
from typing import Union

from .package import CatalogEntry


@dataclass(frozen=True)
class Created:
    """Package present only in the current snapshot."""

    name: str
    entry: CatalogEntry


@dataclass(frozen=True)
class Updated:
    """Package present in both snapshots with a different version."""

    name: str
    old_version: str
    new_version: str


@dataclass(frozen=True)
class Removed:
    """Package present only in the previous snapshot."""

    name: str


ChangeEvent = Union[Created, Updated, Removed]
