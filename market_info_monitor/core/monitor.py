"""Catalog monitoring and change detection."""

import logging
from typing import List, Optional

from .diff import DiffOptions, diff_snapshots
from .fetcher import CatalogFetcher
from ..models.package import Snapshot


class SnapshotStore:
    """Holds the snapshot from the last successful poll."""

    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._snapshot = snapshot

    @property
    def current(self) -> Optional[Snapshot]:
        return self._snapshot

    def is_seeded(self) -> bool:
        return self._snapshot is not None

    def replace(self, snapshot: Snapshot) -> Optional[Snapshot]:
        """Swap in a new snapshot.

        Args:
            snapshot: Snapshot to store

        Returns:
            The snapshot that was discarded
        """
        previous, self._snapshot = self._snapshot, snapshot
        return previous


class CatalogMonitor:
    """Detects catalog changes between polls."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        logger: logging.Logger,
        options: Optional[DiffOptions] = None,
        store: Optional[SnapshotStore] = None
    ):
        """Initialize catalog monitor.

        Args:
            fetcher: Catalog fetcher
            logger: Logger instance
            options: Verbosity switches for change lines
            store: Snapshot store (a fresh empty one if not given)
        """
        self.fetcher = fetcher
        self.logger = logger
        self.options = options or DiffOptions()
        self.store = store or SnapshotStore()

    def seed(self) -> Snapshot:
        """Fetch the catalog and store it without diffing.

        Returns:
            The stored snapshot

        Raises:
            FetchError: If the catalog cannot be fetched
        """
        snapshot = self.fetcher.fetch()
        self.store.replace(snapshot)
        self.logger.info(f"Seeded catalog snapshot with {len(snapshot)} package(s)")
        return snapshot

    def check(self) -> List[str]:
        """Check the catalog for changes.

        This is the main method of a poll cycle:
        1. Fetch the current catalog
        2. Compare with the stored snapshot
        3. Replace the stored snapshot

        The store is replaced whether or not anything changed. If nothing was
        stored yet the fetch only seeds the store.

        Returns:
            Sorted change lines (empty if none)

        Raises:
            FetchError: If the fetch fails; the store is left untouched
        """
        self.logger.info("Checking catalog for changes...")

        current = self.fetcher.fetch()
        previous = self.store.replace(current)

        if previous is None:
            self.logger.info(f"No previous snapshot, seeded with {len(current)} package(s)")
            return []

        lines = diff_snapshots(previous, current, self.options)

        if lines:
            self.logger.info(f"Found {len(lines)} change(s) in catalog")
        else:
            self.logger.debug("No catalog changes found")

        return lines
