"""Core functionality for the market info monitor."""

from .diff import DiffOptions, build_digest, compute_changes, diff_snapshots, render_change
from .dispatcher import Dispatcher
from .fetcher import CatalogFetcher
from .monitor import CatalogMonitor, SnapshotStore
from .scheduler import CatalogScheduler

__all__ = [
    "CatalogFetcher",
    "CatalogMonitor",
    "CatalogScheduler",
    "DiffOptions",
    "Dispatcher",
    "SnapshotStore",
    "build_digest",
    "compute_changes",
    "diff_snapshots",
    "render_change",
]
