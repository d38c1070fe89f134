import logging

import pytest

from market_info_monitor.core.diff import DiffOptions
from market_info_monitor.core.monitor import CatalogMonitor, SnapshotStore
from market_info_monitor.exceptions import FetchError

from .fakes import FakeFetcher, make_snapshot

LOGGER = logging.getLogger("test.monitor")


def test_store_replaces_and_returns_previous() -> None:
    store = SnapshotStore()
    first = make_snapshot(a="1")
    second = make_snapshot(a="2")

    assert not store.is_seeded()
    assert store.replace(first) is None
    assert store.replace(second) is first
    assert store.current is second


def test_seed_stores_snapshot_without_diff() -> None:
    snapshot = make_snapshot(a="1")
    monitor = CatalogMonitor(FakeFetcher(snapshot), LOGGER)

    assert monitor.seed() is snapshot
    assert monitor.store.current is snapshot


def test_check_diffs_and_replaces_snapshot() -> None:
    previous = make_snapshot(a="1.0", b="2.0")
    current = make_snapshot(b="2.1", c="1.0")
    monitor = CatalogMonitor(FakeFetcher(previous, current), LOGGER, DiffOptions(show_deletion=True))
    monitor.seed()

    lines = monitor.check()

    assert lines == ["删除：a", "新增：c", "更新：b (2.0 → 2.1)"]
    assert monitor.store.current is current


def test_check_replaces_snapshot_even_without_changes() -> None:
    first = make_snapshot(a="1")
    second = make_snapshot(a="1")
    monitor = CatalogMonitor(FakeFetcher(first, second), LOGGER)
    monitor.seed()

    assert monitor.check() == []
    assert monitor.store.current is second


def test_failed_fetch_leaves_store_untouched() -> None:
    seeded = make_snapshot(a="1")
    monitor = CatalogMonitor(FakeFetcher(seeded, FetchError("down")), LOGGER)
    monitor.seed()

    with pytest.raises(FetchError):
        monitor.check()

    assert monitor.store.current is seeded


def test_check_on_empty_store_only_seeds() -> None:
    snapshot = make_snapshot(a="1", b="1")
    monitor = CatalogMonitor(FakeFetcher(snapshot), LOGGER)

    assert monitor.check() == []
    assert monitor.store.current is snapshot
