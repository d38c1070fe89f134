import logging
from datetime import timedelta

from market_info_monitor.core.scheduler import CatalogScheduler

LOGGER = logging.getLogger("test.scheduler")


def test_start_registers_single_interval_job() -> None:
    scheduler = CatalogScheduler(LOGGER, lambda: None, interval_ms=90000)

    scheduler.start()
    try:
        job = scheduler.scheduler.get_job("catalog_check")
        assert job is not None
        assert job.trigger.interval == timedelta(seconds=90)
        assert job.max_instances == 1
        assert scheduler.is_running()
        assert scheduler.get_next_run_time() is not None
    finally:
        scheduler.stop()

    assert not scheduler.is_running()


def test_stop_before_start_is_noop() -> None:
    scheduler = CatalogScheduler(LOGGER, lambda: None)

    scheduler.stop()

    assert not scheduler.is_running()


def test_check_errors_are_swallowed() -> None:
    calls = []

    def failing_check():
        calls.append(1)
        raise RuntimeError("boom")

    scheduler = CatalogScheduler(LOGGER, failing_check)

    scheduler._safe_check_function()
    scheduler._safe_check_function()

    assert len(calls) == 2
