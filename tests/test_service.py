import logging

import pytest

from market_info_monitor.bots.base import BotRegistry
from market_info_monitor.config.settings import (
    DatabaseConfig,
    DispatchConfig,
    LoggingConfig,
    MarketConfig,
    Settings,
)
from market_info_monitor.exceptions import FetchError
from market_info_monitor.models.destination import ChannelAssignment, DeliveryStatus, Destination
from market_info_monitor.service import MarketInfoService

from .fakes import FakeBot, FakeDirectory, FakeFetcher, make_snapshot

LOGGER = logging.getLogger("test.service")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        market=MarketConfig(show_deletion=True),
        dispatch=DispatchConfig(
            delay=1500,
            rules=[
                Destination("telegram", "-100", self_id="1"),
                Destination("onebot", "unassigned"),
                Destination("onebot", "group", guild_id=None),
            ],
        ),
        database=DatabaseConfig(path=tmp_path / "channels.db"),
        logging=LoggingConfig(path=tmp_path / "service.log"),
    )


def _service(settings: Settings, *snapshots, bots=None, directory=None, sleeps=None) -> MarketInfoService:
    return MarketInfoService(
        settings=settings,
        fetcher=FakeFetcher(*snapshots),
        bots=bots if bots is not None else BotRegistry(LOGGER),
        directory=directory if directory is not None else FakeDirectory(),
        sleep=(sleeps.append if sleeps is not None else lambda seconds: None),
        console=False,
    )


def _online_bots():
    telegram = FakeBot("telegram", "1", LOGGER)
    onebot = FakeBot("onebot", "10", LOGGER)
    registry = BotRegistry(LOGGER, [telegram, onebot])
    registry.start_all()
    return registry, telegram, onebot


def test_cycle_dispatches_digest_to_destinations(settings) -> None:
    registry, telegram, onebot = _online_bots()
    directory = FakeDirectory([ChannelAssignment("onebot", "group", "10", guild_id="g")])
    sleeps = []
    service = _service(
        settings,
        make_snapshot(a="1.0", b="2.0"),
        make_snapshot(b="2.1", c="1.0"),
        bots=registry,
        directory=directory,
        sleeps=sleeps,
    )
    service.monitor.seed()

    results = service.run_cycle()

    expected = "[插件市场更新]\n删除：a\n新增：c\n更新：b (2.0 → 2.1)"
    assert [r.status for r in results] == [
        DeliveryStatus.SENT, DeliveryStatus.SKIPPED, DeliveryStatus.SENT,
    ]
    assert telegram.sent == [("-100", expected, None)]
    assert onebot.sent == [("group", expected, "g")]
    assert sleeps == [1.5]


def test_unchanged_catalog_sends_nothing(settings) -> None:
    registry, telegram, onebot = _online_bots()
    service = _service(settings, make_snapshot(a="1"), make_snapshot(a="1"), bots=registry)
    service.monitor.seed()

    assert service.run_cycle() == []
    assert telegram.sent == []
    assert onebot.sent == []


def test_failed_fetch_keeps_snapshot_and_next_cycle_diffs_against_it(settings) -> None:
    registry, telegram, _ = _online_bots()
    seeded = make_snapshot(a="1")
    service = _service(
        settings,
        seeded,
        FetchError("down"),
        make_snapshot(a="2"),
        bots=registry,
    )
    service.monitor.seed()

    assert service.run_cycle() == []
    assert service.monitor.store.current is seeded

    service.run_cycle()
    assert telegram.sent[0][1] == "[插件市场更新]\n更新：a (1 → 2)"


def test_ready_seeds_without_dispatch_and_starts_scheduler(settings) -> None:
    registry, telegram, _ = _online_bots()
    snapshot = make_snapshot(a="1")
    service = _service(settings, snapshot, bots=registry)

    service.ready()
    try:
        assert service.monitor.store.current is snapshot
        assert service.scheduler.is_running()
        assert telegram.sent == []
    finally:
        service.shutdown()

    assert not service.scheduler.is_running()
    assert registry.get("telegram", "1") is None


def test_ready_survives_failed_seed(settings) -> None:
    service = _service(settings, FetchError("down"), make_snapshot(a="1"))

    service.ready()
    try:
        assert service.monitor.store.current is None
        # The first successful cycle seeds instead of reporting every package
        assert service.run_cycle() == []
        assert service.monitor.store.current is not None
    finally:
        service.shutdown()


def test_rule_changes_apply_to_next_cycle(settings) -> None:
    registry, telegram, _ = _online_bots()
    service = _service(
        settings,
        make_snapshot(a="1"),
        make_snapshot(a="2"),
        make_snapshot(a="3"),
        bots=registry,
    )
    service.monitor.seed()

    service.run_cycle()
    settings.dispatch.rules.append(Destination("telegram", "-200", self_id="1"))
    service.run_cycle()

    assert [channel for channel, _, _ in telegram.sent] == ["-100", "-100", "-200"]


def test_invalid_config_file_stops_service(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "dispatch:\n  rules:\n    - platform: onebot\n      channelId: '123'\n",
        encoding="utf-8",
    )

    with pytest.raises(TypeError):
        MarketInfoService(config_path=path, console=False)
