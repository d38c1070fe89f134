import pytest

from market_info_monitor.models.destination import DeliveryResult, DeliveryStatus, Destination
from market_info_monitor.models.package import (
    CatalogEntry,
    LocalizedText,
    PlainText,
    Snapshot,
    resolve_description,
)


def test_resolve_description_precedence() -> None:
    assert resolve_description(LocalizedText(zh="中", en="en")) == "中"
    assert resolve_description(LocalizedText(zh="", en="en")) == "en"
    assert resolve_description(LocalizedText()) is None
    assert resolve_description(PlainText("text")) == "text"
    assert resolve_description(PlainText("")) is None
    assert resolve_description(None) is None


def test_snapshot_drops_hidden_entries_unless_allowed() -> None:
    entries = [
        CatalogEntry(name="shown", version="1"),
        CatalogEntry(name="secret", version="1", hidden=True),
    ]

    assert set(Snapshot.from_entries(entries)) == {"shown"}
    assert set(Snapshot.from_entries(entries, show_hidden=True)) == {"shown", "secret"}


def test_snapshot_visible_skips_hidden_entries_kept_by_policy() -> None:
    snapshot = Snapshot.from_entries(
        [CatalogEntry(name="shown", version="1"), CatalogEntry(name="secret", version="1", hidden=True)],
        show_hidden=True,
    )

    assert [entry.name for entry in snapshot.visible()] == ["shown"]


def test_snapshot_is_read_only() -> None:
    snapshot = Snapshot.from_entries([CatalogEntry(name="a", version="1")])

    with pytest.raises(TypeError):
        snapshot.entries["b"] = CatalogEntry(name="b", version="1")  # type: ignore[index]


def test_destination_normalizes_ids_and_requires_channel() -> None:
    destination = Destination(platform="onebot", channel_id=123, self_id=456)  # type: ignore[arg-type]

    assert destination.channel_id == "123"
    assert destination.self_id == "456"
    assert destination.guild_id is None
    assert destination.label == "onebot:123"

    with pytest.raises(ValueError):
        Destination(platform="onebot", channel_id="")


def test_delivery_result_converts_status_string() -> None:
    result = DeliveryResult(Destination(platform="p", channel_id="c"), "skipped", "no assignee")

    assert result.status is DeliveryStatus.SKIPPED
