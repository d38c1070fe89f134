import logging

import pytest
import requests

from market_info_monitor.core.fetcher import CatalogFetcher, parse_entry
from market_info_monitor.exceptions import FetchError
from market_info_monitor.models.package import LocalizedText, PlainText

from .fakes import FakeResponse, FakeSession

LOGGER = logging.getLogger("test.fetcher")

INDEX = {
    "objects": [
        {
            "shortname": "foo",
            "package": {"name": "koishi-plugin-foo", "version": "1.2.0", "publisher": {"username": "alice"}},
            "manifest": {"hidden": False, "description": {"zh": "中文", "en": "English"}},
        },
        {
            "shortname": "bar",
            "package": {"name": "koishi-plugin-bar", "version": "0.1.0", "publisher": {"username": "bob"}},
            "manifest": {"hidden": True, "description": "plain"},
        },
        {
            "name": "baz",
            "version": "2.0.0",
            "package": {},
            "manifest": {},
        },
    ]
}


def _fetcher(session: FakeSession, show_hidden: bool = False) -> CatalogFetcher:
    return CatalogFetcher(
        logger=LOGGER,
        endpoint="https://example.test/index.json",
        show_hidden=show_hidden,
        session=session,
    )


def test_fetch_builds_snapshot_without_hidden_entries() -> None:
    session = FakeSession([FakeResponse(payload=INDEX)])

    snapshot = _fetcher(session).fetch()

    assert set(snapshot) == {"foo", "baz"}
    foo = snapshot.get("foo")
    assert foo.version == "1.2.0"
    assert foo.publisher == "alice"
    assert foo.description == LocalizedText(zh="中文", en="English")
    assert snapshot.get("baz").version == "2.0.0"
    assert snapshot.fetched_at is not None
    assert session.calls[0][1] == "https://example.test/index.json"


def test_fetch_keeps_hidden_entries_when_allowed() -> None:
    session = FakeSession([FakeResponse(payload=INDEX)])

    snapshot = _fetcher(session, show_hidden=True).fetch()

    bar = snapshot.get("bar")
    assert bar is not None
    assert bar.hidden is True
    assert bar.description == PlainText("plain")


def test_parse_entry_prefers_shortname_and_package_version() -> None:
    entry = parse_entry({
        "shortname": "short",
        "name": "long",
        "version": "0.0.1",
        "package": {"version": "9.9.9"},
    })

    assert entry.name == "short"
    assert entry.version == "9.9.9"
    assert entry.publisher is None
    assert entry.description is None


def test_network_error_raises_fetch_error() -> None:
    session = FakeSession(error=requests.ConnectionError("boom"))

    with pytest.raises(FetchError) as exc_info:
        _fetcher(session).fetch()

    assert exc_info.value.endpoint == "https://example.test/index.json"


def test_http_error_status_raises_fetch_error() -> None:
    session = FakeSession([FakeResponse(status_code=503, payload={})])

    with pytest.raises(FetchError):
        _fetcher(session).fetch()


def test_invalid_json_raises_fetch_error() -> None:
    session = FakeSession([FakeResponse(text="<html>not json</html>")])

    with pytest.raises(FetchError):
        _fetcher(session).fetch()


def test_missing_objects_raises_fetch_error() -> None:
    session = FakeSession([FakeResponse(payload={"total": 0})])

    with pytest.raises(FetchError):
        _fetcher(session).fetch()


def test_malformed_record_fails_whole_fetch() -> None:
    payload = {"objects": [INDEX["objects"][0], {"manifest": {}}]}
    session = FakeSession([FakeResponse(payload=payload)])

    with pytest.raises(FetchError, match="#1"):
        _fetcher(session).fetch()
