"""Test doubles shared by the test modules."""

import json
from typing import List, Optional

import requests

from market_info_monitor.bots.base import Bot
from market_info_monitor.models.destination import ChannelAssignment
from market_info_monitor.models.package import CatalogEntry, Snapshot


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, responses=None, error: Optional[Exception] = None) -> None:
        self.responses = list(responses or [])
        self.error = error
        self.headers: dict = {}
        self.calls: List[tuple] = []

    def _next(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    def get(self, url: str, **kwargs) -> FakeResponse:
        return self._next("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> FakeResponse:
        return self._next("POST", url, **kwargs)


class FakeBot(Bot):
    def __init__(self, platform: str, self_id: str, logger, fail: bool = False) -> None:
        super().__init__(platform, self_id, logger)
        self.fail = fail
        self.sent: List[tuple] = []

    def send_message(self, channel_id: str, content: str, guild_id: Optional[str] = None) -> None:
        if self.fail:
            raise RuntimeError("send failed")
        self.sent.append((channel_id, content, guild_id))


class FakeDirectory:
    def __init__(self, assignments=None) -> None:
        self.assignments = {
            (a.platform, a.channel_id): a for a in (assignments or [])
        }
        self.lookups: List[tuple] = []

    def resolve_assignee(self, platform: str, channel_id: str) -> Optional[ChannelAssignment]:
        self.lookups.append((platform, channel_id))
        return self.assignments.get((platform, channel_id))


class FakeFetcher:
    """Returns queued snapshots; an exception in the queue is raised instead."""

    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    def fetch(self) -> Snapshot:
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def make_snapshot(**versions: str) -> Snapshot:
    return Snapshot.from_entries(
        CatalogEntry(name=name, version=version) for name, version in versions.items()
    )
