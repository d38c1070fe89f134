"""Catalog retrieval and normalization."""

import logging
from datetime import datetime
from typing import Any, List, Optional

import requests

from ..exceptions import FetchError
from ..models.package import CatalogEntry, Description, LocalizedText, PlainText, Snapshot
from ..utils.http import create_session

DEFAULT_ENDPOINT = "https://registry.koishi.chat/index.json"


def parse_description(raw: Any) -> Description:
    """Turn a manifest description into a description variant.

    Args:
        raw: ``manifest.description`` value from the index document

    Returns:
        LocalizedText for objects, PlainText for strings, None otherwise
    """
    if isinstance(raw, dict):
        return LocalizedText(zh=raw.get('zh') or None, en=raw.get('en') or None)
    if isinstance(raw, str) and raw:
        return PlainText(raw)
    return None


def parse_entry(record: Any) -> CatalogEntry:
    """Build a CatalogEntry from one index record.

    Args:
        record: One element of the ``objects`` list

    Returns:
        CatalogEntry

    Raises:
        ValueError: If the record has no usable name or version
    """
    if not isinstance(record, dict):
        raise ValueError(f"record must be an object, got {type(record).__name__}")

    package = record.get('package') or {}
    manifest = record.get('manifest') or {}

    name = record.get('shortname') or record.get('name') or package.get('name')
    if not name:
        raise ValueError("record has no name")

    version = package.get('version') or record.get('version')
    if not version:
        raise ValueError(f"record {name} has no version")

    publisher = (package.get('publisher') or {}).get('username')

    return CatalogEntry(
        name=str(name),
        version=str(version),
        hidden=bool(manifest.get('hidden', False)),
        publisher=publisher,
        description=parse_description(manifest.get('description')),
    )


class CatalogFetcher:
    """Fetches the remote catalog and builds snapshots."""

    def __init__(
        self,
        logger: logging.Logger,
        endpoint: str = DEFAULT_ENDPOINT,
        show_hidden: bool = False,
        timeout: int = 30,
        retries: int = 3,
        session: Optional[requests.Session] = None
    ):
        """Initialize catalog fetcher.

        Args:
            logger: Logger instance
            endpoint: URL of the catalog index document
            show_hidden: Keep packages flagged as hidden
            timeout: Request timeout in seconds
            retries: Retry attempts for transient HTTP failures
            session: HTTP session to use (created if not given)
        """
        self.logger = logger
        self.endpoint = endpoint
        self.show_hidden = show_hidden
        self.timeout = timeout
        self.session = session or create_session(retries=retries)

    def fetch_document(self) -> dict:
        """Download and decode the index document.

        Returns:
            Decoded JSON document

        Raises:
            FetchError: If the request fails or the payload is not JSON
        """
        try:
            response = self.session.get(self.endpoint, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch catalog: {e}", self.endpoint) from e

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"Catalog is not valid JSON: {e}", self.endpoint) from e

        if not isinstance(data, dict) or not isinstance(data.get('objects'), list):
            raise FetchError("Catalog has no 'objects' list", self.endpoint)

        return data

    def parse_entries(self, data: dict) -> List[CatalogEntry]:
        """Parse every record of the index document.

        Args:
            data: Decoded index document

        Returns:
            List of CatalogEntry objects in document order

        Raises:
            FetchError: If any record is malformed
        """
        entries = []
        for index, record in enumerate(data['objects']):
            try:
                entries.append(parse_entry(record))
            except (ValueError, AttributeError) as e:
                raise FetchError(f"Malformed catalog record #{index}: {e}", self.endpoint) from e
        return entries

    def fetch(self) -> Snapshot:
        """Fetch the catalog and build a snapshot.

        Returns:
            Snapshot of the current catalog

        Raises:
            FetchError: If the catalog cannot be retrieved or parsed
        """
        self.logger.debug(f"Fetching catalog from {self.endpoint}")

        data = self.fetch_document()
        entries = self.parse_entries(data)
        snapshot = Snapshot.from_entries(
            entries,
            show_hidden=self.show_hidden,
            fetched_at=datetime.now()
        )

        self.logger.debug(
            f"Fetched {len(entries)} package(s), {len(snapshot)} kept after visibility filter"
        )
        return snapshot
