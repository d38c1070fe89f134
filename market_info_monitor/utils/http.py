"""HTTP session helpers."""

from typing import Iterable

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

USER_AGENT = "market-info-monitor/0.1"

# POST is left out: a retried sendMessage can deliver the same digest twice.
IDEMPOTENT_METHODS = ("HEAD", "GET")


def create_session(
    retries: int = 3,
    backoff_factor: float = 1.0,
    allowed_methods: Iterable[str] = IDEMPOTENT_METHODS
) -> requests.Session:
    """Create an HTTP session with retry logic.

    Requests with a method outside ``allowed_methods`` are only retried on
    connection errors, when nothing has reached the server yet.

    Args:
        retries: Total retry attempts for transient failures
        backoff_factor: Exponential backoff base in seconds
        allowed_methods: Methods retried on read errors and 429/5xx responses

    Returns:
        Configured requests session
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(allowed_methods),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        'User-Agent': USER_AGENT,
        'Accept': 'application/json',
    })

    return session
