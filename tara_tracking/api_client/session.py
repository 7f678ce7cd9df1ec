"""HTTP session factory for TaraG backend calls."""

from __future__ import annotations

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import HTTP_POOL_CONNECTIONS, HTTP_POOL_MAXSIZE

__all__ = ["create_default_session", "get_default_session"]


def _build_retry() -> Retry:
    # Polling loops retry on their own schedule; the transport never does.
    return Retry(total=0, raise_on_status=False)


def create_default_session() -> Session:
    # Each joined room runs one member poller and one location sharer against
    # the same backend host, so ten pooled connections cover several rooms
    # without blocking. Room endpoints take and return JSON bodies only.
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=_build_retry(),
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "Accept-Encoding": "gzip, deflate",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
    )
    return session


_DEFAULT_SESSION = create_default_session()


def get_default_session() -> Session:
    """Return the shared default backend session."""

    return _DEFAULT_SESSION
