"""
HTTP client factory for the marketplace REST backend.

Each service owns the client it creates and closes it when done; clients
are not shared process-wide so tests can inject their own transport.
"""

import httpx

DEFAULT_TIMEOUT = 30.0

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def http_client(
    base_url: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Return a new httpx.AsyncClient configured for the backend.

    Args:
        base_url: Backend base URL, e.g. ``https://api.fundi.app/v1``.
        timeout: Connect/read/write/pool timeout in seconds.
        transport: Optional transport, used by tests to stub the network.

    Returns:
        An unopened AsyncClient; close it with ``aclose()``.
    """
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        timeout=httpx.Timeout(timeout),
        headers=_DEFAULT_HEADERS,
        transport=transport,
    )
