"""Shared HTTP fetch helpers for web-based extractors."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@asynccontextmanager
async def http_client(
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the given client, or a short-lived one closed on exit.

    Args:
        client: Optional shared httpx client (for testing with mocks)
        timeout: Timeout for an owned client, in seconds
    """
    if client is not None:
        yield client
        return

    owned = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        yield owned
    finally:
        await owned.aclose()
