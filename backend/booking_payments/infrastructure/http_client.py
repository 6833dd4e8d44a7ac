"""
Shared httpx client for calls to the spreadsheet API.
Created lazily, closed on application shutdown.
"""

from typing import Optional

import httpx

from booking_payments.core.config import get_settings
from booking_payments.core.logging import get_logger

logger = get_logger(__name__)

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the process-wide AsyncClient."""
    global _http_client

    if _http_client is None or _http_client.is_closed:
        settings = get_settings()
        _http_client = httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )
        logger.debug("http_client_created", timeout=settings.HTTP_TIMEOUT_SECONDS)
    return _http_client


async def close_http_client() -> None:
    """Close the shared client on shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
