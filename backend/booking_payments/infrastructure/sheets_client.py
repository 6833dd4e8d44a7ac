"""
Client for the spreadsheet-backed booking API.

The same base URL serves two purposes:
  - GET <url>                      -> full price catalog, a list of {id, price, ...}
  - POST <url>?sheetTitle=<title>  -> append one flat JSON row to a sheet

The catalog endpoint has no per-id query, so every lookup downloads it whole.
"""

from typing import Any

import httpx

from booking_payments.core.exceptions import UpstreamServiceError
from booking_payments.core.logging import get_logger
from booking_payments.core.metrics import track_external_call

logger = get_logger(__name__)


class SheetsClient:
    def __init__(self, http: httpx.AsyncClient, base_url: str):
        self.http = http
        self.base_url = base_url

    async def fetch_catalog(self) -> list[dict[str, Any]]:
        try:
            with track_external_call("catalog"):
                response = await self.http.get(self.base_url)
            response.raise_for_status()
            catalog = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("catalog_fetch_failed", url=self.base_url, error=str(e))
            raise UpstreamServiceError("catalog", str(e)) from e

        if not isinstance(catalog, list):
            raise UpstreamServiceError("catalog", "expected a list of catalog entries")
        return catalog

    async def append_row(self, sheet_title: str, row: dict[str, Any]) -> None:
        """Append one row. Raises httpx.HTTPError on transport or status failure."""
        with track_external_call("sheets"):
            response = await self.http.post(
                self.base_url,
                params={"sheetTitle": sheet_title},
                json=row,
            )
        response.raise_for_status()
