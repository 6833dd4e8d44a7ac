"""
Price resolution against the spreadsheet catalog.
The client-submitted price is never trusted; this is the only price source.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from booking_payments.core.exceptions import PriceNotFoundError
from booking_payments.core.logging import get_logger
from booking_payments.infrastructure.sheets_client import SheetsClient

logger = get_logger(__name__)


def _as_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        return None


def ids_match(catalog_id: Any, booking_id: Any) -> bool:
    """Loose id equality: 5, "5" and "5.0" all refer to the same catalog entry."""
    left, right = _as_decimal(catalog_id), _as_decimal(booking_id)
    if left is not None and right is not None and left.is_finite() and right.is_finite():
        return left == right
    return str(catalog_id).strip() == str(booking_id).strip()


def find_price(catalog: list[dict[str, Any]], booking_id: Any) -> Decimal:
    entry = next(
        (item for item in catalog if isinstance(item, dict) and ids_match(item.get("id"), booking_id)),
        None,
    )
    if entry is None:
        raise PriceNotFoundError(booking_id)

    price = _as_decimal(entry.get("price"))
    if price is None or not price.is_finite() or price < 0:
        logger.error("catalog_price_invalid", booking_id=booking_id, price=entry.get("price"))
        raise PriceNotFoundError(booking_id)
    return price


async def resolve_price(sheets: SheetsClient, booking_id: Any) -> Decimal:
    """Fetch the whole catalog and return the price of the matching booking."""
    catalog = await sheets.fetch_catalog()
    price = find_price(catalog, booking_id)
    logger.info("price_resolved", booking_id=booking_id, price=str(price), catalog_size=len(catalog))
    return price
