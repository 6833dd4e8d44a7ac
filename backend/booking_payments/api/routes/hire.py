"""
Equipment hire endpoint. Bookings are forwarded to the hire sheet as-is.
"""

from typing import Any

import httpx
from fastapi import APIRouter, Depends

from booking_payments.api.deps import get_sheets_client, get_submission
from booking_payments.core.config import Settings, get_settings
from booking_payments.core.exceptions import UpstreamServiceError
from booking_payments.core.logging import get_logger
from booking_payments.infrastructure import SheetsClient
from booking_payments.schemas.booking import MessageResponse

logger = get_logger(__name__)
router = APIRouter(tags=["Hire"])


@router.post("/hireEquipment", response_model=MessageResponse)
async def hire_equipment(
    submission: dict[str, Any] = Depends(get_submission),
    sheets: SheetsClient = Depends(get_sheets_client),
    settings: Settings = Depends(get_settings),
):
    """Append the hire booking to the hire sheet."""
    try:
        await sheets.append_row(settings.HIRE_SHEET_TITLE, submission)
    except httpx.HTTPError as e:
        logger.error("hire_forward_failed", sheet=settings.HIRE_SHEET_TITLE, error=str(e))
        raise UpstreamServiceError("hire", str(e)) from e

    logger.info("hire_forwarded", sheet=settings.HIRE_SHEET_TITLE)
    return MessageResponse(message="Success!")
