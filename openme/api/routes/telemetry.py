from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from openme.core.security import (
    LETTER_OPEN_POLICY,
    READ_RECEIPT_POLICY,
    add_preflight_route,
    write_endpoint_guard,
)
from openme.schemas.telemetry import LetterOpenAccepted, ReadReceiptAccepted
from openme.services.telemetry_service import record_letter_open, record_read_receipt

router = APIRouter(tags=["Telemetry"])


@router.post(
    "/letter-open",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=LetterOpenAccepted,
)
async def letter_open(
    payload: Annotated[dict[str, Any], Depends(write_endpoint_guard(LETTER_OPEN_POLICY))],
) -> LetterOpenAccepted:
    """Accept a letter-open event.

    Requires ``letterId``, ``openedAt`` (ISO datetime with a time part),
    ``lockType`` and a boolean ``unlocked``; ``userId`` defaults to
    ``"anonymous"``.
    """
    return LetterOpenAccepted(event=record_letter_open(payload))


@router.post(
    "/read-receipt",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ReadReceiptAccepted,
)
async def read_receipt(
    payload: Annotated[dict[str, Any], Depends(write_endpoint_guard(READ_RECEIPT_POLICY))],
) -> ReadReceiptAccepted:
    """Accept a read receipt for a letter."""
    return ReadReceiptAccepted(event=record_read_receipt(payload))


add_preflight_route(router, "/letter-open")
add_preflight_route(router, "/read-receipt")
