"""Letter-open and read-receipt telemetry.

Both are fire-and-forget sinks: an accepted event is validated, logged as a
structured record and echoed back. Nothing is persisted.
"""

from __future__ import annotations

import logging
from typing import Any

from openme.core.errors import ValidationAppError
from openme.schemas.telemetry import DeviceType, LetterOpenEvent, ReadReceiptEvent
from openme.services.letter_validation import parse_lock_type
from openme.utils.datetimes import parse_iso_datetime

logger = logging.getLogger(__name__)


def _require_letter_id(payload: dict[str, Any]) -> str:
    letter_id = payload.get("letterId")
    if not isinstance(letter_id, str) or not letter_id.strip():
        raise ValidationAppError(code="missing_letter_id", message="letterId is required")
    return letter_id


def _optional_text(payload: dict[str, Any], field: str, default: str) -> str:
    value = payload.get(field)
    if isinstance(value, str) and value.strip():
        return value
    return default


def record_letter_open(payload: dict[str, Any]) -> LetterOpenEvent:
    """Validate and record a letter-open event.

    Raises:
        ValidationAppError: letterId, openedAt, lockType or unlocked is invalid.
    """
    letter_id = _require_letter_id(payload)

    opened_at = payload.get("openedAt")
    if parse_iso_datetime(opened_at) is None:
        raise ValidationAppError(
            code="invalid_opened_at",
            message="openedAt must be a valid ISO datetime",
        )

    lock_type = parse_lock_type(payload.get("lockType"))

    unlocked = payload.get("unlocked")
    if not isinstance(unlocked, bool):
        raise ValidationAppError(code="missing_unlocked", message="unlocked must be provided")

    event = LetterOpenEvent(
        letter_id=letter_id,
        opened_at=opened_at,
        lock_type=lock_type,
        unlocked=unlocked,
        user_id=_optional_text(payload, "userId", "anonymous"),
    )
    logger.info(
        "telemetry.letter_open",
        extra={
            "letter_id": event.letter_id,
            "lock_type": event.lock_type.value,
            "unlocked": event.unlocked,
            "opened_at": event.opened_at,
        },
    )
    return event


def record_read_receipt(payload: dict[str, Any]) -> ReadReceiptEvent:
    """Validate and record a read receipt.

    Raises:
        ValidationAppError: letterId, openedAt or deviceType is invalid.
    """
    letter_id = _require_letter_id(payload)

    opened_at = payload.get("openedAt")
    if not isinstance(opened_at, str) or not opened_at.strip():
        raise ValidationAppError(code="missing_opened_at", message="openedAt is required")
    if parse_iso_datetime(opened_at) is None:
        raise ValidationAppError(
            code="invalid_opened_at",
            message="openedAt must be a valid ISO datetime",
        )

    raw_device = payload.get("deviceType")
    if raw_device is None:
        device_type = DeviceType.UNKNOWN
    else:
        try:
            device_type = DeviceType(raw_device)
        except ValueError:
            raise ValidationAppError(
                code="invalid_device_type",
                message="deviceType must be mobile, desktop, tablet or unknown",
            ) from None

    event = ReadReceiptEvent(
        letter_id=letter_id,
        opened_at=opened_at,
        recipient_id=_optional_text(payload, "recipientId", "anonymous"),
        device_type=device_type,
    )
    logger.info(
        "telemetry.read_receipt",
        extra={
            "letter_id": event.letter_id,
            "device_type": event.device_type.value,
            "opened_at": event.opened_at,
        },
    )
    return event
