"""Pydantic schemas for the letter-open and read-receipt telemetry sinks."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from openme.schemas.letters import CamelModel, LockType


class DeviceType(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"
    TABLET = "tablet"
    UNKNOWN = "unknown"


class LetterOpenEvent(CamelModel):
    """Echo of an accepted letter-open event."""

    type: Literal["letter-open"] = "letter-open"
    letter_id: str
    opened_at: str
    lock_type: LockType
    unlocked: bool
    user_id: str = "anonymous"


class ReadReceiptEvent(CamelModel):
    """Echo of an accepted read receipt."""

    type: Literal["read-receipt"] = "read-receipt"
    letter_id: str
    opened_at: str
    recipient_id: str = "anonymous"
    device_type: DeviceType = DeviceType.UNKNOWN


class LetterOpenAccepted(BaseModel):
    accepted: bool = True
    event: LetterOpenEvent = Field(..., description="The event as recorded.")


class ReadReceiptAccepted(BaseModel):
    accepted: bool = True
    event: ReadReceiptEvent = Field(..., description="The receipt as recorded.")
