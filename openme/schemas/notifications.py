"""Pydantic schemas for emergency notifications and lock evaluation."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EmergencyNotifyResponse(BaseModel):
    """Outcome of an emergency notification attempt.

    ``accepted`` and ``delivered`` are only true when the provider confirmed
    delivery; otherwise ``message`` carries the provider's failure details.
    """

    accepted: bool
    delivered: bool
    provider: str = Field(..., description="gmail-api, smtp-fallback or none.")
    message: str


class UnlockResponse(BaseModel):
    unlocked: bool
