"""Accessors for the per-application collaborators.

``create_app`` builds the settings, letter store, rate limiter and email
transport once and keeps them on ``app.state``; routes reach them through
these FastAPI dependencies instead of module globals.
"""

from __future__ import annotations

from fastapi import Request

from openme.adapters.email.base import AbstractEmailTransport
from openme.adapters.letter_store.base import AbstractLetterStore
from openme.adapters.rate_limit.base import AbstractRateLimiter
from openme.core.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_letter_store(request: Request) -> AbstractLetterStore:
    return request.app.state.letter_store


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return request.app.state.rate_limiter


def get_email_transport(request: Request) -> AbstractEmailTransport:
    return request.app.state.email_transport
