"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins APP_ENV to ``testing`` and clears provider credentials so the
suite never talks to Firestore, Gmail or an SMTP server.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

for _name in (
    "CMS_ADMIN_TOKEN",
    "OPEN_ME_ALLOWED_ORIGINS",
    "ALLOWED_ORIGINS",
    "EMERGENCY_RECIPIENT_EMAIL",
    "GMAIL_OAUTH_ACCESS_TOKEN",
    "GMAIL_SENDER_EMAIL",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_FROM_EMAIL",
    "OPEN_ME_FIREBASE_PROJECT_ID",
    "OPEN_ME_FIREBASE_CLIENT_EMAIL",
    "OPEN_ME_FIREBASE_PRIVATE_KEY",
):
    os.environ.pop(_name, None)

from collections.abc import Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from openme.adapters.email.base import AbstractEmailTransport, DeliveryResult, EmailMessageInput
from openme.adapters.letter_store.in_memory import InMemoryLetterStore
from openme.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from openme.core.app_factory import create_app
from openme.core.config import AppSettings, EmailSettings, SecuritySettings, Settings

ALLOWED_ORIGIN = "https://open-me.example"
ADMIN_TOKEN = "cms-secret-token"


class RecordingEmailTransport(AbstractEmailTransport):
    """Email transport double that records messages instead of sending them."""

    def __init__(self, *, provider: str = "gmail-api", delivered: bool = True) -> None:
        self.provider = provider
        self.delivered = delivered
        self.sent: list[EmailMessageInput] = []

    async def send(self, message: EmailMessageInput) -> DeliveryResult:
        self.sent.append(message)
        details = "Delivered via test" if self.delivered else "Provider rejected message"
        return DeliveryResult(provider=self.provider, delivered=self.delivered, details=details)


def build_settings(
    *,
    allowed_origins: str | None = ALLOWED_ORIGIN,
    cms_admin_token: str | None = ADMIN_TOKEN,
    emergency_recipient_email: str | None = "support@open-me.example",
    **app_overrides,
) -> Settings:
    return Settings(
        app=AppSettings(**app_overrides),
        security=SecuritySettings(
            allowed_origins=allowed_origins,
            cms_admin_token=cms_admin_token,
        ),
        email=EmailSettings(emergency_recipient_email=emergency_recipient_email),
    )


@pytest.fixture
def letter_store() -> InMemoryLetterStore:
    return InMemoryLetterStore()


@pytest.fixture
def rate_limiter() -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter()


@pytest.fixture
def email_transport() -> RecordingEmailTransport:
    return RecordingEmailTransport()


@pytest.fixture
def make_app(
    letter_store: InMemoryLetterStore,
    rate_limiter: InMemoryFixedWindowRateLimiter,
    email_transport: RecordingEmailTransport,
) -> Callable[..., FastAPI]:
    """Factory building an app around the shared test collaborators."""

    def _make(settings: Settings | None = None, **overrides) -> FastAPI:
        return create_app(
            settings or build_settings(),
            letter_store=overrides.get("letter_store", letter_store),
            rate_limiter=overrides.get("rate_limiter", rate_limiter),
            email_transport=overrides.get("email_transport", email_transport),
            configure_logs=False,
        )

    return _make


@pytest.fixture
def app(make_app: Callable[..., FastAPI]) -> FastAPI:
    return make_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
