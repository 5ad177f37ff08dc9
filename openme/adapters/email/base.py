"""Email transport interface for emergency notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.message import EmailMessage


@dataclass(frozen=True)
class EmailMessageInput:
    to: str
    subject: str
    text: str


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a delivery attempt.

    Attributes:
        provider: "gmail-api", "smtp-fallback" or "none".
        delivered: True only when the provider accepted the message.
        details: Human-readable outcome, including the failure reason.
    """

    provider: str
    delivered: bool
    details: str


class AbstractEmailTransport(ABC):
    """Interface for email providers.

    Implementations convert provider failures into an undelivered
    :class:`DeliveryResult` instead of raising.
    """

    provider: str = "none"

    @abstractmethod
    async def send(self, message: EmailMessageInput) -> DeliveryResult:
        raise NotImplementedError


def build_mime_message(message: EmailMessageInput, *, sender: str) -> EmailMessage:
    """Build a plain-text UTF-8 message from ``message``."""
    mime = EmailMessage()
    mime["From"] = sender
    mime["To"] = message.to
    mime["Subject"] = message.subject
    mime.set_content(message.text, charset="utf-8")
    return mime
