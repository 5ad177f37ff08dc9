"""Emergency support notifications.

Validates the request, resolves the recipient and hands the message to the
configured email transport. Provider failures come back as an undelivered
result, never as an exception.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from openme.adapters.email.base import AbstractEmailTransport, DeliveryResult, EmailMessageInput
from openme.core.errors import ValidationAppError
from openme.core.logging import hash_identifier

logger = logging.getLogger(__name__)

EMERGENCY_SUBJECT = "Open Me emergency support request"
MAX_MESSAGE_CHARS = 1000
MAX_CONTEXT_CHARS = 1000
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class EmergencyRequest:
    message: str
    recipient_email: str
    context: str | None = None

    def to_email(self) -> EmailMessageInput:
        text = self.message
        if self.context:
            text = f"{self.message}\n\nContext: {self.context}"
        return EmailMessageInput(to=self.recipient_email, subject=EMERGENCY_SUBJECT, text=text)


def parse_emergency_request(
    payload: dict[str, Any],
    *,
    default_recipient: str | None,
) -> EmergencyRequest:
    """Validate an emergency-notify payload.

    Args:
        payload: Decoded JSON body.
        default_recipient: EMERGENCY_RECIPIENT_EMAIL, used when the payload has none.

    Raises:
        ValidationAppError: On the first invalid field.
    """
    message = payload.get("message")
    if not isinstance(message, str) or not message.strip():
        raise ValidationAppError(code="missing_message", message="message is required")
    if len(message) > MAX_MESSAGE_CHARS:
        raise ValidationAppError(
            code="message_too_long",
            message=f"message must be at most {MAX_MESSAGE_CHARS} characters",
        )

    context = payload.get("context")
    if context is not None and not isinstance(context, str):
        raise ValidationAppError(code="invalid_context", message="context must be a string")
    if context and len(context) > MAX_CONTEXT_CHARS:
        raise ValidationAppError(
            code="context_too_long",
            message=f"context must be at most {MAX_CONTEXT_CHARS} characters",
        )

    recipient = payload.get("recipientEmail") or default_recipient
    if not recipient:
        raise ValidationAppError(
            code="missing_recipient",
            message="recipientEmail or EMERGENCY_RECIPIENT_EMAIL is required",
        )
    if not isinstance(recipient, str) or not EMAIL_PATTERN.match(recipient.strip()):
        raise ValidationAppError(
            code="invalid_recipient",
            message="recipientEmail must be a valid email address",
        )

    return EmergencyRequest(
        message=message,
        recipient_email=recipient.strip(),
        context=context or None,
    )


async def send_emergency_notification(
    request: EmergencyRequest,
    transport: AbstractEmailTransport,
) -> DeliveryResult:
    result = await transport.send(request.to_email())

    log = logger.info if result.delivered else logger.error
    log(
        "emergency.notification_attempted",
        extra={
            "provider": result.provider,
            "delivered": result.delivered,
            "recipient_hash": hash_identifier(request.recipient_email),
            "has_context": request.context is not None,
        },
    )
    return result
