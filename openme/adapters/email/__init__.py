"""Email adapter layer - abstracts over the notification providers."""

from openme.adapters.email.base import (
    AbstractEmailTransport,
    DeliveryResult,
    EmailMessageInput,
)
from openme.adapters.email.factory import NoEmailTransport, create_email_transport
from openme.adapters.email.gmail import GmailApiTransport
from openme.adapters.email.smtp import SmtpTransport

__all__ = [
    "AbstractEmailTransport",
    "DeliveryResult",
    "EmailMessageInput",
    "GmailApiTransport",
    "NoEmailTransport",
    "SmtpTransport",
    "create_email_transport",
]
