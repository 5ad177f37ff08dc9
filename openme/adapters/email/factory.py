"""Factory pattern for creating the email transport."""

from __future__ import annotations

import logging

from openme.adapters.email.base import (
    AbstractEmailTransport,
    DeliveryResult,
    EmailMessageInput,
)
from openme.adapters.email.gmail import GmailApiTransport
from openme.adapters.email.smtp import SmtpTransport
from openme.core.config import EmailSettings

logger = logging.getLogger(__name__)

NO_PROVIDER_DETAILS = (
    "No email provider configured. Set Gmail API credentials or SMTP fallback "
    "environment values."
)


class NoEmailTransport(AbstractEmailTransport):
    """Placeholder used when no provider is configured; never delivers."""

    provider = "none"

    async def send(self, message: EmailMessageInput) -> DeliveryResult:
        logger.warning("email.no_provider")
        return DeliveryResult(provider=self.provider, delivered=False, details=NO_PROVIDER_DETAILS)


def create_email_transport(cfg: EmailSettings) -> AbstractEmailTransport:
    """Choose the email provider from configuration.

    Gmail API credentials win over SMTP; SMTP needs every value present.

    Returns:
        AbstractEmailTransport: Configured transport instance.
    """
    if cfg.gmail_configured:
        transport: AbstractEmailTransport = GmailApiTransport(
            access_token=cfg.gmail_oauth_access_token or "",
            sender=cfg.gmail_sender_email or "",
            timeout_seconds=cfg.timeout_seconds,
        )
    elif cfg.smtp_configured:
        transport = SmtpTransport(
            host=cfg.smtp_host or "",
            port=cfg.smtp_port or 0,
            username=cfg.smtp_username or "",
            password=cfg.smtp_password or "",
            from_email=cfg.smtp_from_email or "",
            secure=cfg.smtp_secure,
            timeout_seconds=cfg.timeout_seconds,
        )
    else:
        transport = NoEmailTransport()

    logger.info("email.provider_selected", extra={"provider": transport.provider})
    return transport
