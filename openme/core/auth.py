"""Admin token authentication for CMS writes.

A single shared token (``CMS_ADMIN_TOKEN``) authorizes letter updates, and
every write must name the acting user in ``x-actor-id`` so the letter can
record who changed it.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header, Request

from openme.core.dependencies import get_settings
from openme.core.errors import AuthenticationAppError, ServiceUnavailableAppError
from openme.core.logging import hash_identifier

logger = logging.getLogger(__name__)


def validate_admin_token(provided_token: str | None, configured_token: str | None) -> None:
    """Check a presented admin token against the configured one.

    Pure validation logic without FastAPI dependencies for easy testing.

    Raises:
        ServiceUnavailableAppError: No admin token is configured (503).
        AuthenticationAppError: Token missing or wrong (401).
    """
    if not configured_token:
        logger.error(
            "auth.admin_token_not_configured",
            extra={"reason": "cms_admin_token_missing"},
        )
        raise ServiceUnavailableAppError(
            code="admin_token_not_configured",
            message="CMS_ADMIN_TOKEN is not configured",
            details={"hint": "Set CMS_ADMIN_TOKEN to enable CMS writes"},
        )

    if not provided_token:
        logger.warning("auth.missing_token", extra={"token_present": False})
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")

    if not hmac.compare_digest(provided_token.encode("utf-8"), configured_token.encode("utf-8")):
        logger.warning(
            "auth.invalid_token",
            extra={
                "token_present": True,
                "token_hash": hash_identifier(provided_token),
            },
        )
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")


def require_cms_actor(
    request: Request,
    x_admin_token: Annotated[str | None, Header(alias="x-admin-token")] = None,
    x_actor_id: Annotated[str | None, Header(alias="x-actor-id")] = None,
) -> str:
    """FastAPI dependency authenticating a CMS write.

    Usage:
        @router.post("/letter-update")
        def update_letter(actor_id: Annotated[str, Depends(require_cms_actor)]): ...

    Returns:
        The trimmed actor id to record as ``updatedBy``.

    Raises:
        ServiceUnavailableAppError: 503 if no admin token is configured.
        AuthenticationAppError: 401 if the token or actor id is missing/wrong.
    """
    validate_admin_token(x_admin_token, get_settings(request).security.cms_admin_token)

    actor_id = (x_actor_id or "").strip()
    if not actor_id:
        logger.warning("auth.missing_actor", extra={"token_present": True})
        raise AuthenticationAppError(
            code="missing_actor_id",
            message="x-actor-id header is required",
        )

    logger.info("auth.success", extra={"actor_hash": hash_identifier(actor_id)})
    return actor_id
