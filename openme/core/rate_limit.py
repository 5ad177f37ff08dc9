"""Rate limiting for write endpoints.

Strategy:
- Fixed window per ``(scope, client key)``; each endpoint names its scope,
  budget and window through an :class:`EndpointPolicy`.
- The client key is best effort: ``x-client-key``, else the first
  ``x-forwarded-for`` hop, else ``"unknown"``. It is never used for auth.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import Request

from openme.core.dependencies import get_rate_limiter, get_settings
from openme.core.errors import RateLimitAppError
from openme.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_KEY = "unknown"


def resolve_client_key(headers: Mapping[str, str]) -> str:
    """Derive the rate-limit bucket key for a request.

    Examples:
        >>> resolve_client_key({"x-client-key": " device-1 "})
        'device-1'
        >>> resolve_client_key({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})
        '203.0.113.7'
        >>> resolve_client_key({})
        'unknown'
    """
    explicit = (headers.get("x-client-key") or "").strip()
    if explicit:
        return explicit

    forwarded_for = (headers.get("x-forwarded-for") or "").strip()
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or UNKNOWN_CLIENT_KEY

    return UNKNOWN_CLIENT_KEY


def enforce_rate_limit(
    request: Request,
    *,
    scope: str,
    limit: int,
    window_seconds: float,
) -> None:
    """Count this request against the caller's budget for ``scope``.

    Raises:
        RateLimitAppError: 429 once the caller exceeded ``limit`` in the window.
    """
    cfg = get_settings(request).app
    if not cfg.rate_limit_enabled:
        return

    client_key = resolve_client_key(request.headers)
    key_hash = hash_identifier(client_key)
    result = get_rate_limiter(request).hit(
        scope,
        client_key,
        limit=limit,
        window_seconds=window_seconds,
    )

    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "scope": scope,
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "scope": scope,
            "key_hash": key_hash,
            "limit": result.limit,
            "window_s": window_seconds,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if cfg.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise RateLimitAppError(
        code="rate_limited",
        message="Too many requests",
        details={"scope": scope, "retry_after": retry_after},
        headers=headers or None,
    )
