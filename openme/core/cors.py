"""CORS origin allow-listing.

Origins are compared after trimming, dropping trailing slashes and
lower-casing. Requests without an Origin header (server-to-server or
same-origin) always pass.
"""

from __future__ import annotations

import logging

from fastapi import Request

from openme.core.dependencies import get_settings
from openme.core.errors import OriginNotAllowedError

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = "GET,POST,OPTIONS"
CORS_ALLOWED_HEADERS = "content-type,x-client-key,x-admin-token,x-actor-id,x-request-id"


def normalize_origin(origin: str) -> str:
    """Normalize an origin for comparison.

    Examples:
        >>> normalize_origin(" https://Open.Me/ ")
        'https://open.me'
    """
    return origin.strip().rstrip("/").lower()


def parse_allowed_origins(raw_value: str | None) -> set[str]:
    """Parse the comma-separated allow-list into normalized origins.

    Examples:
        >>> sorted(parse_allowed_origins("https://a.com, https://B.com/"))
        ['https://a.com', 'https://b.com']
        >>> parse_allowed_origins(None)
        set()
    """
    if not raw_value:
        return set()
    return {normalize_origin(item) for item in raw_value.split(",") if item.strip()}


def is_origin_allowed(origin: str, allowed_origins: set[str]) -> bool:
    return normalize_origin(origin) in allowed_origins


def build_cors_headers(origin: str | None, allowed_origins: set[str]) -> dict[str, str]:
    """Headers to attach to every response for the given request Origin.

    The origin is echoed back only when it is allow-listed.
    """
    headers = {
        "Vary": "Origin",
        "Access-Control-Allow-Methods": CORS_ALLOWED_METHODS,
        "Access-Control-Allow-Headers": CORS_ALLOWED_HEADERS,
    }
    if origin and origin.strip() and is_origin_allowed(origin, allowed_origins):
        headers["Access-Control-Allow-Origin"] = origin.strip()
    return headers


def verify_cors_origin(request: Request) -> None:
    """FastAPI dependency rejecting requests from origins not on the allow-list.

    Raises:
        OriginNotAllowedError: 403 when an Origin header is present and not allowed.
    """
    origin = (request.headers.get("origin") or "").strip()
    if not origin:
        return

    allowed = parse_allowed_origins(get_settings(request).security.allowed_origins)
    if is_origin_allowed(origin, allowed):
        return

    logger.warning(
        "cors.origin_rejected",
        extra={"origin": origin, "path": request.url.path, "allowed_count": len(allowed)},
    )
    raise OriginNotAllowedError(code="origin_not_allowed", message="Origin not allowed")
