"""HTTP middleware for request correlation and response hardening.

- ``request_id_middleware`` accepts an incoming X-Request-ID header or
  generates a UUID, keeps it in contextvars for log correlation and returns
  it with the request duration.
- ``security_headers_middleware`` stamps no-store/nosniff/deny-framing/
  no-referrer and the CORS headers on every response, error responses
  included.

Usage:
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from openme.core.cors import build_cors_headers, parse_allowed_origins
from openme.core.dependencies import get_settings
from openme.core.exception_handlers import general_exception_handler
from openme.core.logging import clear_request_id, set_request_id
from openme.core.security import SECURITY_HEADERS


async def request_id_middleware(request: Request, call_next) -> Response:
    """Propagate a correlation id through logs and response headers.

    Side Effects:
        - Sets request_id in contextvars for the duration of the request
        - Adds the request id header and X-Request-Duration-ms to the response
    """

    header_name = get_settings(request).log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def security_headers_middleware(request: Request, call_next) -> Response:
    """Apply security and CORS headers to every response, regardless of outcome.

    Unhandled exceptions are rendered here (instead of by Starlette's outer
    error middleware) so that 500 responses carry the headers too.
    """

    try:
        response: Response = await call_next(request)
    except Exception as exc:
        response = await general_exception_handler(request, exc)

    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value

    allowed = parse_allowed_origins(get_settings(request).security.allowed_origins)
    for name, value in build_cors_headers(request.headers.get("origin"), allowed).items():
        response.headers[name] = value

    return response
