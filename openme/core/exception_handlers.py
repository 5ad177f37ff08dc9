"""Global exception handlers for consistent error responses.

Every failure is rendered as ``{"error": "<message>"}``:
- AppError subclasses -> their own status code (400/401/403/413/415/429/503)
- Starlette HTTPException (404, 405 from routing) -> same envelope
- Unexpected Exception -> generic 500 (safety net, no details leaked)
The request id travels in the X-Request-ID response header.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from openme.core.errors import AppError
from openme.core.logging import get_request_id

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with its status code and message.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the error's status, message and optional headers.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "error_details": exc.details,
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the same envelope."""
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = str(exc.detail)

    logger.info(
        "http_error_handled",
        extra={
            "status_code": exc.status_code,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    Prevents information leakage (no stack traces to client).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_ERROR_MESSAGE},
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
