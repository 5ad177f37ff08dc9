"""JSON body validation for write endpoints."""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Request

from openme.core.errors import (
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationAppError,
)

logger = logging.getLogger(__name__)

# Raw bodies beyond this multiple of the ceiling are refused before parsing
RAW_BODY_FACTOR = 4


def serialized_size(payload: Any) -> int:
    """Byte length of the compact UTF-8 JSON serialization of ``payload``."""
    if payload is None:
        return 0
    return len(
        json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    )


def _too_large(max_bytes: int, actual_bytes: int) -> PayloadTooLargeError:
    return PayloadTooLargeError(
        code="payload_too_large",
        message="Payload too large",
        details={"max_bytes": max_bytes, "actual_bytes": actual_bytes},
    )


async def read_json_payload(request: Request, *, max_bytes: int) -> dict[str, Any]:
    """Read, decode and bound a JSON object body.

    The ceiling applies to the re-serialized payload, so formatting
    whitespace in the raw body does not count against it.

    Args:
        request: Incoming request.
        max_bytes: Endpoint-specific payload ceiling.

    Returns:
        The decoded JSON object.

    Raises:
        UnsupportedMediaTypeError: Content-Type is not application/json.
        PayloadTooLargeError: Body exceeds the ceiling.
        ValidationAppError: Body is not a valid JSON object.
    """
    content_type = request.headers.get("content-type", "").lower()
    if "application/json" not in content_type:
        logger.warning(
            "payload_validation.unsupported_media_type",
            extra={"content_type": content_type, "path": request.url.path},
        )
        raise UnsupportedMediaTypeError(
            code="unsupported_media_type",
            message="Content-Type must be application/json",
        )

    raw_limit = max_bytes * RAW_BODY_FACTOR
    size = 0
    chunks: list[bytes] = []
    async for chunk in request.stream():
        size += len(chunk)
        if size > raw_limit:
            logger.warning(
                "payload_validation.rejected_raw_size",
                extra={"size": size, "max_bytes": max_bytes, "path": request.url.path},
            )
            raise _too_large(max_bytes, size)
        chunks.append(chunk)

    raw_body = b"".join(chunks)
    try:
        payload = json.loads(raw_body) if raw_body.strip() else None
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationAppError(
            code="invalid_json",
            message="Request body must be valid JSON",
        ) from exc

    payload_bytes = serialized_size(payload)
    if payload_bytes > max_bytes:
        logger.warning(
            "payload_validation.rejected_size",
            extra={"size": payload_bytes, "max_bytes": max_bytes, "path": request.url.path},
        )
        raise _too_large(max_bytes, payload_bytes)

    if not isinstance(payload, dict):
        raise ValidationAppError(
            code="invalid_json_object",
            message="Request body must be a JSON object",
        )

    return payload
