"""Field validation for CMS letter writes.

Checks run in a fixed order and the first failure is reported, so clients
always see one actionable message at a time.
"""

from __future__ import annotations

import re
from typing import Any

from openme.core.errors import ValidationAppError
from openme.schemas.letters import LetterRecord, LockType, MediaBlock, MediaKind
from openme.utils.datetimes import parse_iso_datetime

LETTER_ID_PATTERN = re.compile(r"^[a-z0-9-]+$")
MEDIA_SRC_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)

MEDIA_KINDS = tuple(kind.value for kind in MediaKind)

MAX_TITLE_CHARS = 120
MAX_PREVIEW_CHARS = 240
MAX_CONTENT_CHARS = 6000


def _fail(code: str, message: str) -> ValidationAppError:
    return ValidationAppError(code=code, message=message)


def _required_text(payload: dict[str, Any], field: str, max_chars: int) -> str:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        raise _fail(f"missing_{field}", f"{field} is required")
    value = value.strip()
    if len(value) > max_chars:
        raise _fail(
            f"{field}_too_long",
            f"{field} must be at most {max_chars} characters",
        )
    return value


def parse_lock_type(value: Any) -> LockType:
    try:
        return LockType(value)
    except ValueError:
        raise _fail("invalid_lock_type", "lockType must be honor or time") from None


def _parse_media(raw_media: Any) -> list[MediaBlock] | None:
    if raw_media is None:
        return None
    if not isinstance(raw_media, list):
        raise _fail("invalid_media", "media must be an array")

    blocks: list[MediaBlock] = []
    for item in raw_media:
        if not isinstance(item, dict):
            raise _fail("invalid_media", "media items must include valid kind and src")

        src = item.get("src")
        alt = item.get("alt")
        kind = item.get("kind")
        if (
            kind not in MEDIA_KINDS
            or not isinstance(src, str)
            or not MEDIA_SRC_PATTERN.match(src.strip())
            or (alt is not None and not isinstance(alt, str))
        ):
            raise _fail("invalid_media", "media items must include valid kind and src")

        blocks.append(MediaBlock(kind=MediaKind(kind), src=src.strip(), alt=alt))
    return blocks


def parse_letter_update(payload: dict[str, Any]) -> LetterRecord:
    """Validate a CMS write payload and build the letter it describes.

    Args:
        payload: Decoded JSON object from the request body.

    Returns:
        LetterRecord without ``updated_at``/``updated_by``; the store stamps those.

    Raises:
        ValidationAppError: On the first field that fails validation.
    """
    letter_id = payload.get("id")
    if not isinstance(letter_id, str) or not letter_id.strip():
        raise _fail("missing_id", "id is required")
    letter_id = letter_id.strip()
    if not LETTER_ID_PATTERN.match(letter_id):
        raise _fail(
            "invalid_id",
            "id must contain only lowercase letters, numbers and hyphens",
        )

    title = _required_text(payload, "title", MAX_TITLE_CHARS)
    preview = _required_text(payload, "preview", MAX_PREVIEW_CHARS)
    content = _required_text(payload, "content", MAX_CONTENT_CHARS)

    lock_type = parse_lock_type(payload.get("lockType"))

    unlock_at = payload.get("unlockAt")
    if lock_type is LockType.TIME:
        if parse_iso_datetime(unlock_at) is None:
            raise _fail(
                "invalid_unlock_at",
                "unlockAt must be a valid ISO datetime for time lock",
            )
        unlock_at = unlock_at.strip()
    elif unlock_at:
        raise _fail("unexpected_unlock_at", "unlockAt is not allowed for honor lock")
    else:
        unlock_at = None

    media = _parse_media(payload.get("media"))

    return LetterRecord(
        id=letter_id,
        title=title,
        preview=preview,
        content=content,
        lock_type=lock_type,
        unlock_at=unlock_at,
        media=media,
    )
