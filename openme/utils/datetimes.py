from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""

    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_datetime(value: object, *, require_time: bool = True) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime.

    Args:
        value: Candidate value from a JSON payload.
        require_time: Reject date-only strings (no ``T`` separator).

    Returns:
        The parsed datetime (naive values are taken as UTC), or None when
        ``value`` is not a parseable ISO datetime string.
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or (require_time and "T" not in text):
        return None

    # fromisoformat only understands a trailing "Z" from Python 3.11 on
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
