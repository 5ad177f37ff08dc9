"""Lock evaluation for honor- and time-locked letters.

Pure functions: the result depends only on the arguments (and the wall clock
when ``now`` is omitted).
"""

from __future__ import annotations

from datetime import datetime, timezone

from openme.core.errors import ValidationAppError
from openme.schemas.letters import LockType
from openme.utils.datetimes import parse_iso_datetime, utc_now


def evaluate_unlock(
    lock_type: LockType,
    *,
    now: datetime | None = None,
    unlock_at: datetime | str | None = None,
    honor_confirmed: bool = False,
) -> bool:
    """Decide whether a letter is unlocked.

    Args:
        lock_type: Honor or time lock.
        now: Reference time; defaults to the current UTC time.
        unlock_at: Unlock threshold for time locks, as a datetime or ISO string.
        honor_confirmed: Reader's explicit confirmation for honor locks.

    Returns:
        True if the letter may be opened.

    Raises:
        ValidationAppError: If a time lock has no valid ``unlock_at``.
    """
    if lock_type is LockType.HONOR:
        return honor_confirmed is True

    threshold = unlock_at
    if not isinstance(threshold, datetime):
        # Date-only values are accepted here, matching Date parsing on the client
        threshold = parse_iso_datetime(threshold, require_time=False)
    if threshold is None:
        raise ValidationAppError(
            code="invalid_unlock_at",
            message="valid unlockAt is required for time lock",
        )

    reference = now or utc_now()
    return _as_utc(reference) >= _as_utc(threshold)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
