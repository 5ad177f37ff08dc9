"""Seed letters served before any CMS write."""

from __future__ import annotations

from datetime import datetime, timedelta

from openme.schemas.letters import LetterRecord, LockType, MediaBlock, MediaKind
from openme.utils.datetimes import utc_now

ANNIVERSARY_UNLOCK_DELAY = timedelta(hours=24)


def build_default_letters(now: datetime | None = None) -> list[LetterRecord]:
    """Build the default letters.

    The anniversary letter unlocks 24 hours after ``now``.
    """
    reference = now or utc_now()
    unlock_at = (reference + ANNIVERSARY_UNLOCK_DELAY).isoformat(timespec="milliseconds")

    return [
        LetterRecord(
            id="sad-day",
            title="Open when you feel sad",
            preview="A reminder that you are deeply loved.",
            content=(
                "Hey love, this feeling will pass. Drink some water, breathe, and "
                "remember how strong you are. I am always cheering for you."
            ),
            lock_type=LockType.HONOR,
            media=[
                MediaBlock(
                    kind=MediaKind.IMAGE,
                    src=(
                        "https://images.unsplash.com/photo-1494790108377-be9c29b29330"
                        "?auto=format&fit=crop&w=1100&q=70"
                    ),
                    alt="Warm memory",
                )
            ],
        ),
        LetterRecord(
            id="anniversary",
            title="Open on our anniversary",
            preview="A letter for our special day.",
            content=(
                "Happy anniversary, my favorite person. Thank you for every laugh, "
                "every lesson, and every little moment."
            ),
            lock_type=LockType.TIME,
            unlock_at=unlock_at.replace("+00:00", "Z"),
            media=[
                MediaBlock(
                    kind=MediaKind.AUDIO,
                    src="https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3",
                )
            ],
        ),
        LetterRecord(
            id="cant-sleep",
            title="Open when you can't sleep",
            preview="Slow down and breathe with me.",
            content=(
                "Close your eyes. Inhale for four, hold for four, exhale for four. "
                "You are safe, and tomorrow can wait."
            ),
            lock_type=LockType.HONOR,
            media=[
                MediaBlock(
                    kind=MediaKind.VIDEO,
                    src="https://samplelib.com/lib/preview/mp4/sample-5s.mp4",
                )
            ],
        ),
    ]
