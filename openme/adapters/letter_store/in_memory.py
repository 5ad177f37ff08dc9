"""Process-local letter store.

Used when Firestore is not configured. Writes live only as long as the
process, so this is a development / fallback mode.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from openme.adapters.letter_store.base import AbstractLetterStore
from openme.adapters.letter_store.defaults import build_default_letters
from openme.schemas.letters import LetterRecord
from openme.utils.datetimes import utc_now, utc_now_iso

logger = logging.getLogger(__name__)


class InMemoryLetterStore(AbstractLetterStore):
    """Letters kept in a dict keyed by id, seeded with the defaults."""

    backend = "memory"

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utc_now,
        timestamp: Callable[[], str] = utc_now_iso,
    ) -> None:
        """Initialize the store.

        Args:
            clock: Source of "now" for building the default letters.
            timestamp: Source of the ISO ``updated_at`` stamp.
        """
        self._clock = clock
        self._timestamp = timestamp
        self._lock = threading.RLock()
        self._letters: dict[str, LetterRecord] = {}
        self.clear()

    def clear(self) -> None:
        """Drop all writes and restore the default letters."""
        with self._lock:
            self._letters = {
                letter.id: letter for letter in build_default_letters(self._clock())
            }

    def list_letters(self) -> list[LetterRecord]:
        with self._lock:
            letters = [letter.model_copy(deep=True) for letter in self._letters.values()]
        return sorted(letters, key=lambda letter: letter.id)

    def upsert_letter(
        self,
        letter: LetterRecord,
        *,
        updated_by: str | None = None,
    ) -> LetterRecord:
        with self._lock:
            existing = self._letters.get(letter.id)
            saved = letter.model_copy(
                deep=True,
                update={
                    "updated_at": self._timestamp(),
                    "updated_by": updated_by or (existing.updated_by if existing else None),
                },
            )
            self._letters[saved.id] = saved

        logger.info(
            "letter_store.upserted",
            extra={
                "backend": self.backend,
                "letter_id": saved.id,
                "created": existing is None,
            },
        )
        return saved.model_copy(deep=True)
