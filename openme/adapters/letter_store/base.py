"""Letter store interface.

Routes depend on this abstraction; which implementation backs it is decided
once at startup by :func:`openme.adapters.letter_store.factory.create_letter_store`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from openme.schemas.letters import LetterRecord


class AbstractLetterStore(ABC):
    """Keyed collection of letters with list and upsert operations."""

    #: Short name used in logs ("memory", "firestore").
    backend: str = "abstract"

    @abstractmethod
    def list_letters(self) -> list[LetterRecord]:
        """Return every letter sorted by id.

        Stores seed themselves with the default letters when empty, so the
        first read may write.
        """
        raise NotImplementedError

    @abstractmethod
    def upsert_letter(
        self,
        letter: LetterRecord,
        *,
        updated_by: str | None = None,
    ) -> LetterRecord:
        """Insert or replace a letter by id.

        Args:
            letter: Validated letter to save.
            updated_by: Actor id recorded on the letter. When omitted the
                previous ``updated_by`` is kept.

        Returns:
            A copy of the saved letter with a fresh ``updated_at``.

        Raises:
            StorageAppError: If the backing store fails.
        """
        raise NotImplementedError
