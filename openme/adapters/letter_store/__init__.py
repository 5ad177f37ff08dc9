"""Letter persistence adapters (in-memory fallback and Firestore)."""

from openme.adapters.letter_store.base import AbstractLetterStore
from openme.adapters.letter_store.factory import create_letter_store
from openme.adapters.letter_store.in_memory import InMemoryLetterStore

__all__ = [
    "AbstractLetterStore",
    "InMemoryLetterStore",
    "create_letter_store",
]
