"""Factory selecting the letter store implementation."""

from __future__ import annotations

import logging

from google.auth import exceptions as google_auth_exceptions

from openme.adapters.letter_store.base import AbstractLetterStore
from openme.adapters.letter_store.firestore import FirestoreLetterStore
from openme.adapters.letter_store.in_memory import InMemoryLetterStore
from openme.core.config import Settings

logger = logging.getLogger(__name__)


def create_letter_store(settings: Settings) -> AbstractLetterStore:
    """Pick Firestore when its credentials are complete, else the in-memory store.

    Called once at startup; the choice holds for the life of the process.
    Credentials that are present but unusable (a malformed private key, say)
    are logged and fall back to the in-memory store instead of failing import.
    """
    store: AbstractLetterStore
    if settings.firestore.configured:
        try:
            store = FirestoreLetterStore.from_settings(settings.firestore)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as exc:
            logger.error(
                "letter_store.firestore_init_failed",
                extra={"error_type": type(exc).__name__},
            )
            store = InMemoryLetterStore()
    else:
        store = InMemoryLetterStore()
        logger.warning(
            "letter_store.in_memory_fallback",
            extra={"reason": "firestore_not_configured"},
        )

    logger.info("letter_store.selected", extra={"backend": store.backend})
    return store
