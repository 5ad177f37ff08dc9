"""Firestore-backed letter store (firebase-admin).

Documents are keyed by letter id and hold the letter's camelCase JSON shape,
which is what the web app reads directly. Every call carries an explicit
timeout; Google API and auth failures surface as :class:`StorageAppError`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as google_auth_exceptions
from pydantic import ValidationError

from openme.adapters.letter_store.base import AbstractLetterStore
from openme.adapters.letter_store.defaults import build_default_letters
from openme.core.config import FirestoreSettings
from openme.core.errors import StorageAppError
from openme.schemas.letters import LetterRecord
from openme.utils.datetimes import utc_now, utc_now_iso

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "openme"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# API errors and credential/transport failures both mean storage is unavailable
STORAGE_ERRORS = (google_exceptions.GoogleAPIError, google_auth_exceptions.GoogleAuthError)


def normalize_private_key(raw_key: str) -> str:
    """Turn literal ``\\n`` sequences (common in env vars) into newlines."""
    return raw_key.replace("\\n", "\n")


def build_firestore_client(cfg: FirestoreSettings) -> Any:
    """Create (or reuse) the firebase-admin app and return its Firestore client."""
    try:
        app = firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        cred = credentials.Certificate(
            {
                "type": "service_account",
                "project_id": cfg.project_id,
                "client_email": cfg.client_email,
                "private_key": normalize_private_key(cfg.private_key or ""),
                "token_uri": GOOGLE_TOKEN_URI,
            }
        )
        app = firebase_admin.initialize_app(
            cred,
            {"projectId": cfg.project_id},
            name=FIREBASE_APP_NAME,
        )
    return firestore.client(app=app)


class FirestoreLetterStore(AbstractLetterStore):
    """Letters persisted in a Firestore collection."""

    backend = "firestore"

    def __init__(
        self,
        client: Any,
        *,
        collection: str,
        timeout_seconds: float = 10.0,
        clock: Callable[[], datetime] = utc_now,
        timestamp: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._client = client
        self._collection_name = collection
        self._timeout = timeout_seconds
        self._clock = clock
        self._timestamp = timestamp

    @classmethod
    def from_settings(cls, cfg: FirestoreSettings) -> "FirestoreLetterStore":
        return cls(
            build_firestore_client(cfg),
            collection=cfg.letters_collection,
            timeout_seconds=cfg.timeout_seconds,
        )

    @property
    def _collection(self) -> Any:
        return self._client.collection(self._collection_name)

    def _storage_error(self, operation: str, exc: Exception) -> StorageAppError:
        logger.error(
            "letter_store.failed",
            extra={
                "backend": self.backend,
                "operation": operation,
                "collection": self._collection_name,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
            },
        )
        return StorageAppError(
            code="letter_storage_unavailable",
            message="Letter storage is unavailable",
            details={"hint": f"{operation} failed: {type(exc).__name__}"},
        )

    def _seed_defaults(self) -> list[LetterRecord]:
        defaults = build_default_letters(self._clock())
        batch = self._client.batch()
        for letter in defaults:
            batch.set(self._collection.document(letter.id), letter.to_json_dict())
        batch.commit(timeout=self._timeout)

        logger.info(
            "letter_store.seeded",
            extra={
                "backend": self.backend,
                "collection": self._collection_name,
                "count": len(defaults),
            },
        )
        return defaults

    def _to_letter(self, document_id: str, data: Any) -> LetterRecord | None:
        try:
            return LetterRecord.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "letter_store.invalid_document",
                extra={
                    "backend": self.backend,
                    "document_id": document_id,
                    "error_count": exc.error_count(),
                },
            )
            return None

    def list_letters(self) -> list[LetterRecord]:
        try:
            snapshots = self._collection.get(timeout=self._timeout)
            if not snapshots:
                return sorted(self._seed_defaults(), key=lambda letter: letter.id)
        except STORAGE_ERRORS as exc:
            raise self._storage_error("list", exc) from exc

        letters = [
            letter
            for letter in (self._to_letter(snap.id, snap.to_dict()) for snap in snapshots)
            if letter is not None
        ]
        return sorted(letters, key=lambda letter: letter.id)

    def upsert_letter(
        self,
        letter: LetterRecord,
        *,
        updated_by: str | None = None,
    ) -> LetterRecord:
        document = self._collection.document(letter.id)
        try:
            if updated_by is None:
                existing = document.get(timeout=self._timeout)
                if existing.exists:
                    updated_by = (existing.to_dict() or {}).get("updatedBy")

            saved = letter.model_copy(
                deep=True,
                update={"updated_at": self._timestamp(), "updated_by": updated_by},
            )
            document.set(saved.to_json_dict(), timeout=self._timeout)
        except STORAGE_ERRORS as exc:
            raise self._storage_error("upsert", exc) from exc

        logger.info(
            "letter_store.upserted",
            extra={
                "backend": self.backend,
                "collection": self._collection_name,
                "letter_id": saved.id,
            },
        )
        return saved
