from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from openme.adapters.email.base import AbstractEmailTransport
from openme.adapters.letter_store.base import AbstractLetterStore
from openme.core.dependencies import get_email_transport, get_letter_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(
    store: Annotated[AbstractLetterStore, Depends(get_letter_store)],
    transport: Annotated[AbstractEmailTransport, Depends(get_email_transport)],
) -> dict:
    """Liveness check.

    Also reports which letter store and email provider were selected at
    startup, without touching either backend.
    """

    return {
        "status": "ok",
        "letterStore": store.backend,
        "emailProvider": transport.provider,
    }
