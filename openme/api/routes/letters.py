from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from openme.adapters.letter_store.base import AbstractLetterStore
from openme.core.auth import require_cms_actor
from openme.core.cors import verify_cors_origin
from openme.core.dependencies import get_letter_store
from openme.core.security import LETTER_UPDATE_POLICY, add_preflight_route, write_endpoint_guard
from openme.schemas.letters import LetterListResponse, LetterRecord, LetterUpdateResponse
from openme.services.letter_validation import parse_letter_update

router = APIRouter(tags=["Letters"])


def letter_update_payload(
    payload: Annotated[dict[str, Any], Depends(write_endpoint_guard(LETTER_UPDATE_POLICY))],
) -> LetterRecord:
    """Guarded body of a CMS write, validated into a letter."""
    return parse_letter_update(payload)


@router.get(
    "/letter-list",
    response_model=LetterListResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_cors_origin)],
)
def list_letters(
    store: Annotated[AbstractLetterStore, Depends(get_letter_store)],
) -> LetterListResponse:
    """Return every letter, sorted by id.

    The first read against an empty Firestore collection seeds it with the
    default letters.
    """
    return LetterListResponse(letters=store.list_letters())


@router.post(
    "/letter-update",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=LetterUpdateResponse,
    response_model_exclude_none=True,
)
def update_letter(
    letter: Annotated[LetterRecord, Depends(letter_update_payload)],
    actor_id: Annotated[str, Depends(require_cms_actor)],
    store: Annotated[AbstractLetterStore, Depends(get_letter_store)],
) -> LetterUpdateResponse:
    """Create or replace a letter (CMS write).

    Requires ``x-admin-token`` and ``x-actor-id``. Field validation runs
    before authentication, so malformed letters are reported as 400 first.

    Raises:
        ValidationAppError: 400 for invalid fields.
        AuthenticationAppError: 401 for a bad token or missing actor.
        ServiceUnavailableAppError: 503 if no admin token or storage is down.
    """
    saved = store.upsert_letter(letter, updated_by=actor_id)
    return LetterUpdateResponse(accepted=True, letter=saved)


add_preflight_route(router, "/letter-list")
add_preflight_route(router, "/letter-update")
