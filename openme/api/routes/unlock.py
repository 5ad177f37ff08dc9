from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from openme.core.errors import ValidationAppError
from openme.core.security import UNLOCK_EVALUATOR_POLICY, add_preflight_route, write_endpoint_guard
from openme.schemas.letters import LockType
from openme.schemas.notifications import UnlockResponse
from openme.services.letter_validation import parse_lock_type
from openme.services.lock_evaluator import evaluate_unlock
from openme.utils.datetimes import parse_iso_datetime

router = APIRouter(tags=["Locks"])


@router.post("/unlock-evaluator", response_model=UnlockResponse)
async def unlock_evaluator(
    payload: Annotated[dict[str, Any], Depends(write_endpoint_guard(UNLOCK_EVALUATOR_POLICY))],
) -> UnlockResponse:
    """Evaluate whether a letter is unlocked.

    Body: ``{lockType, now?, unlockAt?, honorConfirmed?}``. Honor locks
    follow ``honorConfirmed``; time locks compare ``now`` (default: server
    time) with ``unlockAt``; ``now`` is ignored for honor locks.
    """
    if not payload.get("lockType"):
        raise ValidationAppError(code="missing_lock_type", message="lockType is required")
    lock_type = parse_lock_type(payload["lockType"])

    now = None
    if lock_type is LockType.TIME and payload.get("now") is not None:
        now = parse_iso_datetime(payload["now"], require_time=False)
        if now is None:
            raise ValidationAppError(
                code="invalid_now",
                message="now must be a valid ISO datetime",
            )

    unlocked = evaluate_unlock(
        lock_type,
        now=now,
        unlock_at=payload.get("unlockAt"),
        honor_confirmed=payload.get("honorConfirmed") is True,
    )
    return UnlockResponse(unlocked=unlocked)


add_preflight_route(router, "/unlock-evaluator")
