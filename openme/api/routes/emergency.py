from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from openme.adapters.email.base import AbstractEmailTransport
from openme.core.config import Settings
from openme.core.dependencies import get_email_transport, get_settings
from openme.core.security import EMERGENCY_NOTIFY_POLICY, add_preflight_route, write_endpoint_guard
from openme.schemas.notifications import EmergencyNotifyResponse
from openme.services.emergency_service import (
    parse_emergency_request,
    send_emergency_notification,
)

router = APIRouter(tags=["Notifications"])


@router.post(
    "/emergency-notify",
    response_model=EmergencyNotifyResponse,
    responses={503: {"model": EmergencyNotifyResponse}},
)
async def emergency_notify(
    payload: Annotated[dict[str, Any], Depends(write_endpoint_guard(EMERGENCY_NOTIFY_POLICY))],
    settings: Annotated[Settings, Depends(get_settings)],
    transport: Annotated[AbstractEmailTransport, Depends(get_email_transport)],
) -> EmergencyNotifyResponse | JSONResponse:
    """Email an emergency support request to the configured recipient.

    Returns 200 only when the provider confirmed delivery; otherwise 503
    with ``delivered: false``, the provider name and its failure details so
    the caller can decide whether to retry.
    """
    request = parse_emergency_request(
        payload,
        default_recipient=settings.email.emergency_recipient_email,
    )
    result = await send_emergency_notification(request, transport)

    if result.delivered:
        return EmergencyNotifyResponse(
            accepted=True,
            delivered=True,
            provider=result.provider,
            message="Emergency notification delivered",
        )

    body = EmergencyNotifyResponse(
        accepted=False,
        delivered=False,
        provider=result.provider,
        message=result.details,
    )
    return JSONResponse(status_code=503, content=body.model_dump())


add_preflight_route(router, "/emergency-notify")
