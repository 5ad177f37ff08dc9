"""Request security guard for the JSON write endpoints.

Every write endpoint runs the same pipeline, in order:

1. security headers (middleware, on every response)
2. CORS preflight (dedicated OPTIONS routes)
3. HTTP verb (router, 405)
4. CORS origin check (403)
5. JSON content type and payload ceiling (415 / 413)
6. per-scope rate limit (429)

Steps 4-6 are bundled in :func:`write_endpoint_guard`; endpoint field
validation and authentication follow in the route itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, Request, Response, status

from openme.core.config import AppSettings
from openme.core.cors import verify_cors_origin
from openme.core.dependencies import get_settings
from openme.core.payload_validation import read_json_payload
from openme.core.rate_limit import enforce_rate_limit

SECURITY_HEADERS: dict[str, str] = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


@dataclass(frozen=True)
class EndpointPolicy:
    """Guard parameters of one write endpoint.

    Attributes:
        scope: Rate-limit namespace.
        max_payload_bytes: Ceiling for the serialized JSON body.
        limit_setting: Name of the AppSettings field holding the request budget.
        window_setting: Name of the AppSettings field holding the window length.
    """

    scope: str
    max_payload_bytes: int
    limit_setting: str
    window_setting: str

    def request_limit(self, cfg: AppSettings) -> int:
        return int(getattr(cfg, self.limit_setting))

    def window_seconds(self, cfg: AppSettings) -> float:
        return float(getattr(cfg, self.window_setting))


LETTER_UPDATE_POLICY = EndpointPolicy(
    "letter-update", 8_192, "letter_update_requests", "letter_update_window_seconds"
)
EMERGENCY_NOTIFY_POLICY = EndpointPolicy(
    "emergency-notify", 4_096, "emergency_notify_requests", "emergency_notify_window_seconds"
)
LETTER_OPEN_POLICY = EndpointPolicy(
    "letter-open", 4_096, "telemetry_requests", "telemetry_window_seconds"
)
READ_RECEIPT_POLICY = EndpointPolicy(
    "read-receipt", 4_096, "telemetry_requests", "telemetry_window_seconds"
)
UNLOCK_EVALUATOR_POLICY = EndpointPolicy(
    "unlock-evaluator", 2_048, "unlock_evaluator_requests", "unlock_evaluator_window_seconds"
)


def write_endpoint_guard(
    policy: EndpointPolicy,
) -> Callable[[Request], Awaitable[dict[str, Any]]]:
    """Build the FastAPI dependency guarding a JSON write endpoint.

    Usage:
        @router.post("/letter-open")
        async def open_letter(
            payload: Annotated[dict, Depends(write_endpoint_guard(LETTER_OPEN_POLICY))],
        ): ...

    Returns:
        A dependency that yields the validated JSON object body.
    """

    async def guard(request: Request) -> dict[str, Any]:
        verify_cors_origin(request)
        payload = await read_json_payload(request, max_bytes=policy.max_payload_bytes)
        cfg = get_settings(request).app
        enforce_rate_limit(
            request,
            scope=policy.scope,
            limit=policy.request_limit(cfg),
            window_seconds=policy.window_seconds(cfg),
        )
        return payload

    return guard


def add_preflight_route(router: APIRouter, path: str) -> None:
    """Register an OPTIONS handler for ``path`` answering CORS preflights.

    Allowed origins get 204 with no body; others get 403. The endpoint
    itself never runs.
    """

    async def preflight() -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    router.add_api_route(
        path,
        preflight,
        methods=["OPTIONS"],
        dependencies=[Depends(verify_cors_origin)],
        include_in_schema=False,
        name=f"preflight:{path}",
    )
