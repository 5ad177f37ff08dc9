from __future__ import annotations

"""Application factory for the FastAPI app.

Builds the app and the process-wide collaborators (settings, letter store,
rate limiter, email transport) once, keeping them on ``app.state``. Tests
pass their own collaborators instead of patching module globals.
"""

from fastapi import FastAPI

from openme.adapters.email.base import AbstractEmailTransport
from openme.adapters.email.factory import create_email_transport
from openme.adapters.letter_store.base import AbstractLetterStore
from openme.adapters.letter_store.factory import create_letter_store
from openme.adapters.rate_limit.base import AbstractRateLimiter
from openme.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from openme.api.routes import (
    emergency_router,
    health_router,
    letters_router,
    telemetry_router,
    unlock_router,
)
from openme.core.config import Settings, settings as default_settings
from openme.core.exception_handlers import setup_exception_handlers
from openme.core.logging import configure_logging
from openme.core.middleware import request_id_middleware, security_headers_middleware
from openme.core.openapi import TAGS_METADATA, apply_openapi_customizations


def create_app(
    settings: Settings | None = None,
    *,
    letter_store: AbstractLetterStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    email_transport: AbstractEmailTransport | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Settings to use; defaults to the environment-loaded instance.
        letter_store: Letter store; defaults to the one chosen from settings.
        rate_limiter: Rate limiter; defaults to a fresh in-memory limiter.
        email_transport: Email transport; defaults to the one chosen from settings.
        configure_logs: Whether to (re)configure the root logger.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    cfg = settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(cfg.log)

    app = FastAPI(
        title="Open Me API",
        description=(
            "JSON endpoints behind the Open Me letters app: letter listing and "
            "CMS updates, letter-open and read-receipt telemetry, emergency "
            "support emails and honor/time lock evaluation. Write endpoints "
            "enforce a CORS allow-list, payload ceilings and per-client rate "
            "limits."
        ),
        version="0.1.0",
        debug=cfg.app.debug,
        openapi_tags=TAGS_METADATA,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.state.settings = cfg
    app.state.letter_store = (
        letter_store if letter_store is not None else create_letter_store(cfg)
    )
    app.state.rate_limiter = (
        rate_limiter if rate_limiter is not None else InMemoryFixedWindowRateLimiter()
    )
    app.state.email_transport = (
        email_transport if email_transport is not None else create_email_transport(cfg.email)
    )

    # Middleware (last added runs first)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(letters_router)
    app.include_router(telemetry_router)
    app.include_router(emergency_router)
    app.include_router(unlock_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
