from __future__ import annotations

from openme.api.routes.emergency import router as emergency_router
from openme.api.routes.health import router as health_router
from openme.api.routes.letters import router as letters_router
from openme.api.routes.telemetry import router as telemetry_router
from openme.api.routes.unlock import router as unlock_router

__all__ = [
    "emergency_router",
    "health_router",
    "letters_router",
    "telemetry_router",
    "unlock_router",
]
