"""OpenAPI metadata and customization utilities.

Adds to the generated schema:
- An ``AdminToken`` apiKey security scheme (header ``X-Admin-Token``)
  applied to the CMS write endpoint only
- Tags metadata for the endpoint groups
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

ADMIN_PROTECTED_PATHS = ("/letter-update",)

TAGS_METADATA = [
    {"name": "Letters", "description": "Letter listing and CMS writes."},
    {"name": "Telemetry", "description": "Letter-open events and read receipts."},
    {"name": "Notifications", "description": "Emergency support emails."},
    {"name": "Locks", "description": "Honor and time lock evaluation."},
    {"name": "Health", "description": "Liveness checks."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and the admin scheme."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminToken",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-Admin-Token",
                "description": "CMS admin token; also send X-Actor-Id.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path in ADMIN_PROTECTED_PATHS:
            for method_obj in paths.get(path, {}).values():
                if isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminToken": []}]

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
