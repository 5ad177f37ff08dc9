"""Tests for global exception handlers.

Validates that all exception types are rendered as ``{"error": message}``
with the right status code, extra headers and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from openme.core.errors import (
    AppError,
    AuthenticationAppError,
    OriginNotAllowedError,
    PayloadTooLargeError,
    RateLimitAppError,
    StorageAppError,
    UnsupportedMediaTypeError,
    ValidationAppError,
)
from openme.core.exception_handlers import GENERIC_ERROR_MESSAGE, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        "error_cls, status_code",
        [
            (ValidationAppError, 400),
            (AuthenticationAppError, 401),
            (OriginNotAllowedError, 403),
            (PayloadTooLargeError, 413),
            (UnsupportedMediaTypeError, 415),
            (RateLimitAppError, 429),
            (StorageAppError, 503),
        ],
    )
    def test_status_codes(self, client: TestClient, app_with_handlers: FastAPI, error_cls, status_code):
        @app_with_handlers.get("/raise")
        async def raise_error():
            raise error_cls(code="test", message="Something failed")

        response = client.get("/raise")

        assert response.status_code == status_code
        assert response.json() == {"error": "Something failed"}

    def test_details_are_not_returned(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-details")
        async def raise_error():
            raise PayloadTooLargeError(
                code="payload_too_large",
                message="Payload too large",
                details={"max_bytes": 4096, "actual_bytes": 5000},
            )

        response = client.get("/test-details")

        assert response.json() == {"error": "Payload too large"}

    def test_error_headers_are_forwarded(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-headers")
        async def raise_error():
            raise RateLimitAppError(
                code="rate_limited",
                message="Too many requests",
                headers={"Retry-After": "30"},
            )

        response = client.get("/test-headers")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"


class TestHttpExceptionHandler:
    def test_unknown_route_is_404_envelope(self, client: TestClient):
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_wrong_method_is_405_envelope(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.post("/only-post")
        async def only_post():
            return {}

        response = client.get("/only-post")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_logic(self):
        from openme.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("Unexpected error: database connection failed")
        response = asyncio.run(general_exception_handler(request, exc))

        response_body = response.body if isinstance(response.body, bytes) else bytes(response.body)
        data = json.loads(response_body.decode())
        assert response.status_code == 500
        assert data == {"error": GENERIC_ERROR_MESSAGE}
        assert "database connection" not in data["error"]

    def test_general_exception_handler_never_leaks_stack_trace(self):
        from openme.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        assert "Traceback" not in response_text
        assert "File \"" not in response_text
        assert "ValueError" not in response_text


class TestErrorHandlerIntegration:
    """Integration tests for exception handler setup."""

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
