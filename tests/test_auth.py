"""Unit tests for CMS admin token authentication."""

from unittest.mock import Mock

import pytest

from openme.core.auth import require_cms_actor, validate_admin_token
from openme.core.errors import AuthenticationAppError, ServiceUnavailableAppError

from conftest import build_settings


def _request_with(cms_admin_token: str | None) -> Mock:
    request = Mock()
    request.app.state.settings = build_settings(cms_admin_token=cms_admin_token)
    return request


class TestValidateAdminToken:
    """Test core admin token validation logic."""

    def test_raises_503_when_token_not_configured(self) -> None:
        with pytest.raises(ServiceUnavailableAppError) as exc_info:
            validate_admin_token("anything", None)

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "CMS_ADMIN_TOKEN is not configured"

    def test_raises_503_when_token_configured_empty(self) -> None:
        with pytest.raises(ServiceUnavailableAppError):
            validate_admin_token("anything", "")

    def test_accepts_matching_token(self) -> None:
        validate_admin_token("secret", "secret")

    def test_rejects_wrong_token(self) -> None:
        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_token("wrong", "secret")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"

    @pytest.mark.parametrize("provided", [None, ""])
    def test_rejects_missing_token(self, provided) -> None:
        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_token(provided, "secret")

        assert exc_info.value.message == "Unauthorized"

    def test_rejects_token_prefix(self) -> None:
        with pytest.raises(AuthenticationAppError):
            validate_admin_token("secre", "secret")


class TestRequireCmsActor:
    """Test the FastAPI dependency for CMS writes."""

    def test_returns_trimmed_actor(self) -> None:
        actor = require_cms_actor(
            _request_with("secret"),
            x_admin_token="secret",
            x_actor_id="  editor-1  ",
        )
        assert actor == "editor-1"

    @pytest.mark.parametrize("actor", [None, "", "   "])
    def test_requires_actor_id(self, actor) -> None:
        with pytest.raises(AuthenticationAppError) as exc_info:
            require_cms_actor(_request_with("secret"), x_admin_token="secret", x_actor_id=actor)

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "x-actor-id header is required"

    def test_token_checked_before_actor(self) -> None:
        with pytest.raises(AuthenticationAppError) as exc_info:
            require_cms_actor(_request_with("secret"), x_admin_token="nope", x_actor_id=None)

        assert exc_info.value.message == "Unauthorized"

    def test_unconfigured_token_wins_over_everything(self) -> None:
        with pytest.raises(ServiceUnavailableAppError):
            require_cms_actor(_request_with(None), x_admin_token=None, x_actor_id=None)
