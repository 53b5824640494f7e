"""
Integration Test Fixtures.

The real FastAPI app, wired to the per-test database session from the root
conftest. Secrets are patched so no config/.env is needed; YAML settings
come from config/settings as in production.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.backend.core.database import get_db_session
from jotter.backend.models import User

API_PREFIX = "/api/v1"


@pytest.fixture(autouse=True)
def patched_secrets() -> Generator[MagicMock, None, None]:
    """Secrets for every integration test. The JWT key signs auth_headers."""
    secrets = MagicMock()
    secrets.db_password = "test_pass"
    secrets.jwt_secret = "integration-test-signing-key"
    secrets.anthropic_api_key = ""
    secrets.database_url = ""
    with patch("jotter.backend.core.config.get_settings", return_value=secrets), \
         patch("jotter.backend.core.security.get_settings", return_value=secrets):
        yield secrets


@pytest.fixture
def app(db_session: AsyncSession) -> Generator[FastAPI, None, None]:
    """
    Application whose requests all share the test session.

    The session is rolled back by the root conftest, so endpoint commits
    never outlive the test.
    """
    from jotter.backend.main import create_app

    async def _test_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application = create_app()
    application.dependency_overrides[get_db_session] = _test_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# =============================================================================
# Envelope assertions
# =============================================================================


class ApiAssertions:
    """Checks on the ApiResponse / ErrorResponse envelope."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        assert response.status_code == expected_status, response.text
        body = response.json()
        assert body["success"] is True, body
        assert body["error"] is None, body
        return body

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        assert response.status_code == expected_status, response.text
        body = response.json()
        assert body["success"] is False, body
        assert body["data"] is None, body
        if expected_code:
            assert body["error"]["code"] == expected_code, body
        return body

    @staticmethod
    def assert_validation_error(response: Any, field: str | None = None) -> dict[str, Any]:
        """422 from request validation, optionally naming the offending field."""
        body = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field:
            fields = [e["field"] for e in body["error"]["details"]["validation_errors"]]
            assert any(field in f for f in fields), fields
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()


# =============================================================================
# Authentication
# =============================================================================


def _bearer(user: User) -> dict[str, str]:
    from jotter.backend.core.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for `user`, the owner of the entries under test."""
    return _bearer(user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict[str, str]:
    """Bearer header for `other_user`, for ownership checks."""
    return _bearer(other_user)
