"""Integration tests for bounded persistence calls.

A stalled database must fail the request with 503 rather than hang it.
"""

import asyncio
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from rbac_api.config import Settings
from rbac_api.modules.users.repos import UserRepository


pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("seeded")]

TIMEOUT_SECONDS = 0.2


@pytest.fixture
def settings(settings: Settings) -> Settings:
    """Same settings with a short persistence timeout."""
    return settings.model_copy(update={"database_timeout_seconds": TIMEOUT_SECONDS})


async def stall(*args, **kwargs):
    await asyncio.sleep(30)


def assert_timed_out(response) -> None:
    assert response.status_code == 503
    assert response.json()["type"].endswith("/errors/database_timeout")


class TestStalledDatabase:
    """Each entry point gives up after the configured timeout."""

    async def test_login(self, client: AsyncClient, make_user):
        await make_user("slow@test.com")

        with patch.object(UserRepository, "get_by_email", stall):
            response = await asyncio.wait_for(
                client.post(
                    "/api/v1/auth/login",
                    json={"email": "slow@test.com", "password": "whatever"},
                ),
                timeout=5,
            )

        assert_timed_out(response)

    async def test_register(self, client: AsyncClient):
        with patch.object(UserRepository, "get_by_email", stall):
            response = await asyncio.wait_for(
                client.post(
                    "/api/v1/auth/register",
                    json={"email": "new@test.com", "password": "whatever"},
                ),
                timeout=5,
            )

        assert_timed_out(response)

    async def test_authorization(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user("a@test.com", roles=["user"])

        with patch.object(UserRepository, "get_with_permissions", stall):
            response = await asyncio.wait_for(
                client.get("/api/v1/users", headers=auth_headers(user)),
                timeout=5,
            )

        assert_timed_out(response)

    async def test_crud(self, client: AsyncClient, make_user, auth_headers):
        """An allowed request whose handler stalls also times out."""
        user = await make_user("a@test.com", roles=["user"])

        with patch.object(UserRepository, "list", stall):
            response = await asyncio.wait_for(
                client.get("/api/v1/users", headers=auth_headers(user)),
                timeout=5,
            )

        assert_timed_out(response)
