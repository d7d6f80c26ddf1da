"""Integration tests for request enforcement.

These run the full middleware stack against an in-memory database seeded
with the default roles.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from httpx import AsyncClient
from sqlalchemy import delete
from sqlalchemy.exc import OperationalError

from rbac_api.core.auth.tokens import TokenService, utc_now
from rbac_api.core.permissions.models import user_roles
from rbac_api.modules.users.models import User


pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("seeded")]


class TestAuthorizationScenario:
    """a@test.com holds only the user role (user:read, user:write)."""

    @pytest.fixture
    async def alice(self, make_user) -> User:
        return await make_user("a@test.com", roles=["user"])

    async def test_role_write_is_denied(self, client: AsyncClient, alice, auth_headers):
        """assign_role requires role:write, which the user role lacks."""
        response = await client.post(
            f"/api/v1/users/{alice.id}/roles",
            json={"role_id": str(alice.roles[0].id)},
            headers=auth_headers(alice),
        )

        assert response.status_code == 403
        data = response.json()
        assert data["type"].endswith("/errors/permission_denied")
        assert data["required_permissions"] == ["role:write"]
        # The caller's own permissions are never disclosed
        assert "user:write" not in response.text

    async def test_user_read_is_allowed(self, client: AsyncClient, alice, auth_headers):
        response = await client.get("/api/v1/users", headers=auth_headers(alice))

        assert response.status_code == 200
        assert [u["email"] for u in response.json()["items"]] == ["a@test.com"]

    async def test_role_read_is_denied(self, client: AsyncClient, alice, auth_headers):
        response = await client.get("/api/v1/roles", headers=auth_headers(alice))

        assert response.status_code == 403

    async def test_no_token_is_unauthenticated(self, client: AsyncClient, alice):
        response = await client.get("/api/v1/users")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["type"].endswith("/errors/missing_token")

    async def test_bad_token_is_unauthenticated(self, client: AsyncClient, alice):
        response = await client.get(
            "/api/v1/users", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_token")

    async def test_expired_token_is_unauthenticated(
        self, client: AsyncClient, alice, settings
    ):
        """A token issued longer ago than its lifetime is rejected."""
        issuer = TokenService(
            settings.jwt_secret,
            ttl=timedelta(seconds=1),
            clock=lambda: utc_now() - timedelta(hours=1),
        )
        token = issuer.issue(alice.id)

        response = await client.get(
            "/api/v1/users", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    async def test_token_for_deleted_user_is_forbidden(
        self, client: AsyncClient, db, alice, auth_headers
    ):
        """A valid token naming a user that no longer exists gets 403, not 401."""
        headers = auth_headers(alice)
        await db.execute(delete(user_roles).where(user_roles.c.user_id == alice.id))
        await db.execute(delete(User).where(User.id == alice.id))
        await db.commit()

        response = await client.get("/api/v1/users", headers=headers)

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/identity_not_found")

    async def test_role_change_applies_to_next_request(
        self, client: AsyncClient, alice, make_user, auth_headers
    ):
        """Nothing is cached: a granted role takes effect immediately."""
        admin = await make_user("admin@test.com", roles=["admin"])
        roles = await client.get("/api/v1/roles", headers=auth_headers(admin))
        admin_role_id = next(r["id"] for r in roles.json() if r["name"] == "admin")

        before = await client.get("/api/v1/roles", headers=auth_headers(alice))
        grant = await client.post(
            f"/api/v1/users/{alice.id}/roles",
            json={"role_id": admin_role_id},
            headers=auth_headers(admin),
        )
        after = await client.get("/api/v1/roles", headers=auth_headers(alice))

        assert before.status_code == 403
        assert grant.status_code == 200
        assert after.status_code == 200

    async def test_denied_request_never_reaches_endpoint(
        self, client: AsyncClient, alice, auth_headers
    ):
        """The handler does not run when the caller lacks permission."""
        with patch(
            "rbac_api.modules.users.services.UserService.assign_role"
        ) as mock_assign:
            response = await client.post(
                f"/api/v1/users/{alice.id}/roles",
                json={"role_id": str(alice.id)},
                headers=auth_headers(alice),
            )

        assert response.status_code == 403
        mock_assign.assert_not_called()

    async def test_database_failure_is_service_unavailable(
        self, client: AsyncClient, alice, auth_headers
    ):
        """A persistence failure during the decision denies with 503."""
        with patch(
            "rbac_api.core.permissions.checker.PermissionChecker.get_user_permissions",
            side_effect=OperationalError("SELECT", {}, Exception("database is down")),
        ):
            response = await client.get("/api/v1/users", headers=auth_headers(alice))

        assert response.status_code == 503
        assert "database is down" not in response.text

    async def test_public_routes_need_no_token(self, client: AsyncClient):
        response = await client.get("/health/live")

        assert response.status_code == 200


class TestAdminScenario:
    """The seeded admin role grants every catalogue permission."""

    async def test_admin_can_manage_roles(self, client: AsyncClient, make_user, auth_headers):
        admin = await make_user("admin@test.com", roles=["admin"])
        member = await make_user("member@test.com")
        headers = auth_headers(admin)

        roles = await client.get("/api/v1/roles", headers=headers)
        user_role_id = next(r["id"] for r in roles.json() if r["name"] == "user")

        granted = await client.post(
            f"/api/v1/users/{member.id}/roles",
            json={"role_id": user_role_id},
            headers=headers,
        )
        removed = await client.delete(
            f"/api/v1/users/{member.id}/roles/{user_role_id}", headers=headers
        )
        removed_again = await client.delete(
            f"/api/v1/users/{member.id}/roles/{user_role_id}", headers=headers
        )

        assert granted.status_code == 200
        assert granted.json()["roles"] == ["user"]
        assert removed.status_code == 204
        assert removed_again.status_code == 404
