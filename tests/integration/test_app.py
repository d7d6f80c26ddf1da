"""Tests for the application factory and health endpoints."""

import re
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from rbac_api.config import Settings
from rbac_api.core.database import Database
from rbac_api.core.errors import ConfigurationError
from rbac_api.core.permissions.policy import DEFAULT_POLICY, OperationPolicy, iter_api_routes
from rbac_api.main import create_app


pytestmark = pytest.mark.integration


class TestCreateApp:
    """Tests for startup checks in create_app."""

    def test_missing_secret_aborts_startup(self, settings: Settings, database: Database):
        no_secret = settings.model_copy(update={"jwt_secret": None})

        with pytest.raises(ConfigurationError):
            create_app(settings=no_secret, database=database)

    def test_policy_naming_unknown_route_aborts_startup(
        self, settings: Settings, database: Database
    ):
        policy = OperationPolicy({"list_users": {"user:read"}, "drop_tables": set()})

        with pytest.raises(ConfigurationError):
            create_app(settings=settings, database=database, policy=policy)

    def test_state_is_attached(self, app):
        assert app.state.database is not None
        assert app.state.token_service.expires_in == 7 * 24 * 60 * 60


class TestHealth:
    """Tests for health check endpoints."""

    async def test_liveness_endpoint(self, client: AsyncClient):
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_readiness_endpoint(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"]["database"] == "ok"

    async def test_info_endpoint(self, client: AsyncClient):
        response = await client.get("/info")

        assert response.status_code == 200
        data = response.json()
        assert data["app"] == "RBAC API"
        assert data["environment"] == "testing"

    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/health/live", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    async def test_error_carries_trace_id(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/users", headers={"X-Request-ID": "trace-me"}
        )

        assert response.status_code == 401
        assert response.json()["trace_id"] == "trace-me"


async def static_files(scope, receive, send):
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": b"file"})


class TestProtectedRoutes:
    """Every operation in the permission table is enforced."""

    async def test_each_protected_operation_requires_a_token(
        self, app: FastAPI, client: AsyncClient
    ):
        protected = [
            route
            for route in iter_api_routes(app.router.routes)
            if route.name in DEFAULT_POLICY.rules
        ]
        assert {route.name for route in protected} == set(DEFAULT_POLICY.rules)

        for route in protected:
            path = re.sub(r"\{[^}]+\}", str(uuid4()), route.path)
            method = sorted(route.methods)[0]

            response = await client.request(method, path)

            assert response.status_code == 401, route.name

    async def test_list_users_requires_a_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/missing_token")

    async def test_unnamed_mount_is_refused(self, app: FastAPI, client: AsyncClient):
        """A request the middleware cannot attribute to an operation never passes."""
        app.mount("/files", static_files)

        response = await client.get("/files/report.txt")

        assert response.status_code == 500
        assert response.json()["type"].endswith("/errors/unresolved_operation")
