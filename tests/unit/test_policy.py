"""Unit tests for the operation permission table."""

import pytest
from fastapi import FastAPI

from rbac_api.core.errors import ConfigurationError
from rbac_api.core.permissions.policy import DEFAULT_POLICY, OperationPolicy


pytestmark = pytest.mark.unit


@pytest.fixture
def app() -> FastAPI:
    application = FastAPI()

    @application.get("/things")
    async def list_things() -> list[str]:
        return []

    @application.get("/ping")
    async def ping() -> str:
        return "pong"

    return application


class TestOperationPolicy:
    """Tests for OperationPolicy lookups."""

    def test_required_for_listed_operation(self):
        policy = OperationPolicy({"list_things": ["thing:read", "thing:read"]})

        assert policy.required_for("list_things") == frozenset({"thing:read"})

    def test_unlisted_operation_is_public(self):
        policy = OperationPolicy({"list_things": {"thing:read"}})

        assert policy.required_for("ping") is None
        assert policy.required_for(None) is None

    def test_empty_set_means_authenticated_only(self):
        policy = OperationPolicy({"me": set()})

        assert policy.required_for("me") == frozenset()

    def test_table_cannot_be_mutated(self):
        rules = {"list_things": {"thing:read"}}
        policy = OperationPolicy(rules)
        rules["list_things"].add("thing:write")

        assert policy.required_for("list_things") == frozenset({"thing:read"})
        with pytest.raises(TypeError):
            policy.rules["ping"] = frozenset()  # type: ignore[index]


class TestValidateAgainst:
    """Tests for checking the table against an app's routes."""

    def test_known_operations_pass(self, app: FastAPI):
        OperationPolicy({"list_things": {"thing:read"}}).validate_against(app)

    def test_unknown_operation_fails(self, app: FastAPI):
        policy = OperationPolicy({"list_things": {"thing:read"}, "delete_all": set()})

        with pytest.raises(ConfigurationError) as exc_info:
            policy.validate_against(app)

        assert exc_info.value.details == {"unknown_operations": ["delete_all"]}

    def test_operations_in_mounted_apps_are_found(self, app: FastAPI):
        parent = FastAPI()
        parent.mount("/v2", app)

        OperationPolicy({"list_things": {"thing:read"}, "ping": set()}).validate_against(
            parent
        )


class TestDefaultPolicy:
    """Tests for the shipped table."""

    def test_user_operations(self):
        assert DEFAULT_POLICY.required_for("list_users") == {"user:read"}
        assert DEFAULT_POLICY.required_for("get_user") == {"user:read"}
        assert DEFAULT_POLICY.required_for("assign_role") == {"role:write"}
        assert DEFAULT_POLICY.required_for("remove_role") == {"role:write"}

    def test_role_operations(self):
        assert DEFAULT_POLICY.required_for("list_roles") == {"role:read"}
        assert DEFAULT_POLICY.required_for("get_role") == {"role:read"}
        assert DEFAULT_POLICY.required_for("list_permissions") == {"role:read"}

    def test_auth_operations(self):
        assert DEFAULT_POLICY.required_for("register") is None
        assert DEFAULT_POLICY.required_for("login") is None
        assert DEFAULT_POLICY.required_for("read_current_user") == frozenset()
