"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_api.config import Settings
from rbac_api.core.auth import TokenService, hash_password
from rbac_api.core.database import Database
from rbac_api.core.permissions.models import Role
from rbac_api.main import create_app
from rbac_api.modules.users.models import User
from rbac_api.seeding import seed_rbac


TEST_SECRET = "test-secret-key-that-is-at-least-32-characters"
TEST_PASSWORD = "correct-horse-battery"

MakeUser = Callable[..., Awaitable[User]]


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory database."""
    return Settings(
        _env_file=None,
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret=TEST_SECRET,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create a fresh schema for every test."""
    database = Database.from_settings(settings)
    await database.create_all()

    yield database

    await database.dispose()


@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for arranging and inspecting test data.

    Data must be committed before a request is made; the app's own
    sessions share the single in-memory connection.
    """
    async with database.session() as session:
        yield session


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    """Create test application instance."""
    return create_app(settings=settings, database=database)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def token_service(app: FastAPI) -> TokenService:
    """The token service the app verifies with."""
    return app.state.token_service


@pytest.fixture
async def seeded(db: AsyncSession) -> None:
    """Seed the permission catalogue and default roles."""
    await seed_rbac(db)


@pytest.fixture
def make_user(db: AsyncSession) -> MakeUser:
    """Factory that persists a user holding the named roles.

    Usage:
        user = await make_user("a@test.com", roles=["user"])
    """

    async def _make_user(
        email: str,
        password: str = TEST_PASSWORD,
        roles: Sequence[str] = (),
    ) -> User:
        user = User(email=email, password_hash=hash_password(password))
        if roles:
            result = await db.execute(select(Role).where(Role.name.in_(roles)))
            user.roles = list(result.scalars().all())
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers(token_service: TokenService) -> Callable[[User], dict[str, str]]:
    """Build Authorization headers carrying a valid token for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = token_service.issue(user.id, email=user.email)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
