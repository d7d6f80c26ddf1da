"""Async database handle and session management.

The application owns exactly one :class:`Database`. It is created by the
app factory, stored on ``app.state.database`` and handed to every component
that needs persistence. Nothing in this module opens a connection at import
time.
"""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog
from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from rbac_api.core.database.base import Base
from rbac_api.core.errors import InfrastructureError


if TYPE_CHECKING:
    from rbac_api.config import Settings


logger = structlog.get_logger()

TIMEOUT_INFO_KEY = "timeout"


class Database:
    """Owns the async engine and the session factory built on it.

    Usage:
        database = Database("sqlite+aiosqlite:///./rbac.sqlite")
        async with database.session() as session:
            ...
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        timeout: float | None = None,
        **engine_kwargs: Any,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            info={TIMEOUT_INFO_KEY: timeout},
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """Build the handle from application settings.

        In-memory SQLite needs a single shared connection, otherwise every
        session would see its own empty database.
        """
        engine_kwargs: dict[str, Any] = {}
        if settings.database_url.startswith("sqlite") and ":memory:" in settings.database_url:
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        elif not settings.database_url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True  # Verify connections before use

        return cls(
            settings.database_url,
            echo=settings.database_echo,
            timeout=settings.database_timeout_seconds,
            **engine_kwargs,
        )

    def session(self) -> AsyncSession:
        """Open a new session. Use it as an async context manager."""
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table registered on the declarative base."""
        import rbac_api.models  # noqa: F401, PLC0415

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


@asynccontextmanager
async def translate_db_errors(timeout: float | None = None) -> AsyncIterator[None]:
    """Bound a block of persistence calls and normalize its failures.

    Raises:
        InfrastructureError: If the block times out or the database fails
    """
    try:
        async with asyncio.timeout(timeout):
            yield
    except TimeoutError as exc:
        logger.error("database_timeout", timeout=timeout)
        raise InfrastructureError(
            "Database did not respond in time",
            error_code="database_timeout",
        ) from exc
    except SQLAlchemyError as exc:
        logger.error("database_error", error_type=type(exc).__name__)
        raise InfrastructureError(
            "Database unavailable",
            error_code="database_unavailable",
        ) from exc


def bounded(session: AsyncSession) -> AbstractAsyncContextManager[None]:
    """Run a block under the timeout of the database the session came from.

    Usage:
        async with bounded(self.db):
            user = await self.user_repo.get_by_email(email)
    """
    return translate_db_errors(session.info.get(TIMEOUT_INFO_KEY))


def get_database(request: Request) -> Database:
    """Return the database handle owned by the running application."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session.

    Usage:
        @router.get("/items")
        async def list_items(db: DBSession):
            ...
    """
    database = get_database(request)
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
