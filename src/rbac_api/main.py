"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rbac_api import __version__
from rbac_api.api.router import build_api_router
from rbac_api.config import Settings, get_settings
from rbac_api.core.auth import RequestIdMiddleware, TokenService
from rbac_api.core.database import Database
from rbac_api.core.errors import register_exception_handlers
from rbac_api.core.logging import RequestLoggingMiddleware, configure_logging
from rbac_api.core.permissions import DEFAULT_POLICY, OperationPolicy
from rbac_api.core.permissions.enforcement import (
    AuthenticationInterceptor,
    AuthorizationInterceptor,
    EnforcementChain,
    EnforcementMiddleware,
)


logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    yield

    logger.info("application_shutdown")
    await app.state.database.dispose()
    logger.info("database_disposed")


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    policy: OperationPolicy = DEFAULT_POLICY,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment
        database: Database handle to use instead of one built from settings
        policy: Operation permission table to enforce

    Returns:
        Configured FastAPI application instance.

    Raises:
        ConfigurationError: If JWT_SECRET is missing or the permission
            table names an operation the app does not expose
    """
    settings = settings or get_settings()
    configure_logging(settings)

    # Fails fast when no signing secret is configured
    token_service = TokenService.from_settings(settings)
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Role-based access control for an HTTP API",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.token_service = token_service
    app.state.policy = policy

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(build_api_router())
    policy.validate_against(app)

    # Middleware added last runs first: CORS, request ID, logging, enforcement
    app.add_middleware(
        EnforcementMiddleware,
        policy=policy,
        chain=EnforcementChain(
            [
                AuthenticationInterceptor(token_service),
                AuthorizationInterceptor(database),
            ]
        ),
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    return app
