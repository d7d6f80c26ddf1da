"""Request enforcement: authentication and authorization before routing.

Every request to a protected operation passes through an ordered chain of
interceptors. The first one that denies ends the request with a Problem
Details response, and the endpoint never runs. When all of them allow, the
authenticated subject is left on ``request.state.subject_id``.

Usage:
    chain = EnforcementChain(
        [AuthenticationInterceptor(token_service), AuthorizationInterceptor(database)]
    )
    app.add_middleware(EnforcementMiddleware, policy=DEFAULT_POLICY, chain=chain)
"""

import dataclasses
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

import structlog
from fastapi import Request, Response
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.routing import BaseRoute, Match

from rbac_api.core.database import Database, translate_db_errors
from rbac_api.core.errors import (
    AppException,
    ConfigurationError,
    UnauthenticatedError,
    problem_response,
)
from rbac_api.core.permissions.checker import PermissionChecker
from rbac_api.core.permissions.policy import OperationPolicy


if TYPE_CHECKING:
    from starlette.types import ASGIApp, Scope

    from rbac_api.core.auth.tokens import TokenService


logger = structlog.get_logger()

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class InterceptContext:
    """What an interceptor knows about the request it is judging.

    Attributes:
        request: The incoming request
        operation: Route name of the matched operation
        required: Permissions the operation requires
        subject_id: Authenticated user, once an earlier interceptor set it
    """

    request: Request
    operation: str
    required: frozenset[str]
    subject_id: UUID | None = None


@dataclass(frozen=True)
class Decision:
    """Outcome of one interceptor."""

    allowed: bool
    subject_id: UUID | None = None
    error: AppException | None = None

    @classmethod
    def allow(cls, subject_id: UUID | None = None) -> "Decision":
        return cls(allowed=True, subject_id=subject_id)

    @classmethod
    def deny(cls, error: AppException) -> "Decision":
        return cls(allowed=False, error=error)


class RequestInterceptor(Protocol):
    """A single step of request enforcement."""

    async def intercept(self, ctx: InterceptContext) -> Decision: ...


def extract_bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer`` header, if any."""
    header = request.headers.get("Authorization")
    if not header or not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


class AuthenticationInterceptor:
    """Resolves the bearer token to a user ID."""

    def __init__(self, token_service: "TokenService") -> None:
        self.token_service = token_service

    async def intercept(self, ctx: InterceptContext) -> Decision:
        token = extract_bearer_token(ctx.request)
        if token is None:
            return Decision.deny(
                UnauthenticatedError(
                    "Missing authentication token",
                    error_code="missing_token",
                )
            )

        try:
            subject_id = self.token_service.verify(token)
        except UnauthenticatedError as exc:
            return Decision.deny(exc)

        return Decision.allow(subject_id)


class AuthorizationInterceptor:
    """Checks the subject's permissions against the operation's requirements.

    Opens its own session per request; persistence failures and timeouts
    deny with a 503 rather than letting the request through.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    async def intercept(self, ctx: InterceptContext) -> Decision:
        if ctx.subject_id is None:
            return Decision.deny(UnauthenticatedError())

        if not ctx.required:
            return Decision.allow(ctx.subject_id)

        try:
            async with self.database.session() as session:
                async with translate_db_errors(self.database.timeout):
                    await PermissionChecker(session).authorize(
                        ctx.subject_id, ctx.required
                    )
        except AppException as exc:
            return Decision.deny(exc)

        return Decision.allow(ctx.subject_id)


class EnforcementChain:
    """Runs interceptors in order and stops at the first denial."""

    def __init__(self, interceptors: Sequence[RequestInterceptor]) -> None:
        self.interceptors = list(interceptors)

    async def run(self, ctx: InterceptContext) -> Decision:
        """Run the chain for one request.

        Each allow may carry a subject ID, which later interceptors see on
        their context.

        Returns:
            The first denial, or an allow carrying the final subject ID
        """
        for interceptor in self.interceptors:
            decision = await interceptor.intercept(ctx)
            if not decision.allowed:
                return decision
            if decision.subject_id is not None:
                ctx = dataclasses.replace(ctx, subject_id=decision.subject_id)
        return Decision.allow(ctx.subject_id)


UNRESOLVED_OPERATION = "<unresolved>"


def _match_operation(routes: Iterable[BaseRoute], scope: "Scope") -> str | None:
    for route in routes:
        match, child_scope = route.matches(scope)
        if match != Match.FULL:
            continue
        if isinstance(route, APIRoute):
            return route.name
        children = getattr(route, "routes", None)
        if children:
            return _match_operation(children, {**scope, **child_scope})
        return getattr(route, "name", None) or UNRESOLVED_OPERATION
    return None


def resolve_operation(request: Request) -> str | None:
    """Return the name of the route that will handle the request.

    Mounted apps and nested routers are searched down to the endpoint.

    Returns:
        The route name, None if no route matches, or
        ``UNRESOLVED_OPERATION`` if a route matches but has no name
    """
    return _match_operation(request.app.router.routes, request.scope)


class EnforcementMiddleware(BaseHTTPMiddleware):
    """Middleware that denies unauthenticated or unauthorized requests.

    Operations are looked up in the permission table by route name;
    operations absent from the table pass through untouched. A request
    that matches a route whose name cannot be determined is refused.
    """

    def __init__(
        self,
        app: "ASGIApp",
        policy: OperationPolicy,
        chain: EnforcementChain,
        **kwargs: Any,
    ) -> None:
        super().__init__(app, **kwargs)
        self.policy = policy
        self.chain = chain

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Authorize the request before it reaches the router."""
        operation = resolve_operation(request)
        if operation == UNRESOLVED_OPERATION:
            logger.error("operation_unresolved", path=request.url.path)
            return problem_response(
                request,
                ConfigurationError(
                    "Request could not be matched to an operation",
                    error_code="unresolved_operation",
                ),
            )

        required = self.policy.required_for(operation)
        if operation is None or required is None:
            return await call_next(request)

        decision = await self.chain.run(
            InterceptContext(request=request, operation=operation, required=required)
        )

        if not decision.allowed:
            error = decision.error or UnauthenticatedError()
            logger.info(
                "request_denied",
                operation=operation,
                error_code=error.error_code,
                status_code=error.status_code,
            )
            return problem_response(request, error)

        request.state.subject_id = decision.subject_id
        structlog.contextvars.bind_contextvars(subject_id=str(decision.subject_id))
        return await call_next(request)
