"""FastAPI dependencies for authentication.

Token checks happen in the enforcement middleware before any endpoint
runs. These dependencies only read what it left on the request.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rbac_api.core.auth.tokens import TokenService
from rbac_api.core.errors import UnauthenticatedError


# HTTP Bearer token security scheme; documents the header in OpenAPI
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """Return the token service owned by the running application."""
    return request.app.state.token_service


async def get_subject_id(
    request: Request,
    _credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> UUID:
    """Get the authenticated user's ID.

    Raises:
        UnauthenticatedError: If the route was not authenticated by the
            enforcement middleware
    """
    subject_id = getattr(request.state, "subject_id", None)
    if subject_id is None:
        raise UnauthenticatedError(
            "Missing authentication token",
            error_code="missing_token",
        )
    return subject_id


# Type aliases for cleaner dependency injection
SubjectId = Annotated[UUID, Depends(get_subject_id)]
Tokens = Annotated[TokenService, Depends(get_token_service)]
