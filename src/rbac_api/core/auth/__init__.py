"""Authentication module for passwords, tokens and credential checks."""

from rbac_api.core.auth.dependencies import (
    SubjectId,
    Tokens,
    get_subject_id,
    get_token_service,
)
from rbac_api.core.auth.middleware import RequestIdMiddleware
from rbac_api.core.auth.passwords import hash_password, verify_password
from rbac_api.core.auth.schemas import TokenData
from rbac_api.core.auth.tokens import TokenService


__all__ = [
    # Dependencies
    "SubjectId",
    # Tokens
    "TokenData",
    "TokenService",
    "Tokens",
    "get_subject_id",
    "get_token_service",
    # Middleware
    "RequestIdMiddleware",
    # Password utilities
    "hash_password",
    "verify_password",
]
