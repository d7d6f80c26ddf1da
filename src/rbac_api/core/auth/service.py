"""Authentication service for registration and login."""

import json
from collections.abc import Mapping
from typing import Annotated, Any

import structlog
from fastapi import Depends
from pydantic import BaseModel, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from rbac_api.api.dependencies import DBSession
from rbac_api.core.auth.dependencies import Tokens
from rbac_api.core.auth.passwords import hash_password, verify_password
from rbac_api.core.database import bounded
from rbac_api.core.errors import AuthenticationError, ConflictError, ValidationError
from rbac_api.modules.users.models import User
from rbac_api.modules.users.repos import UserRepository
from rbac_api.modules.users.schemas import (
    Credentials,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)


logger = structlog.get_logger()

_email_adapter = TypeAdapter(EmailStr)


def parse_credentials(
    payload: Any,
    schema: type[Credentials] = RegisterRequest,
) -> Credentials:
    """Turn a request payload into validated credentials.

    Accepts a mapping, a pydantic model, or a JSON document as ``str`` or
    ``bytes``.

    Args:
        payload: The raw credentials payload
        schema: Model the credentials must satisfy

    Returns:
        Validated credentials

    Raises:
        ValidationError: If the payload is not JSON, or email or password
            is missing or malformed
    """
    if isinstance(payload, str | bytes | bytearray):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValidationError(
                "Invalid JSON body",
                error_code="invalid_json",
            ) from exc
    elif isinstance(payload, BaseModel):
        payload = payload.model_dump()

    if not isinstance(payload, Mapping):
        raise ValidationError("Email and password are required")

    try:
        return schema.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(
            "Email and password are required",
            errors=[
                {
                    "field": ".".join(str(part) for part in error["loc"]) or "body",
                    "message": error["msg"],
                }
                for error in exc.errors()
            ],
        ) from exc


class AuthService:
    """Service for authentication operations.

    Handles user registration and login. Tokens are issued by the token
    service handed in by the caller.
    """

    def __init__(self, db: DBSession, token_service: Tokens) -> None:
        self.db = db
        self.token_service = token_service
        self.user_repo = UserRepository(db)

    async def register(self, email: str, password: str) -> User:
        """Register a new user with no roles.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            The created user

        Raises:
            ValidationError: If email or password is missing or malformed
            ConflictError: If the email is already registered
            InfrastructureError: If the database fails or times out
        """
        credentials = parse_credentials({"email": email, "password": password})

        async with bounded(self.db):
            existing = await self.user_repo.get_by_email(credentials.email)
        if existing:
            logger.info("registration_conflict")
            raise ConflictError(
                "Email already registered",
                error_code="email_taken",
            )

        user = User(
            email=credentials.email,
            password_hash=hash_password(credentials.password),
        )
        async with bounded(self.db):
            try:
                user = await self.user_repo.create(user)
                await self.db.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent registration
                await self.db.rollback()
                raise ConflictError(
                    "Email already registered",
                    error_code="email_taken",
                ) from exc

        logger.info("user_registered", user_id=str(user.id))
        return user

    async def register_from_payload(self, payload: Any) -> User:
        """Register from a mapping, model or JSON body."""
        credentials = parse_credentials(payload)
        return await self.register(credentials.email, credentials.password)

    async def login(self, email: str, password: str) -> TokenResponse:
        """Authenticate a user with email and password.

        Unknown email, malformed email and wrong password fail the same way.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Access token for the user

        Raises:
            AuthenticationError: If credentials are invalid
            InfrastructureError: If the database fails or times out
        """
        async with bounded(self.db):
            user = await self.user_repo.get_by_email(normalize_email(email))
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed")
            raise AuthenticationError()

        logger.info("login_succeeded", user_id=str(user.id))
        return TokenResponse(
            access_token=self.token_service.issue(user.id, email=user.email),
            expires_in=self.token_service.expires_in,
        )

    async def login_from_payload(self, payload: Any) -> TokenResponse:
        """Log in from a mapping, model or JSON body.

        Only presence is checked before the lookup, so a malformed email is
        rejected as invalid credentials.
        """
        credentials = parse_credentials(payload, LoginRequest)
        return await self.login(credentials.email, credentials.password)


def normalize_email(email: str) -> str:
    """Return the stored form of an email, or the input if it is malformed."""
    try:
        return _email_adapter.validate_python(email)
    except PydanticValidationError:
        return email


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
