"""JWT access token issuing and verification.

Tokens are HS256-signed JWTs carrying the user id in ``sub``. They are not
stored anywhere: a token is valid while its signature verifies against the
current secret and its expiry has not passed.
"""

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog
from jose import JWTError, jwt

from rbac_api.core.auth.schemas import TokenData
from rbac_api.core.constants import (
    ACCESS_TOKEN_JTI_LENGTH,
    ACCESS_TOKEN_TYPE,
    DEFAULT_TOKEN_TTL_SECONDS,
)
from rbac_api.core.errors import ConfigurationError, UnauthenticatedError


if TYPE_CHECKING:
    from rbac_api.config import Settings


logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)


class TokenService:
    """Issues and verifies signed access tokens.

    Usage:
        tokens = TokenService(secret)
        token = tokens.issue(user.id, email=user.email)
        user_id = tokens.verify(token)
    """

    def __init__(
        self,
        secret: str | None,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(seconds=DEFAULT_TOKEN_TTL_SECONDS),
        clock: Clock = utc_now,
    ) -> None:
        """Create the service.

        Args:
            secret: Signing secret
            algorithm: JWT signing algorithm
            ttl: Lifetime of issued tokens
            clock: Source of the current time

        Raises:
            ConfigurationError: If no secret is configured
        """
        if not secret:
            raise ConfigurationError(
                "JWT_SECRET is not configured",
                error_code="missing_jwt_secret",
            )
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        """Build the service from application settings."""
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=settings.jwt_expires_in,
        )

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return int(self.ttl.total_seconds())

    def issue(self, subject: UUID, email: str | None = None) -> str:
        """Create a signed access token for a user.

        Args:
            subject: The user's UUID
            email: Optional email to carry in the token

        Returns:
            Encoded JWT access token
        """
        issued_at = int(self._clock().timestamp())

        to_encode: dict[str, Any] = {
            "sub": str(subject),
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
            "type": ACCESS_TOKEN_TYPE,
            "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),  # Unique token ID
        }
        if email is not None:
            to_encode["email"] = email

        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenData | None:
        """Decode and validate a token.

        Args:
            token: The JWT token to decode

        Returns:
            TokenData if valid, None if the signature, structure, type or
            expiry check fails
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against the injected clock
                options={"verify_exp": False},
            )

            subject = payload.get("sub")
            exp = payload.get("exp")
            issued_at = payload.get("iat")
            token_type = payload.get("type")

            if not subject or not isinstance(exp, int | float):
                return None

            if token_type != ACCESS_TOKEN_TYPE:
                return None

            if self._clock().timestamp() > exp:
                return None

            return TokenData(
                subject=UUID(subject),
                email=payload.get("email"),
                issued_at=(
                    datetime.fromtimestamp(issued_at, tz=UTC)
                    if isinstance(issued_at, int | float)
                    else None
                ),
                exp=datetime.fromtimestamp(exp, tz=UTC),
                type=token_type,
                jti=payload.get("jti"),
            )

        except (JWTError, ValueError, TypeError):
            return None

    def verify(self, token: str) -> UUID:
        """Return the subject of a valid token.

        Raises:
            UnauthenticatedError: If the token is invalid or expired
        """
        token_data = self.decode(token)
        if token_data is None:
            logger.info("token_rejected")
            raise UnauthenticatedError(
                "Invalid or expired token",
                error_code="invalid_token",
            )
        return token_data.subject
