"""Application configuration using pydantic-settings."""

import re
from datetime import timedelta
from functools import lru_cache

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rbac_api.core.constants import (
    DEFAULT_BOOTSTRAP_ADMIN_EMAIL,
    DEFAULT_DATABASE_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_TTL_SECONDS,
    MIN_SECRET_KEY_LENGTH,
)


# "90s", "15m", "12h", "7d"
_DURATION_SHORTHAND = re.compile(r"^\s*(\d+)\s*([smhd])\s*$", re.IGNORECASE)
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "RBAC API"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Database
    database_url: str = "sqlite+aiosqlite:///./rbac.sqlite"
    database_echo: bool = False
    database_timeout_seconds: float = DEFAULT_DATABASE_TIMEOUT_SECONDS

    # Auth
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_expires_in: timedelta = timedelta(seconds=DEFAULT_TOKEN_TTL_SECONDS)

    # Bootstrap
    bootstrap_admin_email: str = DEFAULT_BOOTSTRAP_ADMIN_EMAIL

    # CORS
    cors_origins: list[str] = []

    # API Documentation
    api_docs_base_url: str = "https://api.example.com"

    # Observability
    log_level: str = "INFO"

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str | None) -> str | None:
        """Reject secrets that are present but too short to be safe.

        A missing secret is allowed here; the token service refuses to
        start without one.

        Raises:
            ValueError: If the secret is shorter than the minimum length
        """
        if v is None or v == "":
            return None
        if len(v) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_SECRET_KEY_LENGTH} characters. "
                "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
            )
        return v

    @field_validator("jwt_expires_in", mode="before")
    @classmethod
    def parse_duration_shorthand(cls, v: object) -> object:
        """Accept shorthand durations such as ``7d`` or ``15m``.

        Plain seconds and ISO-8601 durations are left to pydantic.
        """
        if isinstance(v, str):
            match = _DURATION_SHORTHAND.match(v)
            if match:
                amount, unit = match.groups()
                return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})
        return v

    @field_validator("jwt_expires_in")
    @classmethod
    def validate_positive_duration(cls, v: timedelta) -> timedelta:
        """Token lifetime must be positive."""
        if v <= timedelta(0):
            raise ValueError("JWT_EXPIRES_IN must be a positive duration")
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
