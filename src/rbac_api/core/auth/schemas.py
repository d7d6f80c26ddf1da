"""Authentication schemas for token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from rbac_api.core.constants import ACCESS_TOKEN_TYPE


class TokenData(BaseModel):
    """Data extracted from a verified JWT token.

    Attributes:
        subject: The user's UUID (``sub`` claim)
        email: Email the token was issued for, if any
        issued_at: Token issue time
        exp: Token expiration time
        type: Token type, always "access"
        jti: Unique token identifier
    """

    subject: UUID
    email: str | None = None
    issued_at: datetime | None = None
    exp: datetime
    type: str = ACCESS_TOKEN_TYPE
    jti: str | None = None
