"""Password hashing with bcrypt."""

from passlib.context import CryptContext

from rbac_api.core.constants import BCRYPT_ROUNDS


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Every call uses a fresh salt, so hashing the same password twice gives
    two different digests.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise

    Raises:
        ValueError: If ``hashed_password`` is not a recognizable bcrypt hash
    """
    return pwd_context.verify(plain_password, hashed_password)
