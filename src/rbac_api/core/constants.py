"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255

# Password requirements
MIN_PASSWORD_LENGTH = 1
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_TYPE = "access"
ACCESS_TOKEN_JTI_LENGTH = 32
DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60  # 7 days

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32

# Persistence
DEFAULT_DATABASE_TIMEOUT_SECONDS = 5.0

# Bootstrap
DEFAULT_BOOTSTRAP_ADMIN_EMAIL = "admin@test.com"
