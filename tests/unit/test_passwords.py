"""Unit tests for password hashing."""

import pytest

from rbac_api.core.auth.passwords import hash_password, verify_password


pytestmark = pytest.mark.unit


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_hash(self):
        """hash_password should return a bcrypt hash."""
        password = "mysecretpassword"
        hashed = hash_password(password)

        assert hashed != password
        assert hashed.startswith("$2b$")  # bcrypt prefix

    def test_hash_password_different_each_time(self):
        """hash_password should produce different hashes for same password."""
        password = "mysecretpassword"

        # Different due to random salt
        assert hash_password(password) != hash_password(password)

    def test_verify_password_correct(self):
        """verify_password should return True for correct password."""
        hashed = hash_password("mysecretpassword")

        assert verify_password("mysecretpassword", hashed) is True

    def test_verify_password_incorrect(self):
        """verify_password should return False for incorrect password."""
        hashed = hash_password("mysecretpassword")

        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_is_case_sensitive(self):
        """A password differing only in case should not verify."""
        hashed = hash_password("Secret")

        assert verify_password("secret", hashed) is False

    def test_verify_password_malformed_hash_raises(self):
        """A digest that is not a bcrypt hash is a structural error."""
        with pytest.raises(ValueError):
            verify_password("mysecretpassword", "not-a-hash")
