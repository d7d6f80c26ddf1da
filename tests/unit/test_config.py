"""Unit tests for application settings."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from rbac_api.config import Settings


pytestmark = pytest.mark.unit

SECRET = "config-test-secret-that-is-long-enough-01"


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestTokenLifetime:
    """Tests for JWT_EXPIRES_IN parsing."""

    def test_default_is_seven_days(self):
        assert make_settings().jwt_expires_in == timedelta(days=7)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("7d", timedelta(days=7)),
            ("12h", timedelta(hours=12)),
            ("15m", timedelta(minutes=15)),
            ("90s", timedelta(seconds=90)),
            (" 2D ", timedelta(days=2)),
            (3600, timedelta(hours=1)),
            ("PT30M", timedelta(minutes=30)),
        ],
    )
    def test_accepts_duration_formats(self, value, expected):
        assert make_settings(jwt_expires_in=value).jwt_expires_in == expected

    @pytest.mark.parametrize("value", ["0s", "soon", -5])
    def test_rejects_invalid_durations(self, value):
        with pytest.raises(ValidationError):
            make_settings(jwt_expires_in=value)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_EXPIRES_IN", "1h")

        assert make_settings().jwt_expires_in == timedelta(hours=1)


class TestSecret:
    """Tests for JWT_SECRET validation."""

    def test_missing_secret_is_allowed_here(self, monkeypatch):
        """Settings load without a secret; the token service rejects it."""
        monkeypatch.delenv("JWT_SECRET", raising=False)

        assert make_settings().jwt_secret is None

    def test_empty_secret_is_missing(self):
        assert make_settings(jwt_secret="").jwt_secret is None

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(jwt_secret="too-short")

    def test_long_secret_accepted(self):
        assert make_settings(jwt_secret=SECRET).jwt_secret == SECRET


class TestEnvironment:
    """Tests for environment flags."""

    def test_production_flag(self):
        settings = make_settings(environment="production")

        assert settings.is_production is True
        assert settings.is_development is False

    def test_development_is_default(self):
        assert make_settings().is_development is True
