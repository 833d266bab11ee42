"""
Tests for environment-driven settings.
"""

import pydantic
import pytest

from config.settings import Settings, parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [(3600, 3600), ("3600", 3600), ("7d", 604800), ("12h", 43200), ("30m", 1800), ("1w", 604800)],
    )
    def test_accepted_forms(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["soon", "7x", "", True])
    def test_rejected_forms(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestSettings:
    def test_missing_secret_refuses_to_load(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///x.db")
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None)

    def test_missing_database_url_refuses_to_load(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///x.db")
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        monkeypatch.setenv("JWT_EXPIRE", "2d")
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings = Settings(_env_file=None)
        assert settings.jwt_secret == "s3cret"
        assert settings.jwt_expire == 2 * 86400
        assert settings.is_production
        assert settings.bcrypt_rounds == 10

    def test_settings_are_immutable(self, settings):
        with pytest.raises(pydantic.ValidationError):
            settings.jwt_secret = "other"
