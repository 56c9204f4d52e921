"""Unit tests for houser.core.config validators."""

import unittest

from pydantic import SecretStr, ValidationError
from sqlalchemy.engine import make_url

from houser.core.config import Settings


def _settings(**kwargs: object) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestSettingsValidation(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        settings = _settings(DATABASE_URL="sqlite://")
        self.assertEqual(settings.API_V1_PREFIX, "/api/v1")
        self.assertFalse(settings.LEGACY_PLAINTEXT_PASSWORDS)
        self.assertFalse(settings.ENFORCE_USER_OWNERSHIP)

    def test_default_database_url_names_installed_driver(self) -> None:
        default = Settings.model_fields["DATABASE_URL"].default
        self.assertEqual(make_url(default).get_driver_name(), "psycopg2")
        self.assertEqual(_settings(DATABASE_URL=default).DATABASE_URL, default)

    def test_rejects_non_sql_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://localhost/db")

    def test_accepts_postgres_url(self) -> None:
        settings = _settings(DATABASE_URL=" postgresql://u:p@db:5432/houser ")
        self.assertEqual(settings.DATABASE_URL, "postgresql://u:p@db:5432/houser")

    def test_rejects_blank_jwt_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", JWT_SECRET=SecretStr("  "))

    def test_rejects_out_of_range_expiry(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", JWT_EXPIRE_MINUTES=10081)

    def test_log_level_is_normalized(self) -> None:
        self.assertEqual(_settings(DATABASE_URL="sqlite://", LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", LOG_LEVEL="chatty")

    def test_rejects_zero_pool_size(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", DB_MAX_CONNECTIONS=0)
