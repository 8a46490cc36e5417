"""Unit tests for infrastructure settings."""

import pytest
from pydantic import SecretStr, ValidationError

from infrastructure.settings import (
    AuthSettings,
    DatabaseSettings,
    EmailSettings,
    IAMSettings,
    StorageSettings,
)


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        """Should have sensible pool defaults."""
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections
        assert settings.pool_max_connections <= 20

    def test_pool_settings_from_fields(self):
        """Should accept pool settings via constructor."""
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=15)
        assert settings.pool_min_connections == 5
        assert settings.pool_max_connections == 15

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        """Should validate max >= min."""
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        """Should allow max == min."""
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_min_connections == 5
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        """Pool min connections must be >= 1."""
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        """Pool max should not exceed reasonable limit."""
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)

    def test_connection_string_hides_password(self):
        settings = DatabaseSettings(
            host="db", username="cargo", password=SecretStr("hunter2")
        )
        assert "hunter2" not in settings.connection_string
        assert settings.connection_string == "postgresql://cargo@db:5432/cargo"


class TestDatabaseSettingsFromEnvironment:
    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("CARGO_DB_HOST", "postgres.internal")
        monkeypatch.setenv("CARGO_DB_PORT", "6543")

        settings = DatabaseSettings()

        assert settings.host == "postgres.internal"
        assert settings.port == 6543


class TestAuthSettings:
    def test_defaults(self):
        settings = AuthSettings()
        assert settings.jwt_algorithm == "HS256"
        assert settings.token_ttl_hours == 168
        assert settings.bcrypt_rounds == 12

    def test_bcrypt_rounds_bounds(self):
        with pytest.raises(ValidationError):
            AuthSettings(bcrypt_rounds=3)

    def test_secret_not_rendered(self):
        settings = AuthSettings(jwt_secret=SecretStr("super-secret"))
        assert "super-secret" not in repr(settings)


class TestIAMSettings:
    def test_defaults(self):
        settings = IAMSettings()
        assert settings.invitation_ttl_days == 7
        assert settings.slug_max_attempts == 10

    def test_frontend_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("CARGO_IAM_FRONTEND_URL", "https://app.trackscargo.com")
        assert IAMSettings().frontend_url == "https://app.trackscargo.com"


class TestEmailSettings:
    def test_disabled_by_default(self):
        assert EmailSettings().enabled is False

    def test_sender_header(self):
        settings = EmailSettings(from_name="Cargo", from_address="ops@example.com")
        assert settings.sender == "Cargo <ops@example.com>"


class TestStorageSettings:
    def test_unconfigured_by_default(self):
        assert StorageSettings().is_configured is False

    def test_configured_with_url_and_key(self):
        settings = StorageSettings(
            supabase_url="https://project.supabase.co",
            supabase_service_key=SecretStr("service-key"),
        )
        assert settings.is_configured is True

    def test_ten_mebibyte_limit_by_default(self):
        assert StorageSettings().max_file_bytes == 10 * 1024 * 1024
