"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        CARGO_DB_HOST: Database host (default: localhost)
        CARGO_DB_PORT: Database port (default: 5432)
        CARGO_DB_DATABASE: Database name (default: cargo)
        CARGO_DB_USERNAME: Database user (default: cargo)
        CARGO_DB_PASSWORD: Database password (required in production)
        CARGO_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        CARGO_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        CARGO_DB_ECHO: Log emitted SQL (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARGO_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="cargo", description="Database name")
    username: str = Field(default="cargo", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Session token and password hashing settings.

    Environment variables:
        CARGO_AUTH_JWT_SECRET: HMAC secret used to sign session tokens
        CARGO_AUTH_JWT_ISSUER: Issuer claim (default: trackscargo)
        CARGO_AUTH_JWT_AUDIENCE: Audience claim (default: trackscargo-users)
        CARGO_AUTH_TOKEN_TTL_HOURS: Token lifetime in hours (default: 168)
        CARGO_AUTH_BCRYPT_ROUNDS: bcrypt work factor (default: 12)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARGO_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        description="HMAC secret for session tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_issuer: str = Field(default="trackscargo", description="Issuer claim")
    jwt_audience: str = Field(
        default="trackscargo-users", description="Audience claim"
    )
    token_ttl_hours: int = Field(
        default=24 * 7,
        description="Session token lifetime in hours",
        ge=1,
    )
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt work factor",
        ge=4,
        le=31,
    )


class IAMSettings(BaseSettings):
    """Settings for organizations, users and invitations.

    Environment variables:
        CARGO_IAM_FRONTEND_URL: Base URL used to build invitation links
        CARGO_IAM_INVITATION_TTL_DAYS: Days before an invitation expires (default: 7)
        CARGO_IAM_SLUG_MAX_ATTEMPTS: Slug allocation retries on collision (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARGO_IAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Frontend base URL for invitation links",
    )
    invitation_ttl_days: int = Field(
        default=7,
        description="Invitation lifetime in days",
        ge=1,
    )
    slug_max_attempts: int = Field(
        default=10,
        description="Maximum slug allocation attempts",
        ge=1,
        le=100,
    )


class EmailSettings(BaseSettings):
    """Outbound e-mail settings (Resend HTTP API).

    Environment variables:
        CARGO_EMAIL_ENABLED: Send e-mails at all (default: false)
        CARGO_EMAIL_RESEND_API_KEY: Resend API key
        CARGO_EMAIL_FROM_ADDRESS: Sender address
        CARGO_EMAIL_FROM_NAME: Sender display name
        CARGO_EMAIL_API_BASE_URL: Resend API base URL
        CARGO_EMAIL_TIMEOUT_SECONDS: HTTP timeout (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARGO_EMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=False, description="Enable e-mail sending")
    resend_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Resend API key",
    )
    from_address: str = Field(
        default="admin@trackscargo.com", description="Sender address"
    )
    from_name: str = Field(default="TracksCargo", description="Sender name")
    api_base_url: str = Field(
        default="https://api.resend.com", description="Resend API base URL"
    )
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout", gt=0)

    @property
    def sender(self) -> str:
        """Formatted sender header value."""
        return f"{self.from_name} <{self.from_address}>"


class StorageSettings(BaseSettings):
    """Blob storage settings for event attachments (Supabase Storage).

    Environment variables:
        CARGO_STORAGE_SUPABASE_URL: Supabase project URL
        CARGO_STORAGE_SUPABASE_SERVICE_KEY: Service role key
        CARGO_STORAGE_BUCKET: Bucket name (default: event-files)
        CARGO_STORAGE_SIGNED_URL_TTL_SECONDS: Download URL lifetime (default: 3600)
        CARGO_STORAGE_MAX_FILE_BYTES: Upload size limit (default: 10 MiB)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARGO_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    supabase_url: str | None = Field(default=None, description="Supabase URL")
    supabase_service_key: SecretStr | None = Field(
        default=None,
        description="Supabase service role key",
    )
    bucket: str = Field(default="event-files", description="Storage bucket")
    signed_url_ttl_seconds: int = Field(
        default=3600,
        description="Signed download URL lifetime",
        ge=1,
    )
    max_file_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size",
        ge=1,
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout", gt=0)

    @property
    def is_configured(self) -> bool:
        """True when both the Supabase URL and service key are set."""
        return bool(self.supabase_url) and self.supabase_service_key is not None


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Cargo Tracking API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache
def get_iam_settings() -> IAMSettings:
    """Get cached IAM settings."""
    return IAMSettings()


@lru_cache
def get_email_settings() -> EmailSettings:
    """Get cached e-mail settings."""
    return EmailSettings()


@lru_cache
def get_storage_settings() -> StorageSettings:
    """Get cached storage settings."""
    return StorageSettings()
