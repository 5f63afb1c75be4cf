"""
Wellness Application Settings

Configuration management using Pydantic Settings.
All sensitive values are loaded from environment variables.

SECURITY: Never log or expose settings containing secrets.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """
    Database configuration.

    PostgreSQL (asyncpg) is the deployment target. Setting
    WELLNESS_DB_URL overrides the composed URL, which is how
    development and tests point at SQLite (aiosqlite).
    """

    model_config = SettingsConfigDict(env_prefix="WELLNESS_DB_")

    url: Optional[str] = Field(default=None, description="Full async database URL override")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="wellness_db", description="Database name")
    user: str = Field(default="wellness_user", description="Database user")
    password: SecretStr = Field(default=SecretStr("dev_password"), description="Database password")
    pool_size: int = Field(default=10, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, le=100, description="Max overflow connections")
    auto_create_tables: bool = Field(
        default=False,
        description="Create tables on startup instead of relying on Alembic",
    )

    @property
    def async_url(self) -> str:
        """Generate async database URL for SQLAlchemy."""
        if self.url:
            return self.url
        password = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def sync_url(self) -> str:
        """Generate sync database URL for Alembic migrations."""
        return (
            self.async_url
            .replace("postgresql+asyncpg://", "postgresql://")
            .replace("sqlite+aiosqlite://", "sqlite://")
        )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite."""
        return self.async_url.startswith("sqlite")


class JWTSettings(BaseSettings):
    """JWT authentication configuration."""

    model_config = SettingsConfigDict(env_prefix="WELLNESS_JWT_")

    secret_key: SecretStr = Field(
        default=SecretStr("dev_jwt_secret_key_not_for_production"),
        description="Access token signing secret",
    )
    refresh_secret_key: SecretStr = Field(
        default=SecretStr("dev_jwt_refresh_secret_not_for_production"),
        description="Refresh token signing secret",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    issuer: str = Field(default="mental-wellness-ai")
    audience: str = Field(default="mental-wellness-users")
    anonymous_access_token_expire_hours: int = Field(default=24, ge=1, le=168)
    access_token_expire_days: int = Field(default=7, ge=1, le=30)
    refresh_token_expire_days: int = Field(default=30, ge=1, le=90)


class GeminiSettings(BaseSettings):
    """Google Gemini API configuration."""

    model_config = SettingsConfigDict(env_prefix="WELLNESS_GEMINI_")

    api_key: SecretStr = Field(default=SecretStr(""), description="Gemini API key")
    model: str = Field(default="gemini-1.5-flash", description="Model identifier")
    max_output_tokens: int = Field(default=500, ge=50, le=4096)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class OpenAISettings(BaseSettings):
    """OpenAI API configuration."""

    model_config = SettingsConfigDict(env_prefix="WELLNESS_OPENAI_")

    api_key: SecretStr = Field(default=SecretStr(""), description="OpenAI API key")
    model: str = Field(default="gpt-3.5-turbo", description="Model identifier")
    max_tokens: int = Field(default=500, ge=50, le=4096)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class SecuritySettings(BaseSettings):
    """Account security configuration."""

    model_config = SettingsConfigDict(env_prefix="WELLNESS_SECURITY_")

    max_login_attempts: int = Field(default=5, ge=1, le=50)
    lockout_minutes: int = Field(default=30, ge=1, le=1440)
    password_min_length: int = Field(default=8, ge=6, le=128)
    password_schemes: list[str] = Field(
        default=["pbkdf2_sha256"],
        description="passlib schemes, first one is used for new hashes",
    )


class RateLimitSettings(BaseSettings):
    """Token bucket rate limiting configuration."""

    model_config = SettingsConfigDict(env_prefix="WELLNESS_RATE_LIMIT_")

    enabled: bool = Field(default=True)
    requests_per_minute: int = Field(default=100, ge=1, le=10000)
    chat_requests_per_minute: int = Field(default=30, ge=1, le=10000)
    auth_requests_per_minute: int = Field(default=10, ge=1, le=10000)
    burst_size: int = Field(default=5, ge=0, le=1000)


class Settings(BaseSettings):
    """
    Main application settings.

    All configuration is loaded from environment variables with WELLNESS_ prefix.
    Sensitive values use SecretStr to prevent accidental logging.

    Usage:
        settings = get_settings()
        db_url = settings.database.async_url
    """

    model_config = SettingsConfigDict(
        env_prefix="WELLNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode - NEVER enable in production")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    api_version: str = Field(default="v1", description="API version prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:19006"],
        description="Allowed CORS origins"
    )
    sentry_dsn: SecretStr = Field(default=SecretStr(""), description="Sentry DSN (empty disables)")

    # LLM Provider selection
    llm_primary_provider: Literal["gemini", "openai"] = Field(
        default="gemini",
        description="Provider tried first; the other configured one is the fallback"
    )

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    Tests clear the cache after adjusting the environment.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
