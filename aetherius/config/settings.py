"""
Configuration Management for Aetherius

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini text-generation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_GEMINI_API_KEY"),
        description="Gemini API key"
    )
    advice_model_name: str = Field(
        default="gemini-2.5-flash",
        description="Model used for conversational financial advice"
    )
    structured_model_name: str = Field(
        default="gemini-2.5-pro",
        description="Model used for JSON-structured generation"
    )
    max_output_tokens: int = Field(
        default=2048,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )


class DatabaseSettings(BaseSettings):
    """
    Entity store configuration.

    An empty URL selects the process-local in-memory store.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="",
        description="SQLAlchemy database URL (postgresql://, sqlite+aiosqlite://)"
    )
    echo: bool = Field(
        default=False,
        description="Log emitted SQL"
    )
    pool_size: int = Field(
        default=10,
        ge=1,
        description="Connection pool size (ignored for SQLite)"
    )
    max_overflow: int = Field(
        default=5,
        ge=0,
        description="Connections allowed beyond pool_size"
    )
    connect_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made to reach the database at startup"
    )

    @property
    def async_url(self) -> str:
        """URL rewritten for an async driver."""
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        if self.url.startswith("sqlite://"):
            return self.url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return self.url

    @property
    def use_memory(self) -> bool:
        return not self.url


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )

    # HTTP surface
    api_prefix: str = Field(
        default="/api",
        description="Base path for all API routes"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # Data
    seed_demo_data: bool = Field(
        default=False,
        description="Populate an empty store with the demo family at startup"
    )
    default_transaction_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Transactions returned when no limit is given"
    )
    overspending_threshold: int = Field(
        default=90,
        ge=1,
        le=100,
        description="Category spend percentage above which an alert is raised"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings(settings: Optional[Settings] = None) -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Checks `settings` when given, otherwise the cached global settings.

    Returns a dict of {setting_name: is_valid} plus an error string
    for every group that failed to load. Useful for startup checks.
    """
    results: dict[str, object] = {}
    settings = settings or get_settings()

    for name in ("gemini", "database", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    try:
        results["gemini_api_key_present"] = bool(settings.gemini.api_key)
    except Exception:
        results["gemini_api_key_present"] = False

    return results
