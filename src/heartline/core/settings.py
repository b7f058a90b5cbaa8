"""Application settings and configuration.

This module defines all configuration options for the Heartline application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Heartline", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./heartline.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Account rules
    password_min_length: int = Field(default=6, alias="PASSWORD_MIN_LENGTH")
    minimum_age: int = Field(default=18, alias="MINIMUM_AGE")
    default_profile_age: int = Field(default=18, alias="DEFAULT_PROFILE_AGE")

    # Matching and messaging limits
    candidate_page_default: int = Field(default=20, alias="CANDIDATE_PAGE_DEFAULT")
    candidate_page_max: int = Field(default=100, alias="CANDIDATE_PAGE_MAX")
    message_history_limit: int = Field(default=100, alias="MESSAGE_HISTORY_LIMIT")
    message_max_length: int = Field(default=2000, alias="MESSAGE_MAX_LENGTH")

    # Realtime channel
    realtime_require_token: bool = Field(default=True, alias="REALTIME_REQUIRE_TOKEN")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
