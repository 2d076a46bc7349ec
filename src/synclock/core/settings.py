"""Application settings and configuration.

This module defines all configuration options for the synclock service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="synclock", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server binding for the CLI entry point
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Visitor counter persistence
    database_url: str = Field(default="sqlite:///./synclock.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    counter_backend: Literal["database", "memory"] = Field(
        default="database",
        alias="COUNTER_BACKEND",
    )

    # Optional IP geolocation collaborator
    geo_enabled: bool = Field(default=False, alias="GEO_ENABLED")
    geo_api_url: str = Field(
        default="http://ip-api.com/json/{ip}",
        alias="GEO_API_URL",
    )
    geo_timeout_seconds: float = Field(default=2.0, alias="GEO_TIMEOUT_SECONDS")

    # Embedded comment widget (passed through to the page, never interpreted)
    comments_repo: str | None = Field(default=None, alias="COMMENTS_REPO")
    comments_repo_id: str | None = Field(default=None, alias="COMMENTS_REPO_ID")
    comments_category: str | None = Field(default=None, alias="COMMENTS_CATEGORY")
    comments_category_id: str | None = Field(default=None, alias="COMMENTS_CATEGORY_ID")
    comments_mapping: str = Field(default="pathname", alias="COMMENTS_MAPPING")
    comments_theme: str = Field(default="dark", alias="COMMENTS_THEME")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def comments_enabled(self) -> bool:
        """Return True when enough widget options are set to embed comments."""
        return bool(self.comments_repo and self.comments_repo_id)

    @property
    def comments_options(self) -> dict[str, str | None]:
        """Return comment widget options as a passthrough dictionary."""
        return {
            "repo": self.comments_repo,
            "repo_id": self.comments_repo_id,
            "category": self.comments_category,
            "category_id": self.comments_category_id,
            "mapping": self.comments_mapping,
            "theme": self.comments_theme,
        }


settings = Settings()
