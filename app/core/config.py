"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the publishing services
and the maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


def _split_csv(value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    if isinstance(value, tuple):
        return value
    if isinstance(value, list):
        return tuple(value)
    return tuple(item.strip() for item in value.split(",") if item.strip())


class GitHubSettings(BaseSettings):
    """Configuration required for the GitHub OAuth app and contents API."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    client_id: str
    client_secret: str
    callback_url: AnyHttpUrl
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        ("repo", "read:user", "user:email"),
        description="OAuth scopes, comma-separated when supplied via env.",
    )
    api_base_url: str = "https://api.github.com"
    web_base_url: str = "https://github.com"
    oauth_base_url: str = "https://github.com/login/oauth"
    request_timeout_seconds: float = 10.0

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        return _split_csv(value)


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(env_prefix="OAUTH_", extra="ignore")

    state_ttl_seconds: int = 900


class SecuritySettings(BaseSettings):
    """Session token and credential encryption configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    jwt_secret: str = Field(..., validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", validation_alias="JWT_ALGORITHM")
    jwt_expires_days: int = Field(7, validation_alias="JWT_EXPIRES_DAYS")
    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting held tokens."
        ),
    )


class PublishingSettings(BaseSettings):
    """Behaviour of the note publishing workflow."""

    model_config = SettingsConfigDict(env_prefix="PUBLISH_", extra="ignore")

    default_branch: str = "main"
    default_commit_message: str = "Add TIL via TIL Converter"
    scaffold_directories: bool = Field(
        True,
        description=(
            "Create placeholder files for missing parent directories before "
            "writing a note."
        ),
    )
    placeholder_name: str = ".keep-marker"
    token_ttl_days: int = 7
    timezone: str = Field("UTC", description="Timezone for date-derived paths.")


class LLMSettings(BaseSettings):
    """Configuration for the summarization/enhancement service."""

    model_config = SettingsConfigDict(env_prefix="LLM_", extra="ignore")

    api_url: str = "http://llm-server:5000/api/v1"
    api_key: str = ""
    timeout_seconds: float = 30.0


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    frontend_base_url: Optional[str] = Field(
        None,
        validation_alias="FRONTEND_BASE_URL",
        description="Optional URL for redirecting users back to the front-end.",
    )
    cors_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        ("*",), validation_alias="CORS_ORIGINS"
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    publishing: PublishingSettings = Field(default_factory=PublishingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        return _split_csv(value)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GitHubSettings",
    "LLMSettings",
    "OAuthSettings",
    "PublishingSettings",
    "SecuritySettings",
    "get_settings",
]
