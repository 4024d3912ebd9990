"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Stores that hold per-user state are cached so every request sees the same
process-wide instance.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable
from zoneinfo import ZoneInfo

from app.clients import GitHubContentsClient, GitHubOAuthClient, LLMClient, OAuthStateEncoder
from app.core.config import get_settings
from app.services import (
    AuthService,
    ContentPublisher,
    DirectoryScaffolder,
    RepositoryBindingStore,
    SessionTokenService,
    TokenCipherService,
    TokenRegistry,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


def _publishing_clock(tz_name: str) -> Callable[[], datetime]:
    tz = timezone.utc if tz_name.upper() == "UTC" else ZoneInfo(tz_name)
    return lambda: datetime.now(tz)


@lru_cache()
def get_oauth_state_encoder() -> OAuthStateEncoder:
    """Provide an OAuth state encoder derived from the GitHub client secret."""
    return OAuthStateEncoder(secret_key=_settings().github.client_secret)


@lru_cache()
def get_github_oauth_client() -> GitHubOAuthClient:
    return GitHubOAuthClient(_settings().github)


@lru_cache()
def get_github_contents_client() -> GitHubContentsClient:
    return GitHubContentsClient(_settings().github)


@lru_cache()
def get_llm_client() -> LLMClient:
    return LLMClient(_settings().llm)


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for held tokens."""
    settings = _settings()
    secret = settings.security.token_encryption_secret or settings.github.client_secret
    return TokenCipherService(secret=secret)


@lru_cache()
def get_token_registry() -> TokenRegistry:
    """Provide the process-wide GitHub token registry."""
    settings = _settings()
    return TokenRegistry(
        ttl=timedelta(days=settings.publishing.token_ttl_days),
        cipher=get_token_cipher_service(),
    )


@lru_cache()
def get_repository_binding_store() -> RepositoryBindingStore:
    """Provide the process-wide repository binding store."""
    return RepositoryBindingStore()


@lru_cache()
def get_session_token_service() -> SessionTokenService:
    return SessionTokenService(_settings().security)


@lru_cache()
def get_directory_scaffolder() -> DirectoryScaffolder:
    publishing = _settings().publishing
    return DirectoryScaffolder(
        get_github_contents_client(),
        placeholder_name=publishing.placeholder_name,
        branch=publishing.default_branch,
    )


def get_content_publisher() -> ContentPublisher:
    """Build a publisher over the shared stores and clients."""
    settings = _settings()
    return ContentPublisher(
        token_registry=get_token_registry(),
        binding_store=get_repository_binding_store(),
        contents_client=get_github_contents_client(),
        scaffolder=get_directory_scaffolder(),
        settings=settings.publishing,
        web_base_url=settings.github.web_base_url,
        clock=_publishing_clock(settings.publishing.timezone),
    )


def get_auth_service() -> AuthService:
    return AuthService(
        oauth_client=get_github_oauth_client(),
        token_registry=get_token_registry(),
        session_tokens=get_session_token_service(),
    )


__all__ = [
    "get_auth_service",
    "get_content_publisher",
    "get_directory_scaffolder",
    "get_github_contents_client",
    "get_github_oauth_client",
    "get_llm_client",
    "get_oauth_state_encoder",
    "get_repository_binding_store",
    "get_session_token_service",
    "get_token_cipher_service",
    "get_token_registry",
]
