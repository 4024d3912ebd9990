"""Expose dependency helpers for FastAPI routers."""

from .auth import get_current_user
from .clients import (
    get_auth_service,
    get_content_publisher,
    get_directory_scaffolder,
    get_github_contents_client,
    get_github_oauth_client,
    get_llm_client,
    get_oauth_state_encoder,
    get_repository_binding_store,
    get_session_token_service,
    get_token_cipher_service,
    get_token_registry,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_auth_service",
    "get_content_publisher",
    "get_current_user",
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
