"""Service layer exports."""

from .auth import AuthService, LoginResult
from .publisher import ContentPublisher
from .repository_bindings import RepositoryBindingStore, parse_repository_url
from .scaffolder import DirectoryScaffolder
from .session_tokens import SessionClaims, SessionTokenService
from .token_cipher import TokenCipherService
from .token_registry import TokenRegistry

__all__ = [
    "AuthService",
    "ContentPublisher",
    "DirectoryScaffolder",
    "LoginResult",
    "RepositoryBindingStore",
    "SessionClaims",
    "SessionTokenService",
    "TokenCipherService",
    "TokenRegistry",
    "parse_repository_url",
]
