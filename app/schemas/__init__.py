"""Public schema exports."""

from .auth import AuthData, AuthUser, GitHubLoginRequest, OAuthCallbackPayload
from .common import ApiResponse
from .github import RepositoryInfo, RepositoryUrlRequest, UploadRequest, UploadResult
from .til import ConvertTilRequest, EnhanceTilRequest

__all__ = [
    "ApiResponse",
    "AuthData",
    "AuthUser",
    "ConvertTilRequest",
    "EnhanceTilRequest",
    "GitHubLoginRequest",
    "OAuthCallbackPayload",
    "RepositoryInfo",
    "RepositoryUrlRequest",
    "UploadRequest",
    "UploadResult",
]
