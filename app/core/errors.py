"""
Error taxonomy shared by the services and the HTTP layer.

Each failure kind is its own exception class carrying a stable
machine-readable ``code`` and the HTTP status the API responds with.
"""

from __future__ import annotations

from http import HTTPStatus


class ServiceError(Exception):
    """Base class for failures surfaced to API callers."""

    code = "internal_server_error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidRepositoryUrlError(ServiceError):
    """Raised when a repository URL cannot be resolved to owner/name."""

    code = "invalid_repository_url"
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Not a valid GitHub repository URL."


class CredentialMissingError(ServiceError):
    """No usable GitHub token is held for the user."""

    code = "github_token_missing"
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "No valid GitHub token on record. Please sign in again."


class RepositoryNotBoundError(ServiceError):
    """The user has not registered a target repository yet."""

    code = "repository_not_registered"
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "No GitHub repository registered. Register a repository URL first."


class RemoteNotFoundError(ServiceError):
    """GitHub reports the repository itself as missing."""

    code = "repository_not_found"
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Repository not found. Check the repository name."


class RemoteAuthInvalidError(ServiceError):
    """GitHub refused the token we hold."""

    code = "github_token_invalid"
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "GitHub rejected the stored credential. Please sign in again."


class RemoteWriteFailedError(ServiceError):
    """Transport failure, rate limit or unexpected status while writing."""

    code = "github_upload_error"
    status_code = HTTPStatus.BAD_GATEWAY
    default_message = "Uploading the file to GitHub failed."


class RemoteConflictError(RemoteWriteFailedError):
    """GitHub rejected the write because the file changed underneath us."""

    code = "github_write_conflict"
    status_code = HTTPStatus.CONFLICT
    default_message = "The file was modified concurrently; the write was rejected."


class InternalFailureError(ServiceError):
    """Anything not anticipated by the other error kinds."""


class InvalidOAuthCodeError(ServiceError):
    code = "invalid_github_code"
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid GitHub authorization code."


class InvalidOAuthStateError(ServiceError):
    code = "invalid_request"
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid or expired OAuth state."


class SessionTokenError(ServiceError):
    code = "invalid_token"
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Missing or invalid session token."


class LLMServiceError(ServiceError):
    """Upstream LLM failure re-mapped to a caller-facing code and status."""

    code = "llm_server_error"
    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    default_message = "The LLM service is unavailable."

    def __init__(
        self,
        code: str,
        status_code: int,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


__all__ = [
    "CredentialMissingError",
    "InternalFailureError",
    "InvalidOAuthCodeError",
    "InvalidOAuthStateError",
    "InvalidRepositoryUrlError",
    "LLMServiceError",
    "RemoteAuthInvalidError",
    "RemoteConflictError",
    "RemoteNotFoundError",
    "RemoteWriteFailedError",
    "RepositoryNotBoundError",
    "ServiceError",
    "SessionTokenError",
]
