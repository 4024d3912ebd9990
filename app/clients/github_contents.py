"""GitHub repository contents API client.

Only the two calls the publishing workflow needs: read a path (to probe
existence and fetch the current ``sha``) and create-or-update a file.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Union
from urllib.parse import quote

import httpx

from app.core.config import GitHubSettings

logger = logging.getLogger(__name__)

ContentPayload = Union[Dict[str, Any], List[Dict[str, Any]]]


class GitHubAPIError(Exception):
    """Unexpected status from the GitHub API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubNotFoundError(GitHubAPIError):
    """The requested repository or path does not exist."""


class GitHubAuthError(GitHubAPIError):
    """GitHub rejected the bearer token."""


class GitHubRateLimitError(GitHubAPIError):
    """Primary or secondary rate limit hit."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.retry_after = retry_after


class GitHubConflictError(GitHubAPIError):
    """A write was rejected because the supplied sha is missing or stale."""


class GitHubTransportError(GitHubAPIError):
    """The request never produced a response."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def _raise_for_status(response: httpx.Response) -> None:
    status_code = response.status_code
    if status_code < 400:
        return

    message = _error_message(response)
    if status_code == 404:
        raise GitHubNotFoundError(message, status_code)
    if status_code == 429 or (
        status_code == 403
        and (
            response.headers.get("x-ratelimit-remaining") == "0"
            or "retry-after" in response.headers
        )
    ):
        retry_after = response.headers.get("retry-after")
        raise GitHubRateLimitError(
            message,
            status_code,
            retry_after=float(retry_after) if retry_after else None,
        )
    if status_code in (401, 403):
        raise GitHubAuthError(message, status_code)
    if status_code in (409, 422):
        raise GitHubConflictError(message, status_code)
    raise GitHubAPIError(message, status_code)


class GitHubContentsClient:
    """Read and write repository files through ``/repos/{owner}/{repo}/contents``."""

    def __init__(
        self,
        settings: GitHubSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def _client(self, token: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.api_base_url,
            timeout=self._settings.request_timeout_seconds,
            transport=self._transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    @staticmethod
    def _contents_url(owner: str, repo: str, path: str) -> str:
        return f"/repos/{quote(owner)}/{quote(repo)}/contents/{quote(path.strip('/'))}"

    async def get_content(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        path: str,
        ref: str | None = None,
    ) -> ContentPayload:
        """Return file metadata (a dict) or a directory listing (a list)."""
        params = {"ref": ref} if ref else None
        try:
            async with self._client(token) as client:
                response = await client.get(
                    self._contents_url(owner, repo, path), params=params
                )
        except httpx.HTTPError as exc:
            raise GitHubTransportError(f"GET contents failed: {exc}") from exc

        _raise_for_status(response)
        return response.json()

    async def put_content(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        path: str,
        content: str | bytes,
        message: str,
        sha: str | None = None,
        branch: str | None = None,
    ) -> Dict[str, Any]:
        """Create or update a file; ``sha`` is required when the file exists."""
        raw = content.encode("utf-8") if isinstance(content, str) else content
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(raw).decode("ascii"),
        }
        if sha:
            body["sha"] = sha
        if branch:
            body["branch"] = branch

        try:
            async with self._client(token) as client:
                response = await client.put(
                    self._contents_url(owner, repo, path), json=body
                )
        except httpx.HTTPError as exc:
            raise GitHubTransportError(f"PUT contents failed: {exc}") from exc

        _raise_for_status(response)
        logger.debug("Wrote %s/%s:%s (%s)", owner, repo, path, response.status_code)
        return response.json()


__all__ = [
    "ContentPayload",
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubConflictError",
    "GitHubContentsClient",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubTransportError",
]
