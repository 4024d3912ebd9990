"""
Publish Markdown notes into the user's bound GitHub repository.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import quote

from app.clients.github_contents import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubConflictError,
    GitHubContentsClient,
    GitHubNotFoundError,
)
from app.core.config import PublishingSettings
from app.core.errors import (
    CredentialMissingError,
    InternalFailureError,
    RemoteAuthInvalidError,
    RemoteConflictError,
    RemoteNotFoundError,
    RemoteWriteFailedError,
    RepositoryNotBoundError,
    ServiceError,
)
from app.models.credentials import (
    PublishResult,
    PublishTarget,
    RemoteFileHandle,
    RepositoryBinding,
)
from app.services.repository_bindings import RepositoryBindingStore
from app.services.scaffolder import DirectoryScaffolder
from app.services.token_registry import TokenRegistry
from app.utils.date_path import full_path

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentPublisher:
    """Resolve credentials and target, scaffold directories, then create or update."""

    def __init__(
        self,
        *,
        token_registry: TokenRegistry,
        binding_store: RepositoryBindingStore,
        contents_client: GitHubContentsClient,
        scaffolder: DirectoryScaffolder,
        settings: PublishingSettings,
        web_base_url: str = "https://github.com",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._tokens = token_registry
        self._bindings = binding_store
        self._contents = contents_client
        self._scaffolder = scaffolder
        self._settings = settings
        self._web_base_url = web_base_url.rstrip("/")
        self._clock = clock

    async def publish(
        self,
        *,
        owner_id: str | int,
        content: str,
        path: Optional[str] = None,
        commit_message: Optional[str] = None,
    ) -> PublishResult:
        """Write ``content`` to ``path`` (or today's dated path) and return its URL.

        Nothing is retried. A same-path race with another writer surfaces as
        ``RemoteConflictError`` for whichever write GitHub rejects.
        """
        token = self._tokens.get(owner_id)
        if not token:
            raise CredentialMissingError()

        binding = self._bindings.get(owner_id)
        if binding is None:
            raise RepositoryNotBoundError()

        target = PublishTarget(
            path=self._resolve_path(path),
            content=content,
            commit_message=commit_message or self._settings.default_commit_message,
        )

        try:
            return await self._write(token=token, binding=binding, target=target)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception(
                "Unexpected failure publishing %s to %s", target.path, binding.full_name
            )
            raise InternalFailureError() from exc

    def _resolve_path(self, path: Optional[str]) -> str:
        cleaned = (path or "").strip().strip("/")
        return cleaned or full_path(self._clock())

    async def _write(
        self, *, token: str, binding: RepositoryBinding, target: PublishTarget
    ) -> PublishResult:
        if self._settings.scaffold_directories and target.directory:
            await self._scaffolder.ensure_directory(
                token=token, binding=binding, directory=target.directory
            )

        existing = await self._probe(token=token, binding=binding, path=target.path)

        try:
            response = await self._contents.put_content(
                token=token,
                owner=binding.repo_owner,
                repo=binding.repo_name,
                path=target.path,
                content=target.content,
                message=target.commit_message,
                sha=existing.sha if existing else None,
                branch=self._settings.default_branch,
            )
        except GitHubConflictError as exc:
            logger.warning(
                "Write to %s in %s rejected as conflict: %s",
                target.path,
                binding.full_name,
                exc,
            )
            raise RemoteConflictError() from exc
        except GitHubAPIError as exc:
            raise self._map_remote_error(exc, binding) from exc

        logger.info(
            "%s %s in %s",
            "Updated" if existing else "Created",
            target.path,
            binding.full_name,
        )
        new_sha = (response.get("content") or {}).get("sha")
        return PublishResult(
            url=self.file_url(binding, target.path),
            path=target.path,
            created=existing is None,
            sha=new_sha,
        )

    async def _probe(
        self, *, token: str, binding: RepositoryBinding, path: str
    ) -> Optional[RemoteFileHandle]:
        try:
            payload = await self._contents.get_content(
                token=token,
                owner=binding.repo_owner,
                repo=binding.repo_name,
                path=path,
                ref=self._settings.default_branch,
            )
        except GitHubNotFoundError:
            return None
        except GitHubAPIError as exc:
            raise self._map_remote_error(exc, binding) from exc

        if isinstance(payload, list):
            # A directory already occupies the path; GitHub will reject the write.
            logger.warning("%s in %s is a directory", path, binding.full_name)
            return None
        sha = payload.get("sha")
        return RemoteFileHandle(path=path, sha=sha) if sha else None

    @staticmethod
    def _map_remote_error(exc: GitHubAPIError, binding: RepositoryBinding) -> ServiceError:
        if isinstance(exc, GitHubNotFoundError):
            logger.warning("Repository %s not found", binding.full_name)
            return RemoteNotFoundError()
        if isinstance(exc, GitHubAuthError):
            logger.warning("GitHub rejected the token for %s", binding.full_name)
            return RemoteAuthInvalidError()
        logger.error("GitHub call for %s failed: %s", binding.full_name, exc)
        return RemoteWriteFailedError()

    def file_url(self, binding: RepositoryBinding, path: str) -> str:
        return (
            f"{self._web_base_url}/{binding.repo_owner}/{binding.repo_name}"
            f"/blob/{self._settings.default_branch}/{quote(path)}"
        )


__all__ = ["ContentPublisher"]
