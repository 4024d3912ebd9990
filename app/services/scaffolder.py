"""
Make sure every ancestor directory of a note exists before writing it.

GitHub has no "mkdir": a directory exists only while it contains a file, so a
missing directory is materialised by committing an empty placeholder into it.
"""

from __future__ import annotations

import logging
from typing import List

from app.clients.github_contents import (
    GitHubAPIError,
    GitHubContentsClient,
    GitHubNotFoundError,
)
from app.core.errors import RemoteNotFoundError, RemoteWriteFailedError
from app.models.credentials import RepositoryBinding

logger = logging.getLogger(__name__)


class DirectoryScaffolder:
    """Walk a directory path segment by segment, creating what is missing."""

    def __init__(
        self,
        contents_client: GitHubContentsClient,
        *,
        placeholder_name: str = ".keep-marker",
        branch: str | None = None,
    ) -> None:
        self._contents = contents_client
        self._placeholder_name = placeholder_name
        self._branch = branch

    @staticmethod
    def split_segments(directory: str) -> List[str]:
        return [segment for segment in directory.strip("/").split("/") if segment]

    async def ensure_directory(
        self,
        *,
        token: str,
        binding: RepositoryBinding,
        directory: str,
    ) -> List[str]:
        """Ensure ``directory`` exists and return the prefixes that were created.

        Segments are visited strictly in order; a prefix that had to be created
        is never rolled back if a later segment fails.
        """
        created: List[str] = []
        prefix = ""
        for segment in self.split_segments(directory):
            prefix = f"{prefix}/{segment}" if prefix else segment
            if await self._exists(token=token, binding=binding, prefix=prefix):
                continue
            await self._create_placeholder(token=token, binding=binding, prefix=prefix)
            created.append(prefix)
        return created

    async def _exists(
        self, *, token: str, binding: RepositoryBinding, prefix: str
    ) -> bool:
        try:
            await self._contents.get_content(
                token=token,
                owner=binding.repo_owner,
                repo=binding.repo_name,
                path=prefix,
                ref=self._branch,
            )
        except GitHubNotFoundError:
            return False
        except GitHubAPIError as exc:
            logger.warning(
                "Probing %s in %s failed: %s", prefix, binding.full_name, exc
            )
            raise RemoteWriteFailedError(
                f"Could not check directory '{prefix}' on GitHub."
            ) from exc
        return True

    async def _create_placeholder(
        self, *, token: str, binding: RepositoryBinding, prefix: str
    ) -> None:
        placeholder = f"{prefix}/{self._placeholder_name}"
        try:
            await self._contents.put_content(
                token=token,
                owner=binding.repo_owner,
                repo=binding.repo_name,
                path=placeholder,
                content=b"",
                message=f"Create directory {prefix}",
                branch=self._branch,
            )
        except GitHubNotFoundError as exc:
            # The prefix probe also 404s when the repository itself is gone.
            logger.warning("Repository %s not found", binding.full_name)
            raise RemoteNotFoundError() from exc
        except GitHubAPIError as exc:
            logger.warning(
                "Creating %s in %s failed: %s", placeholder, binding.full_name, exc
            )
            raise RemoteWriteFailedError(
                f"Could not create directory '{prefix}' on GitHub."
            ) from exc
        logger.info("Created directory %s in %s", prefix, binding.full_name)


__all__ = ["DirectoryScaffolder"]
