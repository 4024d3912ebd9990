"""
Repository URL parsing and the per-user repository binding store.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional
from urllib.parse import urlparse

from app.core.errors import InvalidRepositoryUrlError
from app.models.credentials import RepositoryBinding

logger = logging.getLogger(__name__)

_HOST_MARKER = "github.com"
_ALLOWED_HOSTS = frozenset({"github.com", "www.github.com"})
_ALLOWED_SCHEMES = frozenset({"http", "https"})
_GIT_SUFFIX = ".git"


def parse_repository_url(repository_url: str) -> RepositoryBinding:
    """Extract ``owner/repo`` from a ``https://github.com/owner/repo`` URL.

    A trailing ``.git`` and trailing slashes are ignored; anything past the
    second path segment (``/tree/main`` and the like) is dropped.
    """
    if not repository_url or _HOST_MARKER not in repository_url:
        raise InvalidRepositoryUrlError("Not a valid GitHub repository URL.")

    try:
        parsed = urlparse(repository_url.strip())
    except ValueError as exc:
        raise InvalidRepositoryUrlError(
            "Failed to parse the GitHub repository URL."
        ) from exc

    if parsed.scheme not in _ALLOWED_SCHEMES or parsed.hostname not in _ALLOWED_HOSTS:
        raise InvalidRepositoryUrlError("URL must point at https://github.com.")

    segments = [segment for segment in parsed.path.split("/") if segment]
    if len(segments) < 2:
        raise InvalidRepositoryUrlError("GitHub URL must look like github.com/owner/repo.")

    owner, repo = segments[0], segments[1]
    if repo.endswith(_GIT_SUFFIX):
        repo = repo[: -len(_GIT_SUFFIX)]
    if not owner or not repo:
        raise InvalidRepositoryUrlError(
            "Could not extract the owner or repository name from the URL."
        )

    return RepositoryBinding(repo_owner=owner, repo_name=repo)


class RepositoryBindingStore:
    """In-memory ``owner id -> RepositoryBinding`` map; writes overwrite."""

    def __init__(self) -> None:
        self._bindings: Dict[str, RepositoryBinding] = {}

    def store(self, owner_id: str | int, binding: RepositoryBinding) -> None:
        self._bindings[str(owner_id)] = binding
        logger.info(
            "Bound repository %s for user %s", binding.full_name, owner_id
        )

    def get(self, owner_id: str | int) -> Optional[RepositoryBinding]:
        return self._bindings.get(str(owner_id))


__all__ = ["RepositoryBindingStore", "parse_repository_url"]
