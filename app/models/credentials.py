"""
Domain models for held credentials, repository bindings and publish targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Credential:
    """A GitHub access token held for one user until ``expires_at``."""

    owner_id: str
    token: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True, slots=True)
class RepositoryBinding:
    """The repository a user publishes notes into."""

    repo_owner: str
    repo_name: str

    @property
    def full_name(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"


@dataclass(frozen=True, slots=True)
class PublishTarget:
    """What a single publish request writes, built fresh per request."""

    path: str
    content: str
    commit_message: str

    @property
    def directory(self) -> str:
        head, _, _ = self.path.rpartition("/")
        return head


@dataclass(frozen=True, slots=True)
class RemoteFileHandle:
    """An existing file found by the pre-write probe."""

    path: str
    sha: str


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of a successful publish."""

    url: str
    path: str
    created: bool
    sha: Optional[str] = None


__all__ = [
    "Credential",
    "PublishResult",
    "PublishTarget",
    "RemoteFileHandle",
    "RepositoryBinding",
]
