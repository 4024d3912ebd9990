"""Schemas for repository registration and note upload."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RepositoryUrlRequest(BaseModel):
    repository_url: str = Field(
        ...,
        min_length=1,
        description="GitHub repository URL, e.g. https://github.com/alice/notes.",
    )


class RepositoryInfo(BaseModel):
    owner: str
    repo: str


class UploadRequest(BaseModel):
    """Markdown note to publish into the registered repository."""

    content: str = Field(..., min_length=1, description="Markdown body of the note.")
    path: Optional[str] = Field(
        None,
        description="Repository-relative file path. Defaults to YYYY/Mon/YYYY-MM-DD.md.",
    )
    commit_message: Optional[str] = Field(
        None, max_length=500, description="Commit message for the write."
    )


class UploadResult(BaseModel):
    url: str
    path: str
    created: bool


__all__ = ["RepositoryInfo", "RepositoryUrlRequest", "UploadRequest", "UploadResult"]
