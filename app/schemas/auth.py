"""Schemas related to GitHub sign-in."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GitHubLoginRequest(BaseModel):
    """Authorization code handed back to the front-end by GitHub."""

    code: str = Field(..., min_length=1, description="Authorization code returned by GitHub OAuth.")


class OAuthCallbackPayload(BaseModel):
    """Payload sent to complete the OAuth callback exchange."""

    code: str = Field(..., description="Authorization code returned by GitHub OAuth.")
    state: str = Field(..., description="Opaque state token issued when starting OAuth.")


class AuthUser(BaseModel):
    """The signed-in user as exposed to the front-end."""

    id: int
    github_id: str = Field(..., description="GitHub login of the user.")
    email: str
    avatar_url: str = ""


class AuthData(BaseModel):
    access_token: str
    user: AuthUser


__all__ = ["AuthData", "AuthUser", "GitHubLoginRequest", "OAuthCallbackPayload"]
