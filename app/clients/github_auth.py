"""
GitHub OAuth utilities.

These helpers build the authorization URL, exchange authorization codes for
access tokens, and look up the identity behind a token.
"""

from __future__ import annotations

import base64
import hmac
import json
from dataclasses import dataclass
from hashlib import sha256
from typing import Any, Dict
from urllib.parse import urlencode

import httpx

from app.core.config import GitHubSettings
from app.core.errors import InvalidOAuthStateError


class OAuthStateEncoder:
    """Encode and decode OAuth state values to guard against tampering."""

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key.encode("utf-8")

    def encode(self, payload: Dict[str, Any]) -> str:
        serialized = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        signature = hmac.new(self._secret_key, serialized.encode("utf-8"), sha256).digest()
        return base64.urlsafe_b64encode(signature + serialized.encode("utf-8")).decode("utf-8")

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            decoded = base64.urlsafe_b64decode(token.encode("utf-8"))
        except ValueError as exc:
            raise InvalidOAuthStateError("Malformed OAuth state.") from exc
        signature, serialized = decoded[:32], decoded[32:]
        expected_signature = hmac.new(self._secret_key, serialized, sha256).digest()
        if not hmac.compare_digest(signature, expected_signature):
            raise InvalidOAuthStateError("Invalid OAuth state signature.")
        return json.loads(serialized)


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint returns an error or no token."""


class GitHubIdentityError(Exception):
    """Raised when the authenticated user cannot be looked up."""


@dataclass(frozen=True, slots=True)
class GitHubUser:
    """The remote identity behind an access token."""

    id: int
    login: str
    name: str
    email: str
    avatar_url: str
    html_url: str


class GitHubOAuthClient:
    """Build GitHub authorization URLs and exchange authorization codes."""

    def __init__(
        self,
        settings: GitHubSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._github = settings
        self._transport = transport

    @property
    def token_url(self) -> str:
        return f"{self._github.oauth_base_url.rstrip('/')}/access_token"

    def build_authorization_url(self, state: str) -> str:
        """Construct the GitHub OAuth consent URL."""
        params = {
            "client_id": self._github.client_id,
            "redirect_uri": str(self._github.callback_url),
            "scope": " ".join(self._github.scopes),
            "state": state,
        }
        return f"{self._github.oauth_base_url.rstrip('/')}/authorize?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        payload = {
            "client_id": self._github.client_id,
            "client_secret": self._github.client_secret,
            "code": code,
            "redirect_uri": str(self._github.callback_url),
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._github.request_timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    self.token_url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise OAuthTokenExchangeError(f"Token exchange request failed: {exc}") from exc

        if not response.is_success:
            raise OAuthTokenExchangeError(
                f"Token endpoint returned {response.status_code}."
            )

        token_payload = response.json()
        access_token = token_payload.get("access_token")
        if token_payload.get("error") or not access_token:
            raise OAuthTokenExchangeError(
                token_payload.get("error_description")
                or token_payload.get("error")
                or "No access token returned from GitHub."
            )
        return access_token

    async def fetch_authenticated_user(self, token: str) -> GitHubUser:
        """Return the GitHub account that owns ``token``."""
        try:
            async with httpx.AsyncClient(
                base_url=self._github.api_base_url,
                timeout=self._github.request_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    "/user",
                    headers={
                        "Accept": "application/vnd.github+json",
                        "Authorization": f"Bearer {token}",
                    },
                )
        except httpx.HTTPError as exc:
            raise GitHubIdentityError(f"User lookup failed: {exc}") from exc

        if not response.is_success:
            raise GitHubIdentityError(
                f"GitHub user lookup returned {response.status_code}."
            )

        data = response.json()
        return GitHubUser(
            id=data["id"],
            login=data["login"],
            name=data.get("name") or data["login"],
            email=data.get("email") or "",
            avatar_url=data.get("avatar_url") or "",
            html_url=data.get("html_url") or "",
        )


__all__ = [
    "GitHubIdentityError",
    "GitHubOAuthClient",
    "GitHubUser",
    "OAuthStateEncoder",
    "OAuthTokenExchangeError",
]
