"""
GitHub sign-in: exchange the OAuth code, remember the GitHub token, and
issue the app's own session token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.clients.github_auth import (
    GitHubIdentityError,
    GitHubOAuthClient,
    OAuthTokenExchangeError,
)
from app.core.errors import InvalidOAuthCodeError
from app.schemas.auth import AuthUser
from app.services.session_tokens import SessionTokenService
from app.services.token_registry import TokenRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoginResult:
    access_token: str
    user: AuthUser


class AuthService:
    """Coordinate the OAuth code exchange with token storage and session issue."""

    def __init__(
        self,
        *,
        oauth_client: GitHubOAuthClient,
        token_registry: TokenRegistry,
        session_tokens: SessionTokenService,
    ) -> None:
        self._oauth = oauth_client
        self._tokens = token_registry
        self._sessions = session_tokens

    async def login_with_code(self, code: str) -> LoginResult:
        if not code:
            raise InvalidOAuthCodeError("A GitHub authorization code is required.")

        try:
            github_token = await self._oauth.exchange_authorization_code(code)
            github_user = await self._oauth.fetch_authenticated_user(github_token)
        except (OAuthTokenExchangeError, GitHubIdentityError) as exc:
            logger.warning("GitHub login failed: %s", exc)
            raise InvalidOAuthCodeError() from exc

        user = AuthUser(
            id=github_user.id,
            github_id=github_user.login,
            email=github_user.email or f"{github_user.login}@github.com",
            avatar_url=github_user.avatar_url,
        )
        self._tokens.store(github_user.id, github_token)
        access_token = self._sessions.issue(
            user_id=user.id, github_id=user.github_id, email=user.email
        )
        logger.info("User %s (%s) signed in", user.id, user.github_id)
        return LoginResult(access_token=access_token, user=user)

    def logout(self, user_id: str | int) -> None:
        self._tokens.discard(user_id)


__all__ = ["AuthService", "LoginResult"]
