"""Authentication utilities: JWT access tokens for app sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.core.config import SecuritySettings
from app.core.errors import SessionTokenError


@dataclass(frozen=True, slots=True)
class SessionClaims:
    """The authenticated user carried by a session token."""

    user_id: str
    github_id: str
    email: str


class SessionTokenService:
    def __init__(self, settings: SecuritySettings) -> None:
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._expires_in = timedelta(days=settings.jwt_expires_days)

    def issue(
        self,
        *,
        user_id: str | int,
        github_id: str,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or self._expires_in)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "github_id": github_id,
            "email": email,
            "exp": expire,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise SessionTokenError() from exc

        subject = payload.get("sub")
        if not subject:
            raise SessionTokenError("Session token has no subject.")
        return SessionClaims(
            user_id=str(subject),
            github_id=payload.get("github_id", ""),
            email=payload.get("email", ""),
        )


__all__ = ["SessionClaims", "SessionTokenService"]
