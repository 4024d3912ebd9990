"""
FastAPI dependency resolving the signed-in user from the bearer session token.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import SessionTokenError
from app.services import SessionClaims, SessionTokenService

from .clients import get_session_token_service

_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
    session_tokens: Annotated[SessionTokenService, Depends(get_session_token_service)],
) -> SessionClaims:
    """Return the claims of a valid session token or raise ``SessionTokenError``."""
    if credentials is None or not credentials.credentials:
        raise SessionTokenError()
    return session_tokens.verify(credentials.credentials)


__all__ = ["get_current_user"]
