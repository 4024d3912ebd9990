"""
Process-local registry of GitHub access tokens keyed by user.

Entries expire lazily: an expired credential stays in memory until the next
read for that user notices it and evicts it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from app.models.credentials import Credential
from app.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenRegistry:
    """In-memory ``owner id -> Credential`` map with per-entry expiry."""

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(days=7),
        cipher: TokenCipherService | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._cipher = cipher
        self._clock = clock
        self._credentials: Dict[str, Credential] = {}

    def store(self, owner_id: str | int, token: str, ttl: timedelta | None = None) -> None:
        """Insert or overwrite the token held for ``owner_id``.

        An empty token clears whatever was held, so it reads back as absent.
        """
        key = str(owner_id)
        if not token:
            self._credentials.pop(key, None)
            logger.warning("Ignored empty GitHub token for user %s", key)
            return
        held = self._cipher.encrypt(token) if self._cipher else token
        self._credentials[key] = Credential(
            owner_id=key,
            token=held,
            expires_at=self._clock() + (ttl if ttl is not None else self._ttl),
        )
        logger.info("Stored GitHub token for user %s", key)

    def get(self, owner_id: str | int) -> Optional[str]:
        """Return the token for ``owner_id`` or ``None`` when absent or expired."""
        key = str(owner_id)
        credential = self._credentials.get(key)
        if credential is None:
            return None
        if credential.is_expired(self._clock()):
            del self._credentials[key]
            logger.info("GitHub token for user %s expired", key)
            return None
        if self._cipher is None:
            return credential.token
        try:
            return self._cipher.decrypt(credential.token)
        except ValueError:
            del self._credentials[key]
            logger.warning("Discarded undecryptable token for user %s", key)
            return None

    def has_valid(self, owner_id: str | int) -> bool:
        return self.get(owner_id) is not None

    def discard(self, owner_id: str | int) -> None:
        self._credentials.pop(str(owner_id), None)

    def __len__(self) -> int:
        return len(self._credentials)


__all__ = ["TokenRegistry"]
