"""Bearer token persistence."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from learnerdash.storage.local_store import LocalStore

TOKEN_KEY = "token"


class CredentialStore:
    """
    Holds the single bearer token for this client.

    The token lives in the LocalStore so it survives restarts. Only the login
    command sets it; the SessionGuard and logout clear it.
    """

    def __init__(self, store: LocalStore, key: str = TOKEN_KEY):
        self._store = store
        self._key = key

    def get(self) -> Optional[str]:
        token = self._store.get(self._key)
        return token or None

    def set(self, token: str) -> None:
        self._store.set(self._key, token)
        logger.debug("Stored bearer token")

    def clear(self) -> None:
        # Clearing an already-cleared credential is a no-op.
        if self._store.remove(self._key):
            logger.info("Cleared bearer token")

    @property
    def present(self) -> bool:
        return self.get() is not None
