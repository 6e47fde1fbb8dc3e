"""Signed session tokens and the in-memory store holding each table's round."""

import logging
import time
from typing import Any
from uuid import uuid4

from itsdangerous import BadSignature, URLSafeTimedSerializer

from config import config

logger = logging.getLogger("blackjack.api.session")

# Keeps session tokens distinct from anything else signed with the same key
TOKEN_SALT = "blackjack-session"

_serializer: URLSafeTimedSerializer | None = None


def _get_serializer() -> URLSafeTimedSerializer:
    global _serializer
    if _serializer is None:
        _serializer = URLSafeTimedSerializer(config.security.secret_key, salt=TOKEN_SALT)
    return _serializer


def sign_session_id(session_id: str) -> str:
    """Turn a raw session ID into a signed, timestamped token."""
    return _get_serializer().dumps(session_id)


def extract_session_id(token: str, max_age: int | None = None) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token
        max_age: Maximum token age in seconds (defaults to session_ttl)

    Returns:
        The raw session ID if the signature is valid and fresh, None otherwise
    """
    try:
        return _get_serializer().loads(token, max_age=max_age or config.session_ttl)
    except BadSignature:
        # SignatureExpired is a BadSignature too
        return None


class SessionStore:
    """
    Session data keyed by signed token.

    An entry lives for `ttl` seconds after its last write. Stale entries are
    dropped when read and swept each time a session is opened.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self.ttl = ttl or config.session_ttl
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    async def get(self, token: str) -> dict[str, Any] | None:
        """Get session data, or None if unknown or expired."""
        entry = self._entries.get(token)
        if entry is None:
            return None

        expires_at, data = entry
        if expires_at <= time.monotonic():
            del self._entries[token]
            return None
        return data

    async def set(self, token: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Store session data and restart its expiry clock."""
        self._entries[token] = (time.monotonic() + (ttl or self.ttl), data)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many went."""
        now = time.monotonic()
        expired = [token for token, (expires_at, _) in self._entries.items() if expires_at <= now]
        for token in expired:
            del self._entries[token]
        if expired:
            logger.info("Purged %d expired sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Get or create the process-wide session store."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


async def create_session(data: dict[str, Any] | None = None) -> str:
    """Open a new session and return its signed token."""
    store = await get_session_store()
    store.purge_expired()

    token = sign_session_id(str(uuid4()))
    await store.set(token, data or {})
    logger.debug("Opened session, %d active", len(store))
    return token
