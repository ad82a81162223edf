"""
Server-side session storage.

A session maps an opaque, randomly generated id to the id of the logged-in
user. The id travels to the browser inside a signed cookie; the mapping itself
lives in Redis (or in process memory for tests) and expires after a fixed TTL.
"""
from typing import Dict, Optional, Tuple
import logging
import secrets
import threading
import time

import redis

from .config import Settings

logger = logging.getLogger(__name__)

class MemorySessionBackend:
    """Process-local store with the subset of the Redis API the session store uses."""

    def __init__(self):
        self._data: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def setex(self, key: str, ttl: int, value) -> bool:
        with self._lock:
            self._data[key] = (str(value), time.monotonic() + ttl)
        return True

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= time.monotonic():
                del self._data[key]
                return None
            return value

    def delete(self, key: str) -> int:
        with self._lock:
            return 1 if self._data.pop(key, None) is not None else 0

class SessionStoreError(Exception):
    """Raised when the session backing store cannot be reached."""

class SessionStore:
    """Maps session ids to user ids with a time-to-live."""

    key_prefix = "session:"

    def __init__(self, client, ttl_seconds: int):
        self.client = client
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    def create(self, user_id: int) -> str:
        """Start an authenticated session for ``user_id`` and return its id."""
        session_id = secrets.token_urlsafe(32)
        try:
            self.client.setex(self._key(session_id), self.ttl_seconds, user_id)
        except redis.RedisError as e:
            logger.error(f"Creating session failed: {str(e)}")
            raise SessionStoreError("Session store unavailable") from e
        logger.info(f"Created session {session_id[:8]} for user {user_id}")
        return session_id

    def get_user_id(self, session_id: str) -> Optional[int]:
        try:
            value = self.client.get(self._key(session_id))
        except redis.RedisError as e:
            logger.error(f"Reading session {session_id[:8]} failed: {str(e)}")
            raise SessionStoreError("Session store unavailable") from e
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Session {session_id[:8]} holds an invalid user id")
            return None

    def destroy(self, session_id: str) -> None:
        try:
            self.client.delete(self._key(session_id))
        except redis.RedisError as e:
            logger.error(f"Destroying session {session_id[:8]} failed: {str(e)}")
            raise SessionStoreError("Session store unavailable") from e
        logger.info(f"Destroyed session {session_id[:8]}")

def create_session_store(settings: Settings) -> SessionStore:
    """Build the session store for the configured backend."""
    if settings.use_memory_sessions:
        logger.info("Using in-memory session storage")
        client = MemorySessionBackend()
    else:
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    return SessionStore(client, ttl_seconds=settings.SESSION_TTL_SECONDS)
