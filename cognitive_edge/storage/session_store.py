# ABOUTME: Session state persistence for session-backed protocol turns (phase, attempt count, history).
# ABOUTME: Provides the SessionStore protocol plus in-memory and Redis implementations with TTL.

from datetime import datetime, timezone
from typing import Protocol

from loguru import logger
from pydantic import Field, ValidationError
from redis import Redis, RedisError

from cognitive_edge.models.protocol import CamelModel, Phase, SessionHistoryEntry


class SessionStoreError(Exception):
    """Raised when session state cannot be read or written"""
    pass


class SessionState(CamelModel):
    """Protocol progress persisted between turns of one session"""

    session_id: str = Field(min_length=1)
    phase: Phase = Phase.STABILIZE_AND_STRUCTURE
    attempt_count: int = Field(default=1, ge=1)
    session_history: list[SessionHistoryEntry] = Field(default_factory=list)
    discovered_mental_model: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore(Protocol):
    """Persistence interface consumed by the turn service"""

    def load(self, session_id: str) -> SessionState | None:
        ...

    def save(self, state: SessionState) -> None:
        ...

    def delete(self, session_id: str) -> bool:
        ...


class InMemorySessionStore:
    """Process-local store; state is lost on restart"""

    def __init__(self):
        self._sessions: dict[str, SessionState] = {}

    def load(self, session_id: str) -> SessionState | None:
        state = self._sessions.get(session_id)
        return state.model_copy(deep=True) if state else None

    def save(self, state: SessionState) -> None:
        self._sessions[state.session_id] = state.model_copy(deep=True)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None


class RedisSessionStore:
    """
    Redis-backed store keeping one JSON document per session.

    Keys: protocol:session:{session_id}, expiring after ttl_seconds of
    inactivity (each save refreshes the TTL).
    """

    key_prefix = "protocol:session"

    def __init__(self, redis_client: Redis, ttl_seconds: int = 7 * 86400):
        """
        Initialize Redis session store.

        Args:
            redis_client: Redis connection for session documents
            ttl_seconds: Expiry applied on every save
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}:{session_id}"

    def load(self, session_id: str) -> SessionState | None:
        try:
            raw = self.redis.get(self._key(session_id))
        except RedisError as e:
            logger.error(f"Failed to load session {session_id}: {e}")
            raise SessionStoreError(f"Failed to load session {session_id}") from e

        if raw is None:
            return None

        try:
            return SessionState.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Corrupted session document for {session_id}: {e}")
            raise SessionStoreError(f"Corrupted session document for {session_id}") from e

    def save(self, state: SessionState) -> None:
        try:
            self.redis.setex(
                self._key(state.session_id),
                self.ttl_seconds,
                state.model_dump_json(),
            )
        except RedisError as e:
            logger.error(f"Failed to save session {state.session_id}: {e}")
            raise SessionStoreError(f"Failed to save session {state.session_id}") from e

        logger.debug(f"Saved session {state.session_id} in phase '{state.phase.value}'")

    def delete(self, session_id: str) -> bool:
        try:
            return bool(self.redis.delete(self._key(session_id)))
        except RedisError as e:
            logger.error(f"Failed to delete session {session_id}: {e}")
            raise SessionStoreError(f"Failed to delete session {session_id}") from e
