"""Session state storage for session-backed protocol turns"""

from cognitive_edge.storage.session_store import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionState,
    SessionStore,
    SessionStoreError,
)

__all__ = [
    "SessionState",
    "SessionStore",
    "SessionStoreError",
    "InMemorySessionStore",
    "RedisSessionStore",
]
