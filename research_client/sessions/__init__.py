"""Session state management.

Owns the bounded collection of chat sessions and the current-session
pointer. Every mutation is persisted through the configured storage.
"""

from research_client.sessions.store import (
    MAX_SESSIONS,
    SessionStore,
    default_session_name,
    session_timestamp_label,
)

__all__ = [
    "MAX_SESSIONS",
    "SessionStore",
    "default_session_name",
    "session_timestamp_label",
]
