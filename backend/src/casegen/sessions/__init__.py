"""Browser session storage."""

from casegen.sessions.store import Session, SessionStore, new_session_id

__all__ = [
    "Session",
    "SessionStore",
    "new_session_id",
]
