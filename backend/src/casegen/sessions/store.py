"""In-memory session store mapping opaque session ids to GitHub tokens."""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from casegen.constants.sessions import MAX_SESSIONS, SESSION_TTL_MINUTES

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """Mint an unguessable, URL-safe session id."""
    return secrets.token_urlsafe(32)


@dataclass
class Session:
    """A logged-in browser session.

    The credential is the GitHub OAuth access token. It is never sent back to
    the browser; the browser only ever holds ``id``.
    """

    credential: str
    id: str = field(default_factory=new_session_id)
    created_at: datetime = field(default_factory=datetime.now)
    last_accessed: datetime = field(default_factory=datetime.now)

    def is_expired(self, ttl_minutes: int, now: datetime | None = None) -> bool:
        """Check if the session has been idle longer than the TTL.

        Args:
            ttl_minutes: Idle lifetime in minutes.
            now: Reference time, defaults to the current time.

        Returns:
            True if session is older than TTL.
        """
        expiry = self.last_accessed + timedelta(minutes=ttl_minutes)
        return (now or datetime.now()) > expiry

    def touch(self) -> None:
        """Update last_accessed timestamp."""
        self.last_accessed = datetime.now()


class SessionStore:
    """Bounded in-memory store for sessions.

    Sessions expire after ``ttl_minutes`` without use. When more than
    ``max_sessions`` are live, the least recently used one is dropped.
    Unknown and expired ids are indistinguishable to callers: both yield None.
    """

    def __init__(
        self,
        ttl_minutes: int = SESSION_TTL_MINUTES,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        """Initialize empty session store.

        Args:
            ttl_minutes: Idle lifetime of a session.
            max_sessions: Upper bound on live sessions.
        """
        self.ttl_minutes = ttl_minutes
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, Session] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return isinstance(session_id, str) and self.get(session_id) is not None

    def create(self, credential: str) -> Session:
        """Create a session for a freshly exchanged credential.

        Args:
            credential: GitHub access token.

        Returns:
            The new session, already stored.
        """
        session = Session(credential=credential)
        self._store(session)
        return session

    def put(self, session_id: str, credential: str) -> Session:
        """Store a credential under an explicit session id.

        Args:
            session_id: Opaque id chosen by the caller.
            credential: GitHub access token.

        Returns:
            The stored session.
        """
        session = Session(credential=credential, id=session_id)
        self._store(session)
        return session

    def get(self, session_id: str | None) -> str | None:
        """Look up the credential for a session id.

        Args:
            session_id: Id presented by the client, possibly None.

        Returns:
            The credential, or None if the id is unknown or expired.
        """
        session = self.get_session(session_id)
        return session.credential if session else None

    def get_session(self, session_id: str | None) -> Session | None:
        """Look up a live session and mark it as used.

        Args:
            session_id: Id presented by the client, possibly None.

        Returns:
            The session, or None if the id is unknown or expired.
        """
        if not session_id:
            return None

        session = self._sessions.get(session_id)
        if session is None:
            return None

        if session.is_expired(self.ttl_minutes):
            del self._sessions[session_id]
            return None

        session.touch()
        self._sessions.move_to_end(session_id)
        return session

    def remove(self, session_id: str) -> bool:
        """Remove a session.

        Returns:
            True if a session was removed.
        """
        return self._sessions.pop(session_id, None) is not None

    def cleanup_expired(self) -> int:
        """Remove all expired sessions.

        Returns:
            Number of sessions removed.
        """
        now = datetime.now()
        expired_ids = [
            sid for sid, session in self._sessions.items() if session.is_expired(self.ttl_minutes, now)
        ]
        for sid in expired_ids:
            del self._sessions[sid]
        return len(expired_ids)

    def _store(self, session: Session) -> None:
        self._sessions[session.id] = session
        self._sessions.move_to_end(session.id)

        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"Session store full, evicted least recently used session {evicted_id[:8]}")
