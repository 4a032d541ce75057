"""In-process session registry for the HTTP API.

Sessions are temporary authentication tokens for logged-in users. They
live only as long as the server process.
"""
import secrets
import time
from typing import Optional

from ..domain.models import AuthenticatedUser


class SessionStore:
    """Maps secure random session ids to logged-in users.

    Examples:
        >>> sessions = SessionStore(3600)
        >>> session_id = sessions.create(AuthenticatedUser(1, "alice"))
        >>> sessions.get_valid(session_id)
        AuthenticatedUser(id=1, username='alice')
        >>> sessions.delete(session_id)  # logout
        True
    """

    def __init__(self, max_age: int):
        """
        Args:
            max_age: Session lifetime in seconds
        """
        self.max_age = max_age
        self._sessions: dict[str, tuple[AuthenticatedUser, float]] = {}

    def create(self, user: AuthenticatedUser) -> str:
        """Create new session for user and return its id.

        Expired sessions are pruned first.
        """
        self.cleanup_expired()
        session_id = secrets.token_urlsafe(32)
        self._sessions[session_id] = (user, time.monotonic() + self.max_age)
        return session_id

    def get_valid(self, session_id: str) -> Optional[AuthenticatedUser]:
        """Get session user if the session exists and has not expired."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        user, expires_at = entry
        if expires_at <= time.monotonic():
            del self._sessions[session_id]
            return None
        return user

    def delete(self, session_id: str) -> bool:
        """Delete session (logout). Returns True if it existed."""
        return self._sessions.pop(session_id, None) is not None

    def cleanup_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        now = time.monotonic()
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)
