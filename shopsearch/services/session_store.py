"""
Per-session state management.

Each session owns exactly one UserProfile and one ConversationState. Sessions
are never shared: the store hands out one Session per key, and the engine
holds the session lock while it reads and mutates that session's state.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from shopsearch.core.config import settings
from shopsearch.services.conversation_context import ConversationState
from shopsearch.services.user_profile import UserProfile

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One shopper's mutable state"""

    session_id: str
    profile: UserProfile = field(default_factory=UserProfile)
    conversation: ConversationState = field(default_factory=ConversationState)
    created_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def touch(self) -> None:
        self.last_updated = datetime.now()


class SessionStore:
    """Creates, looks up, ends and expires sessions"""

    def __init__(self, session_ttl_hours: Optional[int] = None):
        ttl_hours = session_ttl_hours if session_ttl_hours is not None else settings.session_ttl_hours
        self.session_ttl = timedelta(hours=ttl_hours)
        self.sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

        logger.info(f"Session store initialized - TTL: {ttl_hours}h")

    def __len__(self) -> int:
        return len(self.sessions)

    def get_or_create(self, session_id: str) -> Session:
        """Get an existing live session or start a new one"""
        with self._lock:
            session = self.sessions.get(session_id)
            if session is not None:
                if datetime.now() - session.last_updated <= self.session_ttl:
                    return session
                logger.info(f"Session {session_id} expired, starting a new one")

            session = Session(session_id=session_id)
            self.sessions[session_id] = session
            logger.info(f"Created new session {session_id}")
            return session

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self.sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Dispose of a session's state"""
        with self._lock:
            session = self.sessions.pop(session_id, None)
        if session is None:
            return False

        with session.lock:
            session.conversation.clear()
        logger.info(f"Ended session {session_id}")
        return True

    def cleanup_expired(self) -> int:
        """Remove sessions idle for longer than the TTL"""
        now = datetime.now()
        with self._lock:
            expired = [
                session_id
                for session_id, session in self.sessions.items()
                if now - session.last_updated > self.session_ttl
            ]
            for session_id in expired:
                del self.sessions[session_id]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired sessions")
        return len(expired)
