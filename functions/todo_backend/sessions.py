"""
Per-browser client sessions: each one owns an auth client, the views built
on it and a lock that serializes handlers touching its state.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Dict, List, Optional

from todo_backend.auth import AuthClient
from todo_backend.config import RefreshPolicy
from todo_backend.identity import IdentityProvider
from todo_backend.signup import LoginView, SignupView
from todo_backend.store import DocumentStore
from todo_backend.todo_view import TodoView

logger = logging.getLogger(__name__)


class ClientSession:
    def __init__(
        self,
        session_id: str,
        identity: IdentityProvider,
        store: DocumentStore,
        refresh_policy: RefreshPolicy = RefreshPolicy.FULL,
    ):
        self.session_id = session_id
        self.lock = threading.Lock()
        self.last_seen = time.monotonic()
        self.redirect_to: Optional[str] = None
        self.notifications: List[str] = []

        self.auth = AuthClient(identity)
        self.signup = SignupView(self.auth, self.navigate, self.notify)
        self.login = LoginView(self.auth, self.navigate, self.notify)
        self.todo = TodoView(self.auth, store, self.navigate, refresh_policy)
        self.todo.attach()

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def navigate(self, route: str) -> None:
        self.redirect_to = route

    def notify(self, message: str) -> None:
        self.notifications.append(message)

    def take_redirect(self) -> Optional[str]:
        route, self.redirect_to = self.redirect_to, None
        return route

    def take_notifications(self) -> List[str]:
        messages, self.notifications = self.notifications, []
        return messages

    def close(self) -> None:
        self.todo.detach()


class SessionRegistry:
    """Creates, looks up and tears down client sessions by id."""

    def __init__(
        self,
        identity: IdentityProvider,
        store: DocumentStore,
        refresh_policy: RefreshPolicy = RefreshPolicy.FULL,
        idle_timeout_seconds: Optional[float] = None,
    ):
        self.identity = identity
        self.store = store
        self.refresh_policy = refresh_policy
        self.idle_timeout_seconds = idle_timeout_seconds
        self.sessions: Dict[str, ClientSession] = {}
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str]) -> Optional[ClientSession]:
        self.evict_idle()
        if not session_id:
            return None
        with self._lock:
            session = self.sessions.get(session_id)
        if session:
            session.touch()
        return session

    def open(self, session_id: Optional[str] = None) -> ClientSession:
        """Return the session for `session_id`, creating a new one if unknown."""
        session = self.get(session_id)
        if session:
            return session
        session = ClientSession(
            uuid.uuid4().hex, self.identity, self.store, self.refresh_policy
        )
        with self._lock:
            self.sessions[session.session_id] = session
        logger.debug("Opened session %s", session.session_id)
        return session

    def evict_idle(self) -> int:
        """Close sessions not seen within the idle timeout; returns how many."""
        if self.idle_timeout_seconds is None:
            return 0
        cutoff = time.monotonic() - self.idle_timeout_seconds
        with self._lock:
            idle = [s for s in self.sessions.values() if s.last_seen < cutoff]
            for session in idle:
                del self.sessions[session.session_id]
        for session in idle:
            session.close()
            logger.debug("Evicted idle session %s", session.session_id)
        return len(idle)

    def close(self, session_id: str) -> None:
        with self._lock:
            session = self.sessions.pop(session_id, None)
        if session:
            session.close()
            logger.debug("Closed session %s", session_id)

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self.sessions.values())
            self.sessions.clear()
        for session in sessions:
            session.close()
