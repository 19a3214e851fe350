"""
Per-session authentication state on top of an identity provider.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from todo_backend.identity import IdentityProvider
from todo_shared.types import User

logger = logging.getLogger(__name__)

AuthStateCallback = Callable[[Optional[User]], None]
Unsubscribe = Callable[[], None]


class AuthClient:
    """
    Tracks the signed-in user of one client session.

    Listeners registered with on_auth_state_changed are called once with the
    current user on registration and again on every sign-in or sign-out.
    """

    def __init__(self, identity: IdentityProvider):
        self.identity = identity
        self._current_user: Optional[User] = None
        self._listeners: List[AuthStateCallback] = []

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Unsubscribe:
        self._listeners.append(callback)
        callback(self._current_user)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def create_user_with_email_and_password(self, email: str, password: str) -> User:
        user = self.identity.create_account(email, password)
        self._set_user(user)
        return user

    def sign_in_with_email_and_password(self, email: str, password: str) -> User:
        user = self.identity.sign_in(email, password)
        self._set_user(user)
        return user

    def sign_out(self) -> None:
        user = self._current_user
        if user is not None:
            self.identity.sign_out(user)
        self._set_user(None)

    def _set_user(self, user: Optional[User]) -> None:
        self._current_user = user
        logger.debug("Auth state changed: %s", user.uid if user else None)
        for callback in list(self._listeners):
            callback(user)
