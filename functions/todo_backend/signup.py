"""
Sign-up and login views: collect email/password and hand them to the auth
client.
"""

from __future__ import annotations

import logging
from typing import Callable

from todo_backend.auth import AuthClient
from todo_backend.errors import AuthError
from todo_shared.constants import HOME_ROUTE

logger = logging.getLogger(__name__)

Navigate = Callable[[str], None]
Notify = Callable[[str], None]


class SignupView:
    """Creates an account, then navigates home; failures are logged and notified."""

    action = "signing up"

    def __init__(self, auth: AuthClient, navigate: Navigate, notify: Notify):
        self.auth = auth
        self.navigate = navigate
        self.notify = notify

    def _authenticate(self, email: str, password: str) -> None:
        self.auth.create_user_with_email_and_password(email, password)

    def submit(self, email: str, password: str) -> bool:
        try:
            self._authenticate(email, password)
        except AuthError as e:
            logger.error("Error %s: %s", self.action, e)
            self.notify(str(e))
            return False
        self.navigate(HOME_ROUTE)
        return True


class LoginView(SignupView):
    """Signs in an existing account with the same success/failure handling."""

    action = "logging in"

    def _authenticate(self, email: str, password: str) -> None:
        self.auth.sign_in_with_email_and_password(email, password)
