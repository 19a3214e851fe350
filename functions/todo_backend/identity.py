"""
Identity provider abstraction for Firebase Authentication and an in-memory
test implementation.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import requests
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from todo_backend.errors import AuthError
from todo_shared.constants import MIN_PASSWORD_LENGTH
from todo_shared.types import User

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Identity Toolkit error codes -> messages shown to the user.
ERROR_MESSAGES = {
    "EMAIL_EXISTS": "The email address is already in use by another account.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "MISSING_EMAIL": "An email address is required.",
    "MISSING_PASSWORD": "A password is required.",
    "WEAK_PASSWORD": (
        f"Password should be at least {MIN_PASSWORD_LENGTH} characters."
    ),
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": (
        "Too many unsuccessful attempts. Please try again later."
    ),
    "OPERATION_NOT_ALLOWED": "Email/password accounts are not enabled.",
}


def _error_from_code(raw: str) -> AuthError:
    # Codes may carry a detail suffix, e.g. "WEAK_PASSWORD : Password should be..."
    code = raw.split(":", 1)[0].strip()
    message = ERROR_MESSAGES.get(code, f"Authentication failed ({code}).")
    return AuthError(message, code=code)


class IdentityProvider(Protocol):
    """Account operations the views need from the auth backend."""

    def create_account(self, email: str, password: str) -> User:
        ...

    def sign_in(self, email: str, password: str) -> User:
        ...

    def sign_out(self, user: User) -> None:
        ...


@dataclass
class _Account:
    uid: str
    email: str
    password: str
    signed_in: bool = False


@dataclass
class InMemoryIdentityProvider:
    """Simple in-memory account registry for development and tests."""

    accounts: Dict[str, _Account] = field(default_factory=dict)

    def create_account(self, email: str, password: str) -> User:
        email = (email or "").strip()
        if not email:
            raise _error_from_code("MISSING_EMAIL")
        if not EMAIL_PATTERN.match(email):
            raise _error_from_code("INVALID_EMAIL")
        if not password:
            raise _error_from_code("MISSING_PASSWORD")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise _error_from_code("WEAK_PASSWORD")
        key = email.lower()
        if key in self.accounts:
            raise _error_from_code("EMAIL_EXISTS")
        account = _Account(
            uid=uuid.uuid4().hex, email=email, password=password, signed_in=True
        )
        self.accounts[key] = account
        return User(uid=account.uid, email=account.email)

    def sign_in(self, email: str, password: str) -> User:
        account = self.accounts.get((email or "").strip().lower())
        if not account or account.password != password:
            raise _error_from_code("INVALID_LOGIN_CREDENTIALS")
        account.signed_in = True
        return User(uid=account.uid, email=account.email)

    def sign_out(self, user: User) -> None:
        account = self.accounts.get(user.email.lower())
        if not account or account.uid != user.uid:
            raise AuthError(f"No account for user {user.uid}", code="USER_NOT_FOUND")
        account.signed_in = False

    def reset(self) -> None:
        """Clear all accounts (useful in tests)."""
        self.accounts.clear()


class FirebaseIdentityProvider:
    """
    Firebase Authentication client.

    Email/password sign-up and sign-in go through the Identity Toolkit REST
    API (the Admin SDK cannot verify passwords); sign-out revokes the user's
    refresh tokens through firebase_admin.
    """

    def __init__(self, api_key: str, timeout: float = 10.0, app=None):
        if not api_key:
            raise ValueError("FIREBASE_API_KEY is required for FirebaseIdentityProvider")
        self.api_key = api_key
        self.timeout = timeout
        self.app = app
        self.http = requests.Session()

    def _post(self, endpoint: str, payload: dict) -> dict:
        url = f"{IDENTITY_TOOLKIT_URL}/accounts:{endpoint}"
        try:
            response = self.http.post(
                url,
                params={"key": self.api_key},
                json={**payload, "returnSecureToken": True},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthError(f"Could not reach the authentication service: {e}") from e

        if response.status_code >= 400:
            try:
                raw = response.json()["error"]["message"]
            except (ValueError, KeyError, TypeError):
                raw = f"HTTP_{response.status_code}"
            raise _error_from_code(raw)
        return response.json()

    def create_account(self, email: str, password: str) -> User:
        body = self._post("signUp", {"email": email, "password": password})
        logger.info("Created account %s", body.get("localId"))
        return User(uid=body["localId"], email=body.get("email", email))

    def sign_in(self, email: str, password: str) -> User:
        body = self._post("signInWithPassword", {"email": email, "password": password})
        return User(uid=body["localId"], email=body.get("email", email))

    def sign_out(self, user: User) -> None:
        try:
            firebase_auth.revoke_refresh_tokens(user.uid, app=self.app)
        except firebase_auth.UserNotFoundError as e:
            raise AuthError(str(e), code="USER_NOT_FOUND") from e
        except firebase_exceptions.FirebaseError as e:
            raise AuthError(str(e), code=str(e.code)) from e
