"""
Error taxonomy for remote backend failures.
"""

from __future__ import annotations

from typing import Optional


class TodoError(Exception):
    """Base exception for all backend collaborator failures."""


class AuthError(TodoError):
    """Sign-up, sign-in or sign-out failed."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code
        super().__init__(message)


class StoreError(TodoError):
    """A document create/read/update/delete failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)
