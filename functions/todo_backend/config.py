"""
Configuration and settings for the to-do backend.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RefreshPolicy(StrEnum):
    """How the todo view reconciles local state after a mutation."""

    FULL = "full"
    PATCH = "patch"


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Firebase web app config
    firebase_api_key: Optional[str] = Field(default=None, alias="FIREBASE_API_KEY")
    firebase_project_id: Optional[str] = Field(
        default=None, alias="FIREBASE_PROJECT_ID"
    )
    firebase_auth_domain: Optional[str] = Field(
        default=None, alias="FIREBASE_AUTH_DOMAIN"
    )
    firebase_storage_bucket: Optional[str] = Field(
        default=None, alias="FIREBASE_STORAGE_BUCKET"
    )
    firebase_messaging_sender_id: Optional[str] = Field(
        default=None, alias="FIREBASE_MESSAGING_SENDER_ID"
    )
    firebase_app_id: Optional[str] = Field(default=None, alias="FIREBASE_APP_ID")
    firebase_measurement_id: Optional[str] = Field(
        default=None, alias="FIREBASE_MEASUREMENT_ID"
    )
    firebase_database_url: Optional[str] = Field(
        default=None, alias="FIREBASE_DATABASE_URL"
    )

    # Service account JSON used by firebase_admin (application default otherwise)
    google_application_credentials: Optional[str] = Field(
        default=None, alias="GOOGLE_APPLICATION_CREDENTIALS"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="TODO_USE_IN_MEMORY_BACKENDS"
    )

    refresh_policy: RefreshPolicy = Field(
        default=RefreshPolicy.FULL, alias="TODO_REFRESH_POLICY"
    )
    identity_timeout_seconds: float = Field(
        default=10.0, alias="TODO_IDENTITY_TIMEOUT_SECONDS"
    )
    session_cookie_name: str = Field(
        default="todo_session", alias="TODO_SESSION_COOKIE"
    )
    session_idle_timeout_seconds: float = Field(
        default=3600.0, alias="TODO_SESSION_IDLE_TIMEOUT_SECONDS"
    )
    log_level: str = Field(default="INFO", alias="TODO_LOG_LEVEL")

    @property
    def firebase_configured(self) -> bool:
        return bool(self.firebase_api_key and self.firebase_project_id)

    def firebase_options(self) -> dict:
        """Options passed to firebase_admin.initialize_app."""
        options = {"projectId": self.firebase_project_id}
        if self.firebase_storage_bucket:
            options["storageBucket"] = self.firebase_storage_bucket
        if self.firebase_database_url:
            options["databaseURL"] = self.firebase_database_url
        return options


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
