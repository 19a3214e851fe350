"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import firebase_admin
from firebase_admin import credentials, firestore

from todo_backend.config import Settings, get_settings
from todo_backend.identity import (
    FirebaseIdentityProvider,
    IdentityProvider,
    InMemoryIdentityProvider,
)
from todo_backend.sessions import SessionRegistry
from todo_backend.store import DocumentStore, FirestoreDocumentStore, InMemoryDocumentStore

_firebase_app: firebase_admin.App | None = None
_identity_provider: IdentityProvider | None = None
_document_store: DocumentStore | None = None
_session_registry: SessionRegistry | None = None


def _use_in_memory_backends(settings: Settings) -> bool:
    return settings.use_in_memory_backends or not settings.firebase_configured


def get_firebase_app() -> firebase_admin.App:
    """
    Initialize the default firebase_admin app once per process.
    """
    global _firebase_app
    if _firebase_app:
        return _firebase_app

    settings = get_settings()
    credential = None
    if settings.google_application_credentials:
        credential = credentials.Certificate(settings.google_application_credentials)
    try:
        _firebase_app = firebase_admin.get_app()
    except ValueError:
        _firebase_app = firebase_admin.initialize_app(
            credential, options=settings.firebase_options()
        )
    return _firebase_app


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider:
        return _identity_provider

    settings = get_settings()
    if _use_in_memory_backends(settings):
        _identity_provider = InMemoryIdentityProvider()
    else:
        _identity_provider = FirebaseIdentityProvider(
            api_key=settings.firebase_api_key,
            timeout=settings.identity_timeout_seconds,
            app=get_firebase_app(),
        )
    return _identity_provider


def get_document_store() -> DocumentStore:
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if _use_in_memory_backends(settings):
        _document_store = InMemoryDocumentStore()
    else:
        _document_store = FirestoreDocumentStore(
            firestore.client(app=get_firebase_app())
        )
    return _document_store


def get_session_registry() -> SessionRegistry:
    """
    Return a singleton session registry so view state persists across requests.
    """
    global _session_registry
    if _session_registry:
        return _session_registry

    settings = get_settings()
    _session_registry = SessionRegistry(
        identity=get_identity_provider(),
        store=get_document_store(),
        refresh_policy=settings.refresh_policy,
        idle_timeout_seconds=settings.session_idle_timeout_seconds,
    )
    return _session_registry


def reset_dependencies() -> None:
    """Drop the cached backends and close open sessions (useful in tests)."""
    global _identity_provider, _document_store, _session_registry
    if _session_registry:
        _session_registry.close_all()
    _identity_provider = None
    _document_store = None
    _session_registry = None
