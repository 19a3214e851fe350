"""
Document store abstraction for Cloud Firestore and an in-memory test
implementation.

Documents are addressed by a slash-delimited collection path (for example
``users/{uid}/todoLists``) plus a document id.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Tuple

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from todo_backend.errors import StoreError

logger = logging.getLogger(__name__)

DocumentItem = Tuple[str, dict]


class DocumentStore(Protocol):
    """Interface for document reads and writes."""

    def create_document(self, path: str, fields: dict) -> str:
        ...

    def list_documents(self, path: str) -> List[DocumentItem]:
        ...

    def update_document(self, path: str, doc_id: str, fields: dict) -> None:
        ...

    def delete_document(self, path: str, doc_id: str) -> None:
        ...

    def move_document(
        self, from_path: str, doc_id: str, to_path: str, fields: dict
    ) -> str:
        """Atomically create `fields` under `to_path` and delete the source doc."""
        ...


@dataclass
class InMemoryDocumentStore:
    """Simple in-memory document store for development and tests."""

    collections: Dict[str, Dict[str, dict]] = field(default_factory=dict)
    # Paths whose writes fail, to exercise error handling in tests.
    failing_paths: set[str] = field(default_factory=set)

    def _check(self, path: str) -> None:
        if path in self.failing_paths:
            raise StoreError(f"Simulated failure writing to {path}", path=path)

    def create_document(self, path: str, fields: dict) -> str:
        self._check(path)
        doc_id = uuid.uuid4().hex[:20]
        self.collections.setdefault(path, {})[doc_id] = copy.deepcopy(fields)
        return doc_id

    def list_documents(self, path: str) -> List[DocumentItem]:
        self._check(path)
        docs = self.collections.get(path, {})
        return [(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]

    def get_document(self, path: str, doc_id: str) -> dict | None:
        data = self.collections.get(path, {}).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    def update_document(self, path: str, doc_id: str, fields: dict) -> None:
        self._check(path)
        doc = self.collections.get(path, {}).get(doc_id)
        if doc is None:
            raise StoreError(f"No document to update: {path}/{doc_id}", path=path)
        doc.update(copy.deepcopy(fields))

    def delete_document(self, path: str, doc_id: str) -> None:
        self._check(path)
        docs = self.collections.get(path, {})
        if doc_id not in docs:
            raise StoreError(f"No document to delete: {path}/{doc_id}", path=path)
        del docs[doc_id]

    def move_document(
        self, from_path: str, doc_id: str, to_path: str, fields: dict
    ) -> str:
        self._check(from_path)
        self._check(to_path)
        source = self.collections.get(from_path, {})
        if doc_id not in source:
            raise StoreError(f"No document to move: {from_path}/{doc_id}", path=from_path)
        new_id = uuid.uuid4().hex[:20]
        self.collections.setdefault(to_path, {})[new_id] = copy.deepcopy(fields)
        del source[doc_id]
        return new_id

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()
        self.failing_paths.clear()


class FirestoreDocumentStore:
    """Cloud Firestore-backed implementation using the firebase_admin client."""

    def __init__(self, client=None):
        self.client = client or firestore.client()

    def create_document(self, path: str, fields: dict) -> str:
        try:
            _, doc_ref = self.client.collection(path).add(fields)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Error adding document to {path}: {e}", path=path) from e
        return doc_ref.id

    def list_documents(self, path: str) -> List[DocumentItem]:
        try:
            return [
                (snapshot.id, snapshot.to_dict() or {})
                for snapshot in self.client.collection(path).stream()
            ]
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Error listing documents in {path}: {e}", path=path) from e

    def update_document(self, path: str, doc_id: str, fields: dict) -> None:
        try:
            self.client.collection(path).document(doc_id).update(fields)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(
                f"Error updating document {path}/{doc_id}: {e}", path=path
            ) from e

    def delete_document(self, path: str, doc_id: str) -> None:
        # Missing docs must raise, Firestore deletes are otherwise silent.
        try:
            self.client.collection(path).document(doc_id).delete(
                option=self.client.write_option(exists=True)
            )
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(
                f"Error deleting document {path}/{doc_id}: {e}", path=path
            ) from e

    def move_document(
        self, from_path: str, doc_id: str, to_path: str, fields: dict
    ) -> str:
        transaction = self.client.transaction()
        source_ref = self.client.collection(from_path).document(doc_id)
        dest_ref = self.client.collection(to_path).document()

        @firestore.transactional
        def _move_doc_transaction(transaction, source_ref, dest_ref):
            snapshot = source_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise StoreError(
                    f"No document to move: {from_path}/{doc_id}", path=from_path
                )
            transaction.create(dest_ref, fields)
            transaction.delete(source_ref)

        # transactional raises ValueError once its commit retries run out.
        try:
            _move_doc_transaction(transaction, source_ref, dest_ref)
        except (google_exceptions.GoogleAPICallError, ValueError) as e:
            raise StoreError(
                f"Error moving document {from_path}/{doc_id} to {to_path}: {e}",
                path=from_path,
            ) from e
        logger.debug("Moved %s/%s to %s/%s", from_path, doc_id, to_path, dest_ref.id)
        return dest_ref.id
