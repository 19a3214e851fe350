import unittest
from unittest.mock import MagicMock, patch

from google.api_core import exceptions as google_exceptions

from todo_backend.errors import StoreError
from todo_backend.store import FirestoreDocumentStore, InMemoryDocumentStore


class InMemoryDocumentStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_create_list_update(self):
        doc_id = self.store.create_document("users/u/todoLists", {"name": "Work"})
        self.store.update_document("users/u/todoLists", doc_id, {"name": "Job"})
        self.assertEqual(
            self.store.list_documents("users/u/todoLists"), [(doc_id, {"name": "Job"})]
        )
        self.assertEqual(self.store.list_documents("users/other/todoLists"), [])

    def test_listed_fields_are_copies(self):
        doc_id = self.store.create_document("c", {"tags": ["a"]})
        self.store.list_documents("c")[0][1]["tags"].append("b")
        self.assertEqual(self.store.get_document("c", doc_id), {"tags": ["a"]})

    def test_missing_documents_raise(self):
        with self.assertRaises(StoreError):
            self.store.update_document("c", "missing", {"x": 1})
        with self.assertRaises(StoreError):
            self.store.delete_document("c", "missing")
        with self.assertRaises(StoreError):
            self.store.move_document("c", "missing", "d", {"x": 1})

    def test_move_is_all_or_nothing(self):
        doc_id = self.store.create_document("a", {"title": "t"})
        self.store.failing_paths.add("b")
        with self.assertRaises(StoreError):
            self.store.move_document("a", doc_id, "b", {"title": "t"})
        self.assertEqual(len(self.store.list_documents("a")), 1)
        self.store.failing_paths.clear()
        self.assertEqual(self.store.list_documents("b"), [])

        new_id = self.store.move_document("a", doc_id, "b", {"title": "t2"})
        self.assertEqual(self.store.list_documents("a"), [])
        self.assertEqual(self.store.list_documents("b"), [(new_id, {"title": "t2"})])


class FirestoreDocumentStoreTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.collections = {}
        self.client.collection.side_effect = lambda path: self.collections.setdefault(
            path, MagicMock(name=path)
        )
        self.store = FirestoreDocumentStore(self.client)

    def test_create_document_returns_new_id(self):
        collection = self.client.collection("users/u/todoLists")
        collection.add.return_value = (None, MagicMock(id="list-1"))

        doc_id = self.store.create_document("users/u/todoLists", {"name": "Work"})

        self.assertEqual(doc_id, "list-1")
        collection.add.assert_called_once_with({"name": "Work"})

    def test_list_documents(self):
        snapshot = MagicMock(id="t1")
        snapshot.to_dict.return_value = {"title": "x"}
        self.client.collection("p").stream.return_value = [snapshot]

        self.assertEqual(self.store.list_documents("p"), [("t1", {"title": "x"})])

    def test_update_missing_document_raises_store_error(self):
        doc_ref = self.client.collection("p").document.return_value
        doc_ref.update.side_effect = google_exceptions.NotFound("gone")

        with self.assertRaises(StoreError) as ctx:
            self.store.update_document("p", "t1", {"priority": "high"})
        self.assertEqual(ctx.exception.path, "p")

    def test_delete_requires_existing_document(self):
        self.store.delete_document("p", "t1")

        self.client.write_option.assert_called_once_with(exists=True)
        doc_ref = self.client.collection("p").document.return_value
        doc_ref.delete.assert_called_once_with(
            option=self.client.write_option.return_value
        )

    @patch("todo_backend.store.firestore.transactional", new=lambda fn: fn)
    def test_move_document_writes_in_one_transaction(self):
        source_ref = self.client.collection("a").document.return_value
        source_ref.get.return_value.exists = True
        dest_ref = self.client.collection("b").document.return_value
        dest_ref.id = "new-id"
        transaction = self.client.transaction.return_value

        new_id = self.store.move_document("a", "t1", "b", {"title": "t"})

        self.assertEqual(new_id, "new-id")
        source_ref.get.assert_called_once_with(transaction=transaction)
        transaction.create.assert_called_once_with(dest_ref, {"title": "t"})
        transaction.delete.assert_called_once_with(source_ref)

    @patch("todo_backend.store.firestore.transactional", new=lambda fn: fn)
    def test_move_missing_document_raises(self):
        source_ref = self.client.collection("a").document.return_value
        source_ref.get.return_value.exists = False
        transaction = self.client.transaction.return_value

        with self.assertRaises(StoreError):
            self.store.move_document("a", "t1", "b", {"title": "t"})
        transaction.create.assert_not_called()
        transaction.delete.assert_not_called()

    def test_move_commit_retries_exhausted_raises_store_error(self):
        def exhausted(fn):
            def run(*args, **kwargs):
                raise ValueError("Failed to commit transaction in 5 attempts.")

            return run

        with patch("todo_backend.store.firestore.transactional", new=exhausted):
            with self.assertRaises(StoreError) as ctx:
                self.store.move_document("a", "t1", "b", {"title": "t"})
        self.assertEqual(ctx.exception.path, "a")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)


if __name__ == "__main__":
    unittest.main()
