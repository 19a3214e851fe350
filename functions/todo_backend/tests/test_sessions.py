import unittest

from todo_backend.identity import InMemoryIdentityProvider
from todo_backend.sessions import SessionRegistry
from todo_backend.store import InMemoryDocumentStore


class SessionRegistryTests(unittest.TestCase):
    def setUp(self):
        self.registry = SessionRegistry(
            InMemoryIdentityProvider(),
            InMemoryDocumentStore(),
            idle_timeout_seconds=60,
        )

    def tearDown(self):
        self.registry.close_all()

    def test_get_does_not_create(self):
        self.assertIsNone(self.registry.get(None))
        self.assertIsNone(self.registry.get("unknown"))
        self.assertEqual(self.registry.sessions, {})

    def test_open_reuses_known_session(self):
        session = self.registry.open()
        self.assertIs(self.registry.open(session.session_id), session)
        self.assertEqual(len(self.registry.sessions), 1)

    def test_idle_sessions_are_evicted_and_detached(self):
        stale = self.registry.open()
        fresh = self.registry.open()
        stale.last_seen -= 120

        self.assertIsNone(self.registry.get(stale.session_id))
        self.assertIs(self.registry.get(fresh.session_id), fresh)
        self.assertEqual(list(self.registry.sessions), [fresh.session_id])
        self.assertFalse(stale.todo.attached)
        self.assertEqual(stale.auth.listener_count, 0)

    def test_no_timeout_keeps_sessions(self):
        self.registry.idle_timeout_seconds = None
        session = self.registry.open()
        session.last_seen -= 10_000
        self.assertEqual(self.registry.evict_idle(), 0)
        self.assertIs(self.registry.get(session.session_id), session)


if __name__ == "__main__":
    unittest.main()
