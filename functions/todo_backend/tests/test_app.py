import unittest

from fastapi.testclient import TestClient

from todo_backend.app import create_app
from todo_backend.config import RefreshPolicy
from todo_backend.dependencies import get_session_registry
from todo_backend.identity import InMemoryIdentityProvider
from todo_backend.sessions import SessionRegistry
from todo_backend.store import InMemoryDocumentStore


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.identity = InMemoryIdentityProvider()
        self.store = InMemoryDocumentStore()
        self.registry = SessionRegistry(self.identity, self.store, RefreshPolicy.FULL)
        app = create_app()
        app.dependency_overrides[get_session_registry] = lambda: self.registry
        self.client = TestClient(app)

    def tearDown(self):
        self.registry.close_all()

    def signup(self, email="ada@example.com", password="secret1"):
        return self.client.post(
            "/api/signup",
            json={"email": email, "password": password},
            follow_redirects=False,
        )

    def test_signup_redirects_home_and_signs_in(self):
        response = self.signup()
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")

        session = self.client.get("/api/session").json()
        self.assertEqual(session["user"]["email"], "ada@example.com")

    def test_signup_failure_returns_message(self):
        response = self.signup(password="123")
        self.assertEqual(response.status_code, 400)
        self.assertIn("at least 6", response.json()["detail"])
        self.assertIsNone(self.client.get("/api/session").json()["user"])

    def test_signed_out_requests_do_not_open_sessions(self):
        app = self.client.app
        for _ in range(20):
            client = TestClient(app)
            self.assertEqual(client.get("/api/lists").status_code, 401)
            self.assertIsNone(client.get("/api/session").json()["user"])
            client.post("/api/logout", follow_redirects=False)
        self.assertEqual(self.registry.sessions, {})

    def test_failed_signup_does_not_keep_a_session(self):
        for _ in range(5):
            self.assertEqual(self.signup(password="123").status_code, 400)
        self.assertEqual(self.registry.sessions, {})

    def test_lists_require_sign_in(self):
        self.assertEqual(self.client.get("/api/lists").status_code, 401)
        self.assertEqual(
            self.client.post("/api/lists", json={"name": "Work"}).status_code, 401
        )

    def test_list_and_task_lifecycle(self):
        self.signup()
        state = self.client.post("/api/lists", json={"name": "Work"}).json()
        self.assertTrue(state["ok"])
        [work] = state["lists"]
        self.assertEqual(work["created_by"], "ada@example.com")

        state = self.client.put(
            f"/api/lists/{work['id']}/draft",
            json={"title": "Write report", "priority": "medium"},
        ).json()
        self.assertEqual(state["lists"][0]["draft"]["title"], "Write report")

        state = self.client.post(f"/api/lists/{work['id']}/tasks").json()
        self.assertTrue(state["ok"])
        [task] = state["lists"][0]["tasks"]
        self.assertEqual(task["priority"], "medium")
        self.assertEqual(state["lists"][0]["draft"]["title"], "")

        state = self.client.patch(
            f"/api/lists/{work['id']}/tasks/{task['id']}", json={"priority": "high"}
        ).json()
        self.assertEqual(state["lists"][0]["tasks"][0]["priority"], "high")

        state = self.client.delete(f"/api/lists/{work['id']}/tasks/{task['id']}").json()
        self.assertTrue(state["ok"])
        self.assertEqual(state["lists"][0]["tasks"], [])

        state = self.client.delete(f"/api/lists/{work['id']}/tasks/{task['id']}").json()
        self.assertFalse(state["ok"])
        self.assertEqual(state["lists"][0]["tasks"], [])

    def test_add_task_with_empty_title_is_rejected_silently(self):
        self.signup()
        [work] = self.client.post("/api/lists", json={"name": "Work"}).json()["lists"]
        state = self.client.post(
            f"/api/lists/{work['id']}/tasks", json={"title": "  "}
        ).json()
        self.assertFalse(state["ok"])
        self.assertEqual(state["lists"][0]["tasks"], [])

    def test_drag_task_between_lists(self):
        self.signup()
        self.client.post("/api/lists", json={"name": "A"})
        lists = self.client.post("/api/lists", json={"name": "B"}).json()["lists"]
        list_a, list_b = (l["id"] for l in lists)
        state = self.client.post(
            f"/api/lists/{list_a}/tasks", json={"title": "travel"}
        ).json()
        task_id = state["lists"][0]["tasks"][0]["id"]

        state = self.client.post(
            "/api/drag/start", json={"task_id": task_id, "from_list_id": list_a}
        ).json()
        self.assertEqual(state["dragging"]["task_id"], task_id)

        over = self.client.post(
            "/api/drag/over", json={"pointer_y": 20, "viewport_height": 900}
        ).json()
        self.assertEqual(over["scroll_by"], -10)

        state = self.client.post(
            "/api/drag/drop", json={"to_list_id": list_b, "priority": "high"}
        ).json()
        self.assertTrue(state["ok"])
        self.assertIsNone(state["dragging"])
        by_id = {l["id"]: l for l in state["lists"]}
        self.assertEqual(by_id[list_a]["tasks"], [])
        [moved] = by_id[list_b]["tasks"]
        self.assertEqual((moved["title"], moved["priority"]), ("travel", "high"))

    def test_logout_redirects_and_closes_session(self):
        self.signup()
        response = self.client.post("/api/logout", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")
        self.assertEqual(self.registry.sessions, {})

    def test_login_after_logout(self):
        self.signup()
        self.client.post("/api/lists", json={"name": "Work"})
        self.client.post("/api/logout", follow_redirects=False)

        response = self.client.post(
            "/api/login",
            json={"email": "ada@example.com", "password": "secret1"},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        lists = self.client.get("/api/lists").json()["lists"]
        self.assertEqual([l["name"] for l in lists], ["Work"])


if __name__ == "__main__":
    unittest.main()
