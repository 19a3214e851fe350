import unittest

from todo_backend.auth import AuthClient
from todo_backend.identity import InMemoryIdentityProvider
from todo_backend.signup import LoginView, SignupView


class SignupViewTests(unittest.TestCase):
    def setUp(self):
        self.identity = InMemoryIdentityProvider()
        self.auth = AuthClient(self.identity)
        self.routes = []
        self.alerts = []
        self.view = SignupView(self.auth, self.routes.append, self.alerts.append)

    def test_valid_signup_creates_session_and_navigates_home(self):
        seen = []
        self.auth.on_auth_state_changed(seen.append)

        self.assertTrue(self.view.submit("grace@example.com", "hopper42"))

        self.assertEqual(self.auth.current_user.email, "grace@example.com")
        self.assertEqual(seen[-1], self.auth.current_user)
        self.assertEqual(self.routes, ["/"])
        self.assertEqual(self.alerts, [])

    def test_invalid_inputs_create_no_session_and_show_error(self):
        self.identity.create_account("taken@example.com", "password")
        cases = [
            ("not-an-email", "password", "badly formatted"),
            ("weak@example.com", "123", "at least 6"),
            ("taken@example.com", "password", "already in use"),
        ]
        for email, password, message in cases:
            with self.subTest(email=email):
                with self.assertLogs("todo_backend.signup", level="ERROR"):
                    self.assertFalse(self.view.submit(email, password))
                self.assertIsNone(self.auth.current_user)
                self.assertIn(message, self.alerts[-1])
        self.assertEqual(self.routes, [])
        self.assertEqual(len(self.identity.accounts), 1)


class LoginViewTests(unittest.TestCase):
    def setUp(self):
        self.identity = InMemoryIdentityProvider()
        self.identity.create_account("grace@example.com", "hopper42")
        self.auth = AuthClient(self.identity)
        self.routes = []
        self.alerts = []
        self.view = LoginView(self.auth, self.routes.append, self.alerts.append)

    def test_login_with_matching_password(self):
        self.assertTrue(self.view.submit("grace@example.com", "hopper42"))
        self.assertEqual(self.auth.current_user.email, "grace@example.com")
        self.assertEqual(self.routes, ["/"])

    def test_login_with_wrong_password(self):
        with self.assertLogs("todo_backend.signup", level="ERROR"):
            self.assertFalse(self.view.submit("grace@example.com", "wrong"))
        self.assertIsNone(self.auth.current_user)
        self.assertEqual(self.alerts, ["Invalid email or password."])


if __name__ == "__main__":
    unittest.main()
