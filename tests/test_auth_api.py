"""HTTP tests for sign-up, sign-in, root and health."""

import asyncio
import unittest
from unittest.mock import patch

import bcrypt

from api_case import ApiTestCase
from houser.core.security import decode_access_token
from houser.models import User

_hashpw = bcrypt.hashpw
_checkpw = bcrypt.checkpw


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestSignUp(ApiTestCase):
    def test_valid_sign_up_returns_user_without_password(self) -> None:
        response = self.client.post(
            self.url("/sign-up"),
            json={"name": "Jane", "email": "jane@example.com", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["error"])
        self.assertIsNone(body["msg"])
        self.assertEqual(body["user"]["email"], "jane@example.com")
        self.assertEqual(body["user"]["name"], "Jane")
        self.assertNotIn("password", body["user"])

    def test_password_is_stored_hashed(self) -> None:
        user = self.sign_up()
        with self.session_factory() as db:
            stored = db.query(User).filter(User.email == user["email"]).one()
        self.assertNotEqual(stored.password, "secret1")

    def test_invalid_email_returns_400_with_field_message(self) -> None:
        response = self.client.post(
            self.url("/sign-up"),
            json={"name": "Jane", "email": "not-an-email", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertTrue(body["error"])
        self.assertIn("email", body["msg"])

    def test_short_password_and_long_name_are_rejected(self) -> None:
        response = self.client.post(
            self.url("/sign-up"),
            json={"name": "x" * 31, "email": "jane@example.com", "password": "ab"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()["msg"]), {"name", "password"})

    def test_malformed_json_returns_400(self) -> None:
        response = self.client.post(
            self.url("/sign-up"),
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()["error"])

    def test_duplicate_email_returns_404(self) -> None:
        self.sign_up()
        response = self.client.post(
            self.url("/sign-up"),
            json={"name": "Other", "email": "jane@example.com", "password": "secret2"},
        )
        self.assertEqual(response.status_code, 404)
        self.assertIsNone(response.json()["user"])


class TestSignIn(ApiTestCase):
    def test_sign_up_then_sign_in_returns_usable_token(self) -> None:
        user = self.sign_up()
        response = self.client.post(
            self.url("/sign-in"),
            json={"email": "jane@example.com", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["error"])
        claims = decode_access_token(body["access_token"], self.settings)
        self.assertEqual(str(claims.user_id), user["id"])

        created = self.client.post(
            self.url("/house"),
            headers=self.auth(body["access_token"]),
            json={"description": "Cottage", "address": "2 Lake Rd"},
        )
        self.assertEqual(created.status_code, 200)
        self.assertEqual(created.json()["house"]["owner_id"], user["id"])

    def test_wrong_password_returns_404(self) -> None:
        self.sign_up()
        response = self.client.post(
            self.url("/sign-in"),
            json={"email": "jane@example.com", "password": "wrong"},
        )
        self.assertEqual(response.status_code, 404)
        body = response.json()
        self.assertTrue(body["error"])
        self.assertIsNone(body["user"])

    def test_unknown_email_returns_404(self) -> None:
        response = self.client.post(
            self.url("/sign-in"),
            json={"email": "nobody@example.com", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 404)

    def test_non_object_body_returns_400(self) -> None:
        response = self.client.post(self.url("/sign-in"), json=["jane@example.com"])
        self.assertEqual(response.status_code, 400)

    def test_mixed_case_domain_signs_in_with_the_address_used_at_sign_up(self) -> None:
        user = self.sign_up(email="Jane@Example.COM")
        self.assertEqual(user["email"], "Jane@example.com")
        for email in ("Jane@Example.COM", "Jane@example.com"):
            response = self.client.post(
                self.url("/sign-in"),
                json={"email": email, "password": "secret1"},
            )
            self.assertEqual(response.status_code, 200, email)

    def test_unparseable_email_matches_nobody(self) -> None:
        self.sign_up()
        response = self.client.post(
            self.url("/sign-in"),
            json={"email": "not-an-address", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 404)


class TestPasswordWorkOffEventLoop(ApiTestCase):
    """bcrypt runs in a worker thread so slow hashing does not stall other requests."""

    def setUp(self) -> None:
        super().setUp()
        self.calls: list[tuple[str, bool]] = []

    def _record_hashpw(self, *args):
        self.calls.append(("hashpw", _on_event_loop()))
        return _hashpw(*args)

    def _record_checkpw(self, *args):
        self.calls.append(("checkpw", _on_event_loop()))
        return _checkpw(*args)

    def test_sign_up_and_sign_in_hash_outside_the_loop(self) -> None:
        with patch("houser.core.security.bcrypt.hashpw", side_effect=self._record_hashpw), \
                patch("houser.core.security.bcrypt.checkpw", side_effect=self._record_checkpw):
            self.sign_up()
            response = self.client.post(
                self.url("/sign-in"),
                json={"email": "jane@example.com", "password": "secret1"},
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.calls, [("hashpw", False), ("checkpw", False)])

    def test_user_create_and_update_hash_outside_the_loop(self) -> None:
        user = self.sign_up()
        headers = self.auth(self.token_for(user["id"]))
        with patch("houser.core.security.bcrypt.hashpw", side_effect=self._record_hashpw):
            created = self.client.post(
                self.url("/user"),
                headers=headers,
                json={"name": "Bob", "email": "bob@example.com", "password": "secret2"},
            )
            updated = self.client.put(
                self.url("/user"),
                headers=headers,
                json={"id": user["id"], "name": "Jane", "email": "jane@example.com", "password": "secret3"},
            )
        self.assertEqual(created.status_code, 200, created.text)
        self.assertEqual(updated.status_code, 201, updated.text)
        self.assertEqual(self.calls, [("hashpw", False), ("hashpw", False)])


class TestLegacyPlaintextPasswords(ApiTestCase):
    settings_overrides = {"LEGACY_PLAINTEXT_PASSWORDS": True}

    def test_password_stored_as_given_and_sign_in_works(self) -> None:
        user = self.sign_up(password="plain1")
        with self.session_factory() as db:
            stored = db.query(User).filter(User.email == user["email"]).one()
        self.assertEqual(stored.password, "plain1")
        response = self.client.post(
            self.url("/sign-in"),
            json={"email": "jane@example.com", "password": "plain1"},
        )
        self.assertEqual(response.status_code, 200)


class TestRootAndHealth(ApiTestCase):
    def test_root(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "App running")

    def test_health_reports_connected_store(self) -> None:
        response = self.client.get(self.url("/health/"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"status": "ok", "environment": "dev", "database": "connected"},
        )


class TestRoutingErrors(ApiTestCase):
    """Errors raised by the router itself use the same envelope as handler errors."""

    def test_unknown_path_returns_404_envelope(self) -> None:
        response = self.client.get("/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": True, "msg": "Not Found"})

    def test_wrong_method_returns_405_envelope(self) -> None:
        response = self.client.delete(self.url("/users"))
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.json(), {"error": True, "msg": "Method Not Allowed"})
        self.assertIn("GET", response.headers["allow"])


if __name__ == "__main__":
    unittest.main()
