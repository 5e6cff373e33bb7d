"""Shared helpers for tests that touch the database."""

import unittest
from datetime import timedelta

from fastapi.testclient import TestClient

from docvault.core.context import CallerIdentity
from docvault.core.database import SessionLocal
from docvault.core.security import TokenCodec, hash_password
from docvault.main import app
from docvault.models import Document, Role, SessionToken, User

TEST_SECRET = "test-secret-for-docvault-suite-0123456789"

# Low bcrypt cost keeps the suite fast; verification works for any cost.
TEST_BCRYPT_ROUNDS = 4


def reset_database() -> None:
    with SessionLocal() as db:
        for model in (SessionToken, Document, User):
            db.query(model).delete()
        db.commit()


def create_principal(
    username: str,
    password: str = "pass",
    role: Role = Role.ADMIN,
    *,
    active: bool = True,
    locked: bool = False,
) -> int:
    with SessionLocal() as db:
        user = User(
            username=username,
            password_hash=hash_password(password, rounds=TEST_BCRYPT_ROUNDS),
            role=role.value,
            names=username.title(),
            id_card=f"card-{username.lower()}",
            active=active,
            locked=locked,
        )
        db.add(user)
        db.commit()
        return user.id


def caller_for(user_id: int, username: str, role: Role) -> CallerIdentity:
    return CallerIdentity(caller_id=user_id, username=username, role=role)


def make_codec(ttl_hours: int = 10) -> TokenCodec:
    return TokenCodec(TEST_SECRET, ttl=timedelta(hours=ttl_hours))


class ApiTestCase(unittest.TestCase):
    """Runs requests through the full application against a clean database with an admin."""

    def setUp(self) -> None:
        reset_database()
        self.client = TestClient(app)
        self.admin_id = create_principal("admin", "pass", Role.ADMIN)

    def login(self, username: str = "admin", password: str = "pass") -> str:
        response = self.client.post(
            "/api/v1/auth/authenticate", json={"username": username, "password": password}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["jwt"]

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def assertProblem(self, response, status: int, title: str | None = None) -> dict:
        self.assertEqual(response.status_code, status, response.text)
        self.assertTrue(response.headers["content-type"].startswith("application/problem+json"))
        body = response.json()
        self.assertEqual(body["status"], status)
        self.assertEqual(body["instance"], response.request.url.path)
        self.assertEqual(body["hostname"], "test-host")
        if title is not None:
            self.assertEqual(body["title"], title)
        return body
