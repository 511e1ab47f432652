"""
Shared fixtures. DATABASE_URL points at a temporary SQLite file before taskboard is imported;
the schema is recreated for every test. Users are created directly in the store and authenticate
with Bearer tokens (the cookie flow is covered in test_auth_api.py).
"""
import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="taskboard-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_DEMO_USERS"] = "false"
os.environ["ALLOW_DEMO_PASSWORDS"] = "true"
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from taskboard.database import Base, SessionLocal, engine, create_tables
from taskboard.main import app
from taskboard.models.types import ADMIN, STUDENT, TEACHER
from taskboard.services.auth import create_access_token, hash_password
from taskboard.services.store import Store

PASSWORD = "testpass123"


@pytest.fixture(autouse=True)
def fresh_schema():
    create_tables()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return Store(db)


@pytest.fixture
def make_user(store):
    """Create a user and return it detached (attributes loaded, no further DB access)."""
    def _make(role: str, name: str | None = None, email: str | None = None):
        n = len(store.users.find_all()) + 1
        user = store.users.create(
            email=email or f"{role}{n}@tests.example.com",
            password_hash=hash_password(PASSWORD),
            name=name or f"{role.title()} {n}",
            role=role,
        )
        store.db.expunge(user)
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user(ADMIN, name="Admin")


@pytest.fixture
def teacher(make_user):
    return make_user(TEACHER, name="Teacher One")


@pytest.fixture
def other_teacher(make_user):
    return make_user(TEACHER, name="Teacher Two")


@pytest.fixture
def student(make_user):
    return make_user(STUDENT, name="Student One")


@pytest.fixture
def other_student(make_user):
    return make_user(STUDENT, name="Student Two")


def auth_headers(user) -> dict:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
