"""Test setup: a throwaway SQLite database and export directory per run."""

import os
import tempfile
import uuid

import pytest

_TMP = tempfile.mkdtemp(prefix="designcrafter-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["EXPORT_DIR"] = os.path.join(_TMP, "exports")


@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    """Register a fresh user and return its bearer header."""
    username = f"user_{uuid.uuid4().hex[:8]}"
    r = client.post("/api/register", json={"username": username, "password": "secret123"})
    assert r.status_code == 201, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}
