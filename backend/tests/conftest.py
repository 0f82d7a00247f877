import importlib
import os

import pytest
from fastapi.testclient import TestClient

# cheapest cost passlib accepts, keeps account tests fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")

NOTES = "/private-student-notes/v1"
PASSWORD = "StrongPassw0rd!"


@pytest.fixture()
def make_client(tmp_path, monkeypatch):
    def _make(enrollment: bool = False) -> TestClient:
        # isolate data dir per test
        monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
        monkeypatch.delenv("REQUEST_TOKEN_SECRET", raising=False)
        monkeypatch.delenv("NOTE_MAX_LENGTH", raising=False)
        if enrollment:
            monkeypatch.setenv("ENROLLMENT_FILE", str(tmp_path / "enrollment.json"))
        else:
            monkeypatch.delenv("ENROLLMENT_FILE", raising=False)

        # reload so the module-level stores pick up the new env vars
        import private_notes.api.deps
        import private_notes.main
        importlib.reload(private_notes.api.deps)
        importlib.reload(private_notes.main)

        return TestClient(private_notes.main.app)

    return _make


@pytest.fixture()
def client(make_client):
    return make_client()


def login_headers(client: TestClient, user_id: str = "userA") -> dict:
    """Register, log in and fetch a request token the way the editor page does."""
    client.post("/auth/register", json={"user_id": user_id, "password": PASSWORD})
    r = client.post("/auth/login", json={"user_id": user_id, "password": PASSWORD})
    assert r.status_code == 200
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

    r = client.get(f"{NOTES}/bootstrap", headers=headers)
    assert r.status_code == 200
    headers["X-Request-Token"] = r.json()["token"]
    return headers
