from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import Database
from app.main import create_app, init_database
from app.models.user import HRUser
from app.services.auth import AuthService

from conftest import HR_EMAIL, HR_PASSWORD

LOGIN = "/api/v1/auth/login"


def test_login_returns_token_pair(client, hr_user):
    resp = client.post(LOGIN, json={"email": HR_EMAIL.upper(), "password": HR_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["data"]["accessToken"]
    assert body["data"]["refreshToken"]
    assert body["data"]["user"]["email"] == HR_EMAIL
    assert "password_hash" not in body["data"]["user"]


def test_login_wrong_password(client, hr_user):
    resp = client.post(LOGIN, json={"email": HR_EMAIL, "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid credentials"


def test_login_unknown_user(client):
    resp = client.post(LOGIN, json={"email": "ghost@acme-corp.com", "password": "whatever"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid credentials"


def test_refresh(client, hr_user):
    tokens = client.post(LOGIN, json={"email": HR_EMAIL, "password": HR_PASSWORD}).json()["data"]

    resp = client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Token refreshed successfully"

    # An access token is not accepted as a refresh token
    bad = client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["accessToken"]})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid or expired refresh token"


def test_refresh_token_is_not_an_access_token(client, hr_user):
    tokens = client.post(LOGIN, json={"email": HR_EMAIL, "password": HR_PASSWORD}).json()["data"]
    resp = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})
    assert resp.status_code == 401


def test_me(client, auth_headers):
    resp = client.get("/api/v1/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == HR_EMAIL


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "OK"
    assert data["database"] == "connected"


def test_unknown_route(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    body = resp.json()
    assert body["message"] == "Route /api/v1/nope not found"
    assert body["error"]["code"] == "NOT_FOUND"


def test_default_admin_seeded_once(monkeypatch):
    monkeypatch.setattr(settings, "SEED_DEFAULT_ADMIN", True)
    db = Database("sqlite://")
    init_database(db)
    init_database(db)

    session = db.session()
    try:
        assert session.query(HRUser).count() == 1
        assert AuthService(session).login("admin@hrmanagement.com", "password123")["user"].name == "System Administrator"
    finally:
        session.close()
        db.dispose()


def test_unexpected_errors_become_json(database, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "SEED_DEFAULT_ADMIN", False)
    app = create_app(database=database)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert body["message"] == "kaboom"

    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/boom")
    assert resp.json()["message"] == "An unexpected error occurred"
