"""
Tests for Google sign-in and the current-user endpoint.
"""
from urllib.parse import parse_qs, urlparse

from aiface.core import config
from aiface.core.security import create_access_token, decode_access_token
from aiface.db.models.user import User
from aiface.services import google_auth_service


GOOGLE_PROFILE = {
    "sub": "google-789",
    "email": "new@example.com",
    "name": "New User",
    "picture": "https://example.com/avatar.png",
}


def test_me(client, test_user, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == test_user.id
    assert data["email"] == "test@example.com"
    assert data["profilePicture"] is None


def test_me_no_token(client, db):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "No token provided"


def test_me_token_without_subject(client, db):
    headers = {"Authorization": f"Bearer {create_access_token({'email': 'x@example.com'})}"}
    response = client.get("/auth/me", headers=headers)
    assert response.status_code == 401


def test_me_deleted_user(client, db):
    headers = {"Authorization": f"Bearer {create_access_token({'sub': '999'})}"}
    response = client.get("/auth/me", headers=headers)
    assert response.status_code == 404


def test_google_login_redirect(client, db, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_CLIENT_ID", "client-abc")

    response = client.get("/auth/google", follow_redirects=False)

    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert location.netloc == "accounts.google.com"
    query = parse_qs(location.query)
    assert query["client_id"] == ["client-abc"]
    assert query["response_type"] == ["code"]
    assert "email" in query["scope"][0]


def test_google_callback_creates_user(client, db, monkeypatch):
    """Test a first sign-in provisions the user and returns a token."""
    monkeypatch.setattr(google_auth_service, "exchange_code_for_profile", lambda code: GOOGLE_PROFILE)

    response = client.get("/auth/google/callback?code=abc", follow_redirects=False)

    assert response.status_code == 307
    location = response.headers["location"]
    assert location.startswith(f"{config.CLIENT_URL}/#/auth-success?token=")

    db.expire_all()
    user = db.query(User).filter(User.google_id == "google-789").one()
    assert user.email == "new@example.com"
    assert user.profile_picture == "https://example.com/avatar.png"

    payload = decode_access_token(location.split("token=", 1)[1])
    assert payload["sub"] == str(user.id)


def test_google_callback_existing_user(client, test_user, monkeypatch):
    profile = {"sub": test_user.google_id, "email": test_user.email, "name": "Renamed"}
    monkeypatch.setattr(google_auth_service, "exchange_code_for_profile", lambda code: profile)

    response = client.get("/auth/google/callback?code=abc", follow_redirects=False)

    payload = decode_access_token(response.headers["location"].split("token=", 1)[1])
    assert payload["sub"] == str(test_user.id)


def test_google_callback_exchange_failure(client, db, monkeypatch):
    """Test a failed code exchange sends the browser back to login."""
    def fail(code):
        raise RuntimeError("invalid_grant")

    monkeypatch.setattr(google_auth_service, "exchange_code_for_profile", fail)

    response = client.get("/auth/google/callback?code=bad", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == f"{config.CLIENT_URL}/#/login"
    assert db.query(User).count() == 0


def test_google_callback_profile_without_email(client, db, monkeypatch):
    monkeypatch.setattr(google_auth_service, "exchange_code_for_profile", lambda code: {"sub": "x"})

    response = client.get("/auth/google/callback?code=abc", follow_redirects=False)
    assert response.headers["location"] == f"{config.CLIENT_URL}/#/login"


def test_google_callback_without_code(client, db):
    response = client.get("/auth/google/callback", follow_redirects=False)
    assert response.headers["location"] == f"{config.CLIENT_URL}/#/login"
