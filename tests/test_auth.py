# File: tests/test_auth.py

from conftest import sign_in

from community_action.main import app
from community_action.services.auth_service import SIGNED_IN, SIGNED_OUT


def test_login_issues_token_and_session(client):
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@neighbours.org", "full_name": "Alice"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "alice@neighbours.org"
    assert data["user"]["metadata"]["full_name"] == "Alice"

    session = client.get("/api/v1/auth/session").json()
    assert session["id"] == data["user"]["id"]


def test_bearer_token_is_accepted(client):
    token = client.post("/api/v1/auth/login", json={"email": "bob@neighbours.org"}).json()["access_token"]
    client.cookies.clear()

    resp = client.get("/api/v1/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert resp.json()["email"] == "bob@neighbours.org"


def test_same_email_maps_to_same_user(client):
    first = sign_in(client, "carol@neighbours.org")
    second = sign_in(client, "carol@neighbours.org", "Carol")
    assert first["id"] == second["id"]


def test_unknown_provider_rejected(client):
    resp = client.post("/api/v1/auth/login", json={"provider": "myspace", "email": "dan@neighbours.org"})
    assert resp.status_code == 400
    assert "unknown sign-in provider" in resp.json()["detail"].lower()


def test_logout_clears_session(client):
    sign_in(client, "erin@neighbours.org")
    assert client.post("/api/v1/auth/logout").status_code == 204
    client.cookies.clear()
    assert client.get("/api/v1/auth/session").json() is None


def test_tampered_token_is_anonymous(client):
    resp = client.get("/api/v1/auth/session", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 200
    assert resp.json() is None


def test_session_listeners_are_notified(client):
    events = []
    unsubscribe = app.state.auth.subscribe(lambda event, user: events.append((event, user and user.email)))
    try:
        sign_in(client, "frank@neighbours.org")
        client.post("/api/v1/auth/logout")
    finally:
        unsubscribe()

    assert events == [(SIGNED_IN, "frank@neighbours.org"), (SIGNED_OUT, "frank@neighbours.org")]


def test_sign_in_page_redirects_back(client):
    resp = client.get("/auth?redirect=/new-project")
    assert resp.status_code == 200
    assert 'value="/new-project"' in resp.text

    resp = client.post(
        "/auth/sign-in",
        data={"email": "gail@neighbours.org", "redirect": "/new-project"},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/new-project"

    # already signed in: /auth forwards straight to the target
    resp = client.get("/auth?redirect=/about", follow_redirects=False)
    assert resp.headers["location"] == "/about"


def test_sign_in_ignores_external_redirects(client):
    resp = client.post(
        "/auth/sign-in",
        data={"email": "hank@neighbours.org", "redirect": "//evil.example/steal"},
        follow_redirects=False,
    )
    assert resp.headers["location"] == "/projects"


def test_sign_in_page_rejects_bad_email(client):
    resp = client.post("/auth/sign-in", data={"email": "not-an-email"})
    assert resp.status_code == 400
    assert "notice-error" in resp.text
