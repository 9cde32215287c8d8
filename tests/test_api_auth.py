import asyncio
from datetime import timedelta

import pytest

from conftest import FakeAuthProvider, FakeProfileStore, bearer, make_profile
from helpdesk.core.errors import AuthError, NotFoundError
from helpdesk.services.auth import create_access_token, decode_token
from helpdesk.services.context import resolve_auth_context


def test_access_token_round_trips_subject_and_session() -> None:
    token = create_access_token("user-1", "session-1", timedelta(minutes=5))
    payload = decode_token(token)
    assert payload["sub"] == "user-1"
    assert payload["sid"] == "session-1"


def test_expired_or_garbage_token_is_rejected() -> None:
    expired = create_access_token("user-1", "session-1", timedelta(minutes=-5))
    with pytest.raises(AuthError):
        decode_token(expired)
    with pytest.raises(AuthError):
        decode_token("not-a-token")


def test_resolve_context_requires_session_and_profile() -> None:
    auth = FakeAuthProvider()
    token = auth.add_account("agent-1", "agent-1@helpdesk.example.com")
    orphan = auth.add_account("ghost", "ghost@helpdesk.example.com")
    profiles = FakeProfileStore(make_profile("agent-1", "agent"))

    with pytest.raises(AuthError):
        asyncio.run(resolve_auth_context(auth, profiles, None))
    with pytest.raises(NotFoundError):
        asyncio.run(resolve_auth_context(auth, profiles, orphan))

    context = asyncio.run(resolve_auth_context(auth, profiles, token))
    assert context.user_id == "agent-1"
    assert context.role == "agent"
    assert not context.is_admin


def test_login_returns_token_and_role(client) -> None:
    response = client.post(
        "/auth/login",
        json={"email": "admin-1@helpdesk.example.com", "password": "secret"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "admin"
    assert body["token_type"] == "bearer"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["id"] == "admin-1"


def test_login_with_wrong_password_is_unauthorized(client) -> None:
    response = client.post(
        "/auth/login",
        json={"email": "admin-1@helpdesk.example.com", "password": "nope"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid login credentials"}


def test_login_without_profile_signs_back_out(client, auth_provider) -> None:
    response = client.post(
        "/auth/login",
        json={"email": "ghost@helpdesk.example.com", "password": "secret"},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Profile not found. Please contact administrator."}
    assert len(auth_provider.signed_out) == 1


def test_logout_revokes_session(client, auth_provider) -> None:
    response = client.post("/auth/logout", headers=bearer("agent-1"))

    assert response.status_code == 200
    assert auth_provider.signed_out == ["token-agent-1"]
    assert client.get("/tickets", headers=bearer("agent-1")).status_code == 401


def test_roster_is_admin_only(client) -> None:
    admin = client.get("/profiles", headers=bearer("admin-1"))
    agent = client.get("/profiles", headers=bearer("agent-1"))

    assert admin.status_code == 200
    assert {profile["id"] for profile in admin.json()["profiles"]} == {"admin-1", "agent-1", "agent-2"}
    assert agent.status_code == 403
