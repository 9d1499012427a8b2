# tests/test_auth.py

"""
Tests for sign-in, sessions and the guard chain.
"""

import time

from conftest import PASSWORD, results
from ledger_admin.database.models.user import User


def test_login_returns_token_and_hides_secrets(client, make_user):
    user = make_user("worker", email="Worker@Example.com")
    response = client.post("/users/login", json={"email": "worker@example.com", "password": PASSWORD})
    assert response.status_code == 200
    body = results(response)
    assert body["token_type"] == "Bearer"
    assert body["user"]["id"] == user.id
    assert "password_hash" not in body["user"]
    assert "sessions" not in body["user"]
    assert body["user"]["assignedCenters"] == []


def test_login_rejects_bad_credentials(client, make_user):
    user = make_user()
    response = client.post("/users/login", json={"email": user.email, "password": "wrong"})
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "invalid_credentials"


def test_login_requires_both_fields(client):
    response = client.post("/users/login", json={"email": "someone@example.com"})
    assert response.status_code == 400
    assert "password" in response.get_json()["error"]["details"]


def test_missing_token_is_401(client):
    response = client.get("/users/me")
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "missing_token"


def test_logout_revokes_only_the_presented_token(client, make_user, login):
    user = make_user()
    first = login(user)
    second = login(user)

    assert client.post("/users/logout", headers=first).status_code == 200
    assert client.get("/users/me", headers=first).status_code == 401
    assert client.get("/users/me", headers=second).status_code == 200


def test_logout_all_revokes_every_session(client, make_user, login):
    user = make_user()
    first = login(user)
    second = login(user)
    assert client.post("/users/logout/all", headers=first).status_code == 200
    assert client.get("/users/me", headers=second).status_code == 401


def test_login_prunes_expired_sessions(client, make_user, login, store):
    user = make_user()
    user.add_session(store, "stale-jti", time.time() - 60)
    for _ in range(3):
        login(user)

    stored = User.find_by_id(store, user.id)
    assert len(stored.sessions) == 3
    assert all(s["exp"] > time.time() for s in stored.sessions)
    assert not stored.has_session("stale-jti")


def test_expired_session_is_not_live(make_user, store):
    user = make_user()
    user.add_session(store, "old", time.time() - 1)
    assert not user.has_session("old")

    user.add_session(store, "current", time.time() + 3600)
    assert [s["jti"] for s in user.sessions] == ["current"]
    assert user.has_session("current")


def test_me_permissions_reports_effective_matrix(client, make_user, login):
    user = make_user("worker", permissions={"transactions": {"edit": True}}, assigned_centers=["A"])
    body = results(client.get("/users/me/permissions", headers=login(user)))
    assert body["role"] == "worker"
    assert body["permissions"]["transactions"]["edit"] is True
    assert body["permissions"]["transactions"]["delete"] is False
    assert "transactions:edit" in body["granted"]
    assert body["assignedCenters"] == ["A"]


def test_profile_update_cannot_touch_role_or_scope(client, make_user, login):
    user = make_user("viewer")
    headers = login(user)
    response = client.patch("/users/me", headers=headers, json={
        "firstName": "Renamed", "role": "super_admin", "assignedCenters": ["X"],
    })
    assert response.status_code == 200
    body = results(response)
    assert body["firstName"] == "Renamed"
    assert body["role"] == "viewer"
    assert body["assignedCenters"] == []


def test_password_change_requires_old_password(client, make_user, login):
    user = make_user()
    headers = login(user)
    assert client.patch("/users/me", headers=headers, json={"password": "new-pass"}).status_code == 400
    wrong = client.patch("/users/me", headers=headers, json={"password": "new-pass", "oldPassword": "nope"})
    assert wrong.status_code == 401
    ok = client.patch("/users/me", headers=headers, json={"password": "new-pass", "oldPassword": PASSWORD})
    assert ok.status_code == 200
    assert client.post("/users/login", json={"email": user.email, "password": "new-pass"}).status_code == 200


def test_denial_echoes_required_permission_and_scope(client, make_user, login):
    viewer = make_user("viewer", assigned_centers=["A"])
    response = client.post("/client", headers=login(viewer), json={"firstName": "A", "lastName": "B", "email": "a@b.c"})
    assert response.status_code == 403
    error = response.get_json()["error"]
    assert error["code"] == "forbidden"
    assert error["details"]["requiredPermission"] == "clients:create"
    assert error["details"]["userRole"] == "viewer"
    assert error["details"]["assignedCenters"] == ["A"]


def test_health_is_public(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert results(response)["store"] == "connected"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_permission_catalogue(client, make_user, login):
    body = results(client.get("/permissions", headers=login(make_user())))
    assert "super_admin" in body["roles"]
    assert body["modules"]["reports"] == ["view", "export"]
