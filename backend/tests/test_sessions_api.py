"""
Integration tests for session endpoints: login, remember-token restore, logout.
"""

import pytest


@pytest.fixture
def user(client):
    response = client.post(
        "/users",
        json={"name": "Login User", "email": "login@example.com", "password": "foobar"},
    )
    return response.json()


def login(client, email="login@example.com", password="foobar", remember_me=False):
    return client.post(
        "/sessions",
        json={"email": email, "password": password, "remember_me": remember_me},
    )


class TestLogin:
    """Test POST /sessions."""

    def test_login_without_remember(self, client, user):
        response = login(client)
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == user["id"]
        assert data["remember_token"] is None

    def test_login_email_case_insensitive(self, client, user):
        assert login(client, email="LOGIN@Example.com").status_code == 200

    def test_login_wrong_password(self, client, user):
        assert login(client, password="wrong!").status_code == 401

    def test_login_unknown_email(self, client):
        assert login(client, email="ghost@example.com").status_code == 401


class TestRememberedSession:
    """Test remember-token restore and logout."""

    def test_remember_and_restore(self, client, user):
        token = login(client, remember_me=True).json()["remember_token"]
        assert token

        response = client.post("/sessions/restore", json={"user_id": user["id"], "remember_token": token})
        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_restore_with_wrong_token(self, client, user):
        login(client, remember_me=True)
        response = client.post("/sessions/restore", json={"user_id": user["id"], "remember_token": "wrong"})
        assert response.status_code == 401

    def test_restore_without_remembering(self, client, user):
        login(client)
        response = client.post("/sessions/restore", json={"user_id": user["id"], "remember_token": "anything"})
        assert response.status_code == 401

    def test_restore_unknown_user(self, client):
        response = client.post("/sessions/restore", json={"user_id": 99999, "remember_token": "x"})
        assert response.status_code == 401

    def test_logout_forgets_token(self, client, user):
        token = login(client, remember_me=True).json()["remember_token"]
        assert client.delete(f"/sessions/{user['id']}").status_code == 204

        response = client.post("/sessions/restore", json={"user_id": user["id"], "remember_token": token})
        assert response.status_code == 401

    def test_login_without_remember_forgets_previous_token(self, client, user):
        token = login(client, remember_me=True).json()["remember_token"]
        login(client)
        response = client.post("/sessions/restore", json={"user_id": user["id"], "remember_token": token})
        assert response.status_code == 401

    def test_logout_unknown_user(self, client):
        assert client.delete("/sessions/99999").status_code == 404
