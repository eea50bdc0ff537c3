"""Tests for the auth endpoints"""
from flask.testing import FlaskClient

BASE = "/api/v1/auth"


def _login(client: FlaskClient, **body):
    body.setdefault("password", "secret1")
    return client.post(f"{BASE}/login", json=body)


def _cookies(response) -> list:
    return response.headers.getlist("Set-Cookie")


def _cookie(response, name: str) -> str:
    return next(c for c in _cookies(response) if c.startswith(f"{name}="))


def test_register(client: FlaskClient):
    response = client.post(f"{BASE}/register", json={
        "fullName": "Bob Builder",
        "email": "Bob@Example.com",
        "username": "Bob",
        "password": "hunter22",
        "avatar": "https://cdn.example.com/bob.png",
    })
    assert response.status_code == 201

    body = response.get_json()
    assert body["success"] is True
    assert body["statusCode"] == 201
    user = body["data"]
    assert user["username"] == "bob"
    assert user["email"] == "bob@example.com"
    assert user["fullName"] == "Bob Builder"
    assert user["avatar"] == "https://cdn.example.com/bob.png"
    for secret in ("password", "passwordHash", "password_hash", "refreshToken", "refresh_token"):
        assert secret not in user


def test_register_missing_fields(client: FlaskClient):
    response = client.post(f"{BASE}/register", json={"email": "x@example.com", "username": " ", "password": "p"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "All fields are required"
    assert body["errors"] == []


def test_register_duplicate(client: FlaskClient, alice):
    response = client.post(f"{BASE}/register", json={
        "fullName": "Other Alice",
        "email": "other@example.com",
        "username": "ALICE",
        "password": "whatever1",
    })
    assert response.status_code == 409
    assert response.get_json()["success"] is False


def test_register_duplicate_racing_past_existence_check(client: FlaskClient, auth, alice, monkeypatch):
    # another request inserted the same user between exists() and the insert
    monkeypatch.setattr(auth.repository, "exists", lambda **kwargs: False)

    response = client.post(f"{BASE}/register", json={
        "fullName": "Alice Again",
        "email": "alice@example.com",
        "username": "alice",
        "password": "whatever1",
    })
    assert response.status_code == 409
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "User with email or username already exists"

    assert _login(client, username="alice").status_code == 200


def test_login_sets_cookies_and_hides_secrets(client: FlaskClient, alice, stored_token):
    response = _login(client, username="alice")
    assert response.status_code == 200

    body = response.get_json()
    assert body["success"] is True
    assert body["message"] == "User logged in successfully"
    data = body["data"]
    assert data["user"]["id"] == alice.id
    assert "refreshToken" not in data["user"]
    assert "password" not in data["user"]
    assert stored_token(alice.id) == data["refreshToken"]

    for name, value in (("accessToken", data["accessToken"]), ("refreshToken", data["refreshToken"])):
        cookie = _cookie(response, name)
        assert cookie.startswith(f"{name}={value}")
        assert "HttpOnly" in cookie
        assert "Secure" in cookie


def test_login_with_email(client: FlaskClient, alice):
    response = _login(client, email="alice@example.com")
    assert response.status_code == 200


def test_login_wrong_password(client: FlaskClient, alice, stored_token):
    response = _login(client, username="alice", password="nope")
    assert response.status_code == 401
    body = response.get_json()
    assert body == {
        "statusCode": 401,
        "data": None,
        "message": "Invalid user credentials",
        "success": False,
        "errors": [],
    }
    assert _cookies(response) == []
    assert stored_token(alice.id) is None


def test_login_unknown_user(client: FlaskClient, alice):
    response = _login(client, username="mallory")
    assert response.status_code == 404


def test_login_missing_password(client: FlaskClient, alice):
    response = client.post(f"{BASE}/login", json={"username": "alice"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Password is required"


def test_login_missing_identifier(client: FlaskClient):
    response = client.post(f"{BASE}/login", json={"password": "secret1"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Username or email is required"


def test_login_rejects_non_string_fields(client: FlaskClient):
    response = client.post(f"{BASE}/login", json={"username": ["alice"], "password": "secret1"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Invalid input"
    assert "username" in body["errors"][0]


def test_refresh_with_body_token(client: FlaskClient, alice, stored_token):
    r0 = _login(client, username="alice").get_json()["data"]["refreshToken"]

    response = client.post(f"{BASE}/refresh", json={"refreshToken": r0})
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert set(data) == {"accessToken", "refreshToken"}
    assert data["refreshToken"] != r0
    assert stored_token(alice.id) == data["refreshToken"]
    assert _cookie(response, "refreshToken").startswith(f"refreshToken={data['refreshToken']}")


def test_refresh_with_cookie(client: FlaskClient, alice):
    r0 = _login(client, username="alice").get_json()["data"]["refreshToken"]

    response = client.post(f"{BASE}/refresh", headers={"Cookie": f"refreshToken={r0}"})
    assert response.status_code == 200


def test_refresh_replay_is_rejected(client: FlaskClient, alice):
    r0 = _login(client, username="alice").get_json()["data"]["refreshToken"]
    r1 = client.post(f"{BASE}/refresh", json={"refreshToken": r0}).get_json()["data"]["refreshToken"]

    replay = client.post(f"{BASE}/refresh", json={"refreshToken": r0})
    assert replay.status_code == 401
    assert replay.get_json()["success"] is False

    assert client.post(f"{BASE}/refresh", json={"refreshToken": r1}).status_code == 200


def test_refresh_without_token(client: FlaskClient):
    response = client.post(f"{BASE}/refresh", json={})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Unauthorized request"


def test_refresh_with_non_string_token(client: FlaskClient, alice):
    for value in (123, ["a"], {"token": "x"}):
        response = client.post(f"{BASE}/refresh", json={"refreshToken": value})
        assert response.status_code == 401
        body = response.get_json()
        assert body["success"] is False
        assert body["message"] == "Unauthorized request"


def test_logout_clears_session_and_cookies(client: FlaskClient, alice, stored_token):
    data = _login(client, username="alice").get_json()["data"]

    response = client.post(f"{BASE}/logout", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert response.status_code == 200
    assert response.get_json()["success"] is True
    assert stored_token(alice.id) is None
    for name in ("accessToken", "refreshToken"):
        assert "Max-Age=0" in _cookie(response, name)

    after = client.post(f"{BASE}/refresh", json={"refreshToken": data["refreshToken"]})
    assert after.status_code == 401


def test_logout_with_access_cookie(client: FlaskClient, alice, stored_token):
    data = _login(client, username="alice").get_json()["data"]

    response = client.post(f"{BASE}/logout", headers={"Cookie": f"accessToken={data['accessToken']}"})
    assert response.status_code == 200
    assert stored_token(alice.id) is None


def test_logout_requires_access_token(client: FlaskClient, alice):
    assert client.post(f"{BASE}/logout").status_code == 401


def test_logout_rejects_refresh_token_as_access_token(client: FlaskClient, alice):
    data = _login(client, username="alice").get_json()["data"]

    response = client.post(f"{BASE}/logout", headers={"Authorization": f"Bearer {data['refreshToken']}"})
    assert response.status_code == 401


def test_me(client: FlaskClient, alice):
    data = _login(client, username="alice").get_json()["data"]

    response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert response.status_code == 200
    user = response.get_json()["data"]
    assert user["username"] == "alice"
    assert "refreshToken" not in user


def test_alice_scenario_over_http(client: FlaskClient, alice, stored_token):
    login = _login(client, username="alice")
    assert login.status_code == 200
    r0 = login.get_json()["data"]["refreshToken"]
    assert stored_token(alice.id) == r0

    refreshed = client.post(f"{BASE}/refresh", json={"refreshToken": r0})
    assert refreshed.status_code == 200
    tokens = refreshed.get_json()["data"]
    r1 = tokens["refreshToken"]
    assert stored_token(alice.id) == r1
    assert client.post(f"{BASE}/refresh", json={"refreshToken": r0}).status_code == 401

    logout = client.post(f"{BASE}/logout", headers={"Authorization": f"Bearer {tokens['accessToken']}"})
    assert logout.status_code == 200
    assert stored_token(alice.id) is None
    assert client.post(f"{BASE}/refresh", json={"refreshToken": r1}).status_code == 401
