from __future__ import annotations


def _login(client, email="alice@example.com", password="Secret123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_and_profile(client):
    resp = _login(client)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["token"]
    assert data["expiration"].endswith("Z")
    assert data["user"]["email"] == "alice@example.com"


def test_login_with_bad_password_is_401(client):
    resp = _login(client, password="wrong")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid email or password"


def test_bearer_token_authenticates_requests(client):
    token = _login(client).get_json()["data"]["token"]
    fresh = client.application.test_client()

    resp = fresh.get("/api/user/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {
        "id": 1,
        "email": "alice@example.com",
        "fullName": "Alice Employee",
        "employeeCode": "EMP001",
        "role": "employee",
        "isActive": True,
    }


def test_session_cookie_authenticates_until_logout(client):
    _login(client)

    assert client.get("/api/user/profile").status_code == 200
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/user/profile").status_code == 401


def test_tampered_token_is_rejected(client):
    resp = client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-real-token"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid token"


def test_verify_and_refresh(client, auth_headers):
    verify = client.get("/api/auth/verify", headers=auth_headers(1))
    assert verify.status_code == 200
    assert verify.get_json()["data"]["userId"] == 1

    token = auth_headers(1)["Authorization"].split(" ", 1)[1]
    refreshed = client.post("/api/auth/refresh", json={"token": token})
    assert refreshed.status_code == 200
    assert refreshed.get_json()["data"]["user"]["id"] == 1


def test_register_returns_201(client):
    resp = client.post(
        "/api/auth/register",
        json={
            "fullName": "Dana New",
            "email": "dana@example.com",
            "password": "Passw0rd",
            "confirmPassword": "Passw0rd",
        },
    )

    assert resp.status_code == 201
    assert resp.get_json()["data"]["user"]["role"] == "employee"


def test_register_validation_error_is_400(client):
    resp = client.post("/api/auth/register", json={"fullName": "", "email": "x", "password": "a", "confirmPassword": "a"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_user_listing_requires_admin(client, auth_headers):
    assert client.get("/api/user", headers=auth_headers(1)).status_code == 403

    resp = client.get("/api/user?pageSize=2&page=2", headers=auth_headers(9))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["totalCount"] == 3
    assert body["hasPreviousPage"] is True
    assert [u["fullName"] for u in body["data"]] == ["Bob Employee"]


def test_update_profile_and_change_password(client, auth_headers):
    resp = client.put("/api/user/profile", json={"fullName": "Alice Renamed", "email": "alice@example.com"}, headers=auth_headers())
    assert resp.status_code == 200
    assert resp.get_json()["data"]["fullName"] == "Alice Renamed"

    resp = client.post(
        "/api/user/change-password",
        json={"currentPassword": "Secret123", "newPassword": "Better123", "confirmNewPassword": "Better123"},
        headers=auth_headers(),
    )
    assert resp.status_code == 200
    assert _login(client, password="Better123").status_code == 200


def test_deactivated_account_cannot_punch(client, auth_headers):
    headers = auth_headers()
    assert client.post("/api/user/deactivate", headers=headers).status_code == 200

    resp = client.post("/api/timerecord", json={"type": "ClockIn"}, headers=headers)

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "User not found or inactive"


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"ok": True}
