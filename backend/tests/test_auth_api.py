from __future__ import annotations

from app.core.security import ADMIN, EMPLOYEE
from app.models import User
from conftest import make_user


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/ready").json() == {"status": "ready"}


def test_login_issues_token_usable_as_bearer(client, db):
    make_user(db, "user@example.com", [EMPLOYEE])

    response = client.post("/auth/login", json={"email": "User@Example.com ", "password": "supersecure"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["roles"] == [EMPLOYEE]

    codes = client.get("/charge-codes", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert codes.status_code == 200


def test_login_rejects_wrong_password(client, db):
    make_user(db, "user@example.com", [EMPLOYEE])

    response = client.post("/auth/login", json={"email": "user@example.com", "password": "wrongpassword"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_admin_login_requires_admin_role(client, db):
    make_user(db, "user@example.com", [EMPLOYEE])
    make_user(db, "boss@example.com", [ADMIN])

    denied = client.post(
        "/auth/login", json={"email": "user@example.com", "password": "supersecure", "loginType": "admin"}
    )
    allowed = client.post(
        "/auth/login", json={"email": "boss@example.com", "password": "supersecure", "loginType": "admin"}
    )

    assert denied.status_code == 401
    assert allowed.status_code == 200
    db.expire_all()
    assert db.query(User).filter(User.email == "boss@example.com").one().api_token == allowed.json()["access_token"]


def test_missing_or_unknown_token_is_unauthorized(client):
    assert client.get("/charge-codes").status_code == 401
    assert client.get("/charge-codes", headers={"Authorization": "Bearer nope"}).status_code == 401
