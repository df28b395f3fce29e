"""Tests for registration, login and profile endpoints"""

from datetime import timedelta

from flask_jwt_extended import decode_token

from conftest import bearer
from models import db
from models.category_model import Category
from models.user_model import User


def test_register_returns_token_and_profile(register):
    response = register()

    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["name"] == "Asha Rao"
    assert body["user"]["email"] == "asha@example.com"
    assert body["user"]["avatar"] == ""
    assert "password" not in body["user"]


def test_register_seeds_default_categories(app, register):
    user_id = register().get_json()["user"]["id"]

    with app.app_context():
        categories = Category.query.filter_by(user_id=user_id).all()
        assert len(categories) == 12
        assert sum(c.type == "income" for c in categories) == 4
        assert sum(c.type == "expense" for c in categories) == 8
        assert all(c.is_default for c in categories)
        assert {"Salary", "Food & Dining", "Bills & Utilities", "Travel"} <= {c.name for c in categories}


def test_password_is_stored_hashed(app, register):
    register(password="secret123")

    with app.app_context():
        user = User.query.filter_by(email="asha@example.com").one()
        assert user.password != "secret123"


def test_register_then_login(client, register):
    register()

    response = client.post(
        "/api/auth/login", json={"email": "asha@example.com", "password": "secret123"}
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["user"]["email"] == "asha@example.com"
    assert body["token"]


def test_email_is_case_insensitive(client, register):
    register(email="Asha@Example.COM")

    response = client.post(
        "/api/auth/login", json={"email": "asha@example.com", "password": "secret123"}
    )

    assert response.status_code == 200


def test_duplicate_registration_is_rejected(app, register):
    first = register()
    second = register(name="Someone Else")

    assert second.status_code == 400
    assert second.get_json()["success"] is False
    assert second.get_json()["message"] == "User already exists with this email"

    with app.app_context():
        assert User.query.count() == 1
        assert Category.query.count() == 12
        assert Category.query.filter_by(user_id=first.get_json()["user"]["id"]).count() == 12


def test_register_validation_errors(register):
    response = register(name="A", email="not-an-email", password="123")

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {e["path"] for e in body["errors"]} == {"name", "email", "password"}
    assert all(e["msg"] for e in body["errors"])


def test_register_without_body(client):
    response = client.post("/api/auth/register")

    assert response.status_code == 400
    assert {e["path"] for e in response.get_json()["errors"]} == {"name", "email", "password"}


def test_login_wrong_password_and_unknown_email_look_the_same(client, register):
    register()

    wrong_password = client.post(
        "/api/auth/login", json={"email": "asha@example.com", "password": "nope-nope"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.get_json() == unknown_email.get_json()
    assert wrong_password.get_json()["message"] == "Invalid email or password"


def test_token_carries_user_id_and_expires_in_30_days(app, register):
    body = register().get_json()

    with app.app_context():
        claims = decode_token(body["token"])

    assert claims["userId"] == body["user"]["id"]
    assert timedelta(seconds=claims["exp"] - claims["iat"]) == timedelta(days=30)


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    body = response.get_json()
    assert body["success"] is False
    assert "data" not in body
    assert "user" not in body


def test_profile_rejects_garbage_token(client):
    response = client.get("/api/auth/profile", headers=bearer("not.a.token"))

    assert response.status_code == 401
    assert response.get_json()["message"] == "Token is not valid"


def test_get_profile(client, auth_headers):
    response = client.get("/api/auth/profile", headers=auth_headers)

    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["name"] == "Asha Rao"
    assert user["email"] == "asha@example.com"
    assert user["createdAt"]


def test_update_profile_is_partial(client, auth_headers):
    renamed = client.put("/api/auth/profile", json={"name": "Asha R."}, headers=auth_headers)
    assert renamed.status_code == 200
    assert renamed.get_json()["user"]["name"] == "Asha R."
    assert renamed.get_json()["user"]["avatar"] == ""

    avatar = client.put(
        "/api/auth/profile", json={"avatar": "https://img.example.com/a.png"}, headers=auth_headers
    )
    user = avatar.get_json()["user"]
    assert user["name"] == "Asha R."
    assert user["avatar"] == "https://img.example.com/a.png"


def test_update_profile_rejects_short_name(client, auth_headers):
    response = client.put("/api/auth/profile", json={"name": "A"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["errors"][0]["path"] == "name"


def test_profile_of_vanished_user_is_not_found(app, client, auth_headers):
    with app.app_context():
        User.query.delete()
        db.session.commit()

    response = client.get("/api/auth/profile", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json()["message"] == "User not found"
