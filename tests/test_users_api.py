from extensions import db
from models.user_model import User


def test_create_user_hides_password(client):
    response = client.post("/api/users", json={"username": "maria", "password": "s3cret"})

    body = response.get_json()
    assert response.status_code == 201
    assert body["username"] == "maria"
    assert body["preferredLanguage"] == "pt"
    assert not any("password" in key.lower() for key in body)

    user = db.session.get(User, body["id"])
    assert user.password_hash != "s3cret"
    assert user.check_password("s3cret")


def test_duplicate_username(client, make_user):
    make_user("maria")
    response = client.post("/api/users", json={"username": "maria", "password": "other"})
    assert response.status_code == 409
    assert response.get_json()["message"] == "Username already exists"


def test_missing_password(client):
    response = client.post("/api/users", json={"username": "maria"})
    assert response.status_code == 400
    assert response.get_json()["details"][0]["field"] == "password"


def test_unsupported_preferred_language(client):
    response = client.post(
        "/api/users",
        json={"username": "maria", "password": "x", "preferredLanguage": "fr"},
    )
    assert response.status_code == 400


def test_get_user(client, make_user):
    user = make_user(preferredLanguage="es")
    body = client.get(f"/api/users/{user['id']}").get_json()
    assert body["preferredLanguage"] == "es"
    assert client.get("/api/users/999").status_code == 404


def test_update_user(client, make_user):
    user = make_user()
    response = client.patch(
        f"/api/users/{user['id']}",
        json={"preferredLanguage": "en", "profileImage": "https://img.example/me.png", "password": "new"},
    )

    body = response.get_json()
    assert response.status_code == 200
    assert body["preferredLanguage"] == "en"
    assert body["profileImage"] == "https://img.example/me.png"
    assert db.session.get(User, user["id"]).check_password("new")


def test_update_unknown_user(client):
    assert client.patch("/api/users/42", json={"preferredLanguage": "en"}).status_code == 404
