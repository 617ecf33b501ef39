from extensions import db
from models.user_model import User


def test_list_languages(client):
    body = client.get("/api/languages", headers={"Accept-Language": "en-US"}).get_json()

    assert body["languages"] == [
        {"code": "pt", "name": "Português"},
        {"code": "en", "name": "English"},
        {"code": "es", "name": "Español"},
    ]
    assert body["current"] == "en"


def test_set_language_sets_cookie(client):
    response = client.post("/api/set-language", json={"language": "es"})

    assert response.status_code == 200
    cookie = next(
        header for header in response.headers.getlist("Set-Cookie") if header.startswith("prefLanguage=")
    )
    assert cookie.startswith("prefLanguage=es;")
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    assert "Max-Age=31536000" in cookie


def test_cookie_is_used_by_later_requests(client):
    client.post("/api/set-language", json={"language": "es"})
    body = client.get("/api/languages", headers={"Accept-Language": "en-US"}).get_json()
    assert body["current"] == "es"


def test_set_language_updates_user(client, make_user):
    user = make_user()
    response = client.post("/api/set-language", json={"language": "en", "userId": user["id"]})

    assert response.status_code == 200
    assert db.session.get(User, user["id"]).preferred_language == "en"


def test_set_unsupported_language(client):
    response = client.post("/api/set-language", json={"language": "fr"})
    assert response.status_code == 400
    assert "Set-Cookie" not in response.headers


def test_unknown_route_is_json(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert "message" in response.get_json()


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok", "app": "PlateSense"}
