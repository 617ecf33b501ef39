import pytest

from models.profile_model import NutritionProfile

PROFILE = {
    "weight": 80,
    "height": 180,
    "age": 30,
    "gender": "male",
    "activityLevel": "moderate",
    "goal": "maintain",
}


def test_upsert_computes_targets(client, make_user):
    user = make_user()
    response = client.post("/api/nutrition-profile", json={**PROFILE, "userId": user["id"]})

    body = response.get_json()
    assert response.status_code == 200
    assert body["targets"] == {
        "calories": 2856,
        "protein": 214,
        "carbs": 286,
        "fats": 95,
        "fiber": 40,
    }
    assert body["activityLevel"] == "moderate"


def test_recompute_replaces_targets(client, make_user):
    user = make_user()
    client.post("/api/nutrition-profile", json={**PROFILE, "userId": user["id"]})
    response = client.post(
        "/api/nutrition-profile",
        json={**PROFILE, "userId": user["id"], "goal": "gain_muscle"},
    )

    body = response.get_json()
    assert body["goal"] == "gain_muscle"
    assert body["targets"]["calories"] == 3141
    assert NutritionProfile.query.filter_by(user_id=user["id"]).count() == 1

    fetched = client.get(f"/api/nutrition-profile/{user['id']}").get_json()
    assert fetched["targets"] == body["targets"]


def test_upsert_unknown_user(client):
    response = client.post("/api/nutrition-profile", json={**PROFILE, "userId": 999})
    assert response.status_code == 404


@pytest.mark.parametrize(
    "field,value",
    [("weight", "abc"), ("age", -3), ("gender", "robot"), ("goal", "bulk"), ("activityLevel", "extreme")],
)
def test_upsert_rejects_bad_fields(client, make_user, field, value):
    user = make_user()
    response = client.post(
        "/api/nutrition-profile",
        json={**PROFILE, "userId": user["id"], field: value},
    )

    assert response.status_code == 400
    assert response.get_json()["details"][0]["field"] == field


def test_get_missing_profile(client, make_user):
    user = make_user()
    assert client.get(f"/api/nutrition-profile/{user['id']}").status_code == 404


def test_preview_accepts_form_strings(client):
    response = client.post(
        "/api/nutrition-targets",
        json={**PROFILE, "weight": "80", "height": "180", "age": "30"},
    )
    assert response.status_code == 200
    assert response.get_json()["targets"]["calories"] == 2856
    assert NutritionProfile.query.count() == 0


def test_preview_names_fields_that_failed(client):
    response = client.post(
        "/api/nutrition-targets",
        json={"weight": "abc", "height": "180", "gender": "female"},
    )

    body = response.get_json()
    assert response.status_code == 400
    assert body["message"] == "Profile values are not computable"
    assert [detail["field"] for detail in body["details"]] == ["weight", "age"]
