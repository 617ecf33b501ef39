"""Shared fixtures: a fresh in-memory app per test and a fake Gemini model."""

import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from app import create_app
from config import TestingConfig
from extensions import db


class FakeGeminiModel:
    """Stands in for ``genai.GenerativeModel``; records what it was sent."""

    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Any] = []

    def generate_content(self, parts):
        self.calls.append(parts)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_estimate() -> Dict[str, Any]:
    return {
        "foods": ["Arroz", "Feijão", "Frango grelhado"],
        "nutrition": {
            "calories": 650,
            "protein": 42.5,
            "carbs": 70,
            "fats": 18,
            "fiber": 9,
        },
        "analysis": "Refeição equilibrada com boa quantidade de proteína.",
        "suggestions": ["Adicione salada verde", "Troque o arroz branco por integral"],
    }


@pytest.fixture
def fake_gemini(monkeypatch, sample_estimate):
    """Route ``_get_client`` to a fake model replying with ``sample_estimate``."""
    from services import gemini_service

    model = FakeGeminiModel(text=json.dumps(sample_estimate))
    monkeypatch.setattr(gemini_service, "_get_client", lambda: model)
    return model


@pytest.fixture
def make_user(client):
    def _make(username: str = "maria", password: str = "s3cret", **extra) -> Dict[str, Any]:
        response = client.post(
            "/api/users",
            json={"username": username, "password": password, **extra},
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    return {
        "imageUrl": "data:image/jpeg;base64,aGVsbG8=",
        "foods": ["Pão", "Ovo mexido", "Café"],
        "calories": 420,
        "protein": 21.5,
        "carbs": 38,
        "fats": 17,
        "fiber": 3,
        "analysis": "Café da manhã com proteína moderada.",
        "suggestions": ["Inclua uma fruta", "Prefira pão integral"],
    }
