import json

import pytest

from services import gemini_service
from services.gemini_service import (
    EstimatorError,
    EstimatorResponseError,
    analyze_food_image,
    build_instruction,
    decode_image_payload,
    parse_estimate,
)
from tests.conftest import FakeGeminiModel


class TestDecodeImagePayload:
    def test_data_url(self):
        image_bytes, mime_type = decode_image_payload("data:image/png;base64,iVBORw0KGgo=")
        assert image_bytes == b"\x89PNG\r\n\x1a\n"
        assert mime_type == "image/png"

    def test_plain_base64_defaults_to_jpeg(self):
        assert decode_image_payload("aGVsbG8=") == (b"hello", "image/jpeg")

    def test_marker_without_data_scheme_is_stripped(self):
        assert decode_image_payload("whatever;base64,aGVsbG8=") == (b"hello", "image/jpeg")

    def test_line_wrapped_base64(self):
        assert decode_image_payload("data:image/png;base64,iVBO\r\nRw0K\nGgo=") == (
            b"\x89PNG\r\n\x1a\n",
            "image/png",
        )

    @pytest.mark.parametrize("payload", ["not base64!!", "data:image/jpeg;base64,", "   "])
    def test_rejects_bad_payload(self, payload):
        with pytest.raises(ValueError):
            decode_image_payload(payload)


class TestParseEstimate:
    def test_valid_reply(self, sample_estimate):
        result = parse_estimate(json.dumps(sample_estimate))
        assert result.foods == ["Arroz", "Feijão", "Frango grelhado"]
        assert result.nutrition.protein == 42.5
        assert result.food_details is None

    def test_food_details_are_optional_per_field(self, sample_estimate):
        sample_estimate["foodDetails"] = [{"name": "Arroz", "calories": 200}, {"protein": 30}]
        result = parse_estimate(json.dumps(sample_estimate))
        assert result.food_details[0].name == "Arroz"
        assert result.food_details[0].fiber is None
        assert result.food_details[1].protein == 30

    def test_empty_foods_list_is_allowed(self, sample_estimate):
        sample_estimate["foods"] = []
        assert parse_estimate(json.dumps(sample_estimate)).foods == []

    def test_missing_calories(self, sample_estimate):
        del sample_estimate["nutrition"]["calories"]
        with pytest.raises(EstimatorResponseError) as excinfo:
            parse_estimate(json.dumps(sample_estimate))
        assert [d["field"] for d in excinfo.value.details] == ["nutrition.calories"]

    def test_wrong_types(self, sample_estimate):
        sample_estimate["nutrition"]["fats"] = "18"
        sample_estimate["suggestions"] = "eat more greens"
        with pytest.raises(EstimatorResponseError) as excinfo:
            parse_estimate(json.dumps(sample_estimate))
        fields = {d["field"] for d in excinfo.value.details}
        assert "suggestions" in fields
        assert any(field.startswith("nutrition.fats") for field in fields)

    def test_not_json(self):
        with pytest.raises(EstimatorResponseError) as excinfo:
            parse_estimate("Sorry, I can't help with that.")
        assert excinfo.value.details[0]["type"] == "json_invalid"


class TestAnalyzeFoodImage:
    def test_sends_image_and_language(self, app, fake_gemini):
        result = analyze_food_image(image_bytes=b"img", language="en", mime_type="image/png")

        assert result.nutrition.calories == 650
        instruction, image_part = fake_gemini.calls[0]
        assert "English" in instruction
        assert image_part == {"mime_type": "image/png", "data": b"img"}

    def test_missing_api_key(self, app):
        with pytest.raises(EstimatorError, match="GEMINI_API_KEY"):
            analyze_food_image(image_bytes=b"img", language="pt")

    def test_provider_failure_is_not_retried(self, app, monkeypatch):
        model = FakeGeminiModel(error=RuntimeError("quota exceeded"))
        monkeypatch.setattr(gemini_service, "_get_client", lambda: model)

        with pytest.raises(EstimatorError):
            analyze_food_image(image_bytes=b"img", language="pt")
        assert len(model.calls) == 1

    def test_empty_reply(self, app, monkeypatch):
        monkeypatch.setattr(gemini_service, "_get_client", lambda: FakeGeminiModel(text=""))
        with pytest.raises(EstimatorError, match="Empty"):
            analyze_food_image(image_bytes=b"img", language="pt")


@pytest.mark.parametrize("code,name", [("pt", "Portuguese"), ("es", "Spanish"), ("en", "English")])
def test_instruction_names_language(code, name):
    assert name in build_instruction(code)
