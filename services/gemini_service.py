import base64
import binascii
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import google.generativeai as genai  # type: ignore[import]
from flask import current_app
from pydantic import ValidationError as PydanticValidationError

from schemas import error_details
from schemas.analysis_schema import FoodAnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
_DATA_URL_PREFIX = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?[^,]*?base64,", re.IGNORECASE)

LANGUAGE_NAMES = {
    "pt": "Brazilian Portuguese",
    "en": "English",
    "es": "Spanish",
}


class EstimatorError(Exception):
    """The model call itself failed (configuration, network, auth, quota)."""


class EstimatorResponseError(Exception):
    """The model replied, but not with the expected JSON shape."""

    def __init__(self, message: str, details: List[Dict[str, Any]]) -> None:
        super().__init__(message)
        self.details = details


def decode_image_payload(payload: str) -> Tuple[bytes, str]:
    """
    Turn a base64 string or ``data:`` URL into raw bytes and a MIME type.

    Anything up to and including a ``base64,`` marker is dropped before
    decoding. Raises ``ValueError`` when the remainder is not valid base64.
    """
    mime_type = DEFAULT_MIME_TYPE
    data = payload.strip()
    match = _DATA_URL_PREFIX.match(data)
    if match:
        mime_type = match.group("mime") or DEFAULT_MIME_TYPE
        data = data[match.end():]
    elif "base64," in data:
        data = data.split("base64,", 1)[1]
    data = re.sub(r"\s+", "", data)

    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image data is not valid base64") from exc
    if not image_bytes:
        raise ValueError("Image data is empty")
    return image_bytes, mime_type


def _get_client():
    """Return a configured Gemini model, or raise when no API key is present."""
    api_key = current_app.config.get("GEMINI_API_KEY")
    if not api_key:
        raise EstimatorError("GEMINI_API_KEY is not configured")
    genai.configure(api_key=api_key)
    # Model name can be swapped centrally via config.
    return genai.GenerativeModel(
        current_app.config.get("GEMINI_MODEL", "gemini-1.5-flash"),
        generation_config={
            "response_mime_type": "application/json",
            "max_output_tokens": current_app.config.get("GEMINI_MAX_OUTPUT_TOKENS", 800),
        },
    )


def build_instruction(language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, LANGUAGE_NAMES["pt"])
    return (
        "You are an expert nutritionist. Analyze this food image in detail. "
        "Identify every food item visible and estimate the nutrition of the whole meal. "
        "Give a brief analysis of the meal's nutritional profile and some suggestions "
        "to improve it if needed. "
        f"Write every food name, the analysis and the suggestions in {language_name}. "
        "Respond ONLY with valid JSON in this exact shape: {"
        '"foods": [string],'
        '"nutrition": {'
        '"calories": number,'
        '"protein": number,'
        '"carbs": number,'
        '"fats": number,'
        '"fiber": number'
        "},"
        '"analysis": string,'
        '"suggestions": [string],'
        '"foodDetails": [{"name": string, "calories": number, "protein": number, '
        '"carbs": number, "fats": number, "fiber": number}]'
        "} "
        "Calories are kcal; protein, carbs, fats and fiber are grams."
    )


def parse_estimate(text: str) -> FoodAnalysisResult:
    """Parse and validate the raw model reply."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EstimatorResponseError(
            "Invalid response format",
            [{"field": "", "message": f"Response is not valid JSON: {exc.msg}", "type": "json_invalid"}],
        ) from exc

    try:
        return FoodAnalysisResult.model_validate(parsed)
    except PydanticValidationError as exc:
        raise EstimatorResponseError("Invalid response format", error_details(exc)) from exc


def analyze_food_image(
    *,
    image_bytes: bytes,
    language: str,
    mime_type: Optional[str] = None,
) -> FoodAnalysisResult:
    """
    Ask Gemini for a nutrition estimate of a meal photo.

    Raises ``EstimatorError`` when the call fails and ``EstimatorResponseError``
    when the reply does not match ``FoodAnalysisResult``. Nothing is retried.
    """
    model = _get_client()
    image_part = {"mime_type": mime_type or DEFAULT_MIME_TYPE, "data": image_bytes}

    try:
        response = model.generate_content([build_instruction(language), image_part])
        text = response.text
    except Exception as exc:
        logger.exception("Gemini food analysis failed: %s", exc)
        raise EstimatorError("Gemini request failed") from exc

    if not text or not text.strip():
        raise EstimatorError("Empty response from Gemini")

    result = parse_estimate(text)
    logger.info(
        "Gemini identified %d foods (%s kcal) in %s",
        len(result.foods),
        result.nutrition.calories,
        language,
    )
    return result
