from flask import Blueprint, current_app, jsonify, request

from errors import NotFoundError, ValidationError
from extensions import db  # type: ignore
from models.user_model import User
from schemas import validate_payload
from schemas.user_schema import SetLanguageRequest
from services.language_service import list_languages, resolve_request_language

languages_bp = Blueprint("languages", __name__)


@languages_bp.route("/languages", methods=["GET"])
def languages():
    return jsonify(
        {
            "languages": [language.to_dict() for language in list_languages()],
            "current": resolve_request_language(request),
        }
    ), 200


@languages_bp.route("/set-language", methods=["POST"])
def set_language():
    body = validate_payload(SetLanguageRequest, request.get_json(silent=True), message="Invalid language data")
    config = current_app.config
    if body.language not in config["SUPPORTED_LANGUAGES"]:
        raise ValidationError(
            "Unsupported language",
            details=[{"field": "language", "message": f"'{body.language}' is not supported", "type": "unsupported"}],
        )

    if body.user_id is not None:
        user = db.session.get(User, body.user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.preferred_language = body.language
        db.session.commit()

    response = jsonify({"success": True, "language": body.language})
    response.set_cookie(
        config["LANGUAGE_COOKIE_NAME"],
        body.language,
        max_age=config["LANGUAGE_COOKIE_MAX_AGE"],
        httponly=True,
        samesite="Strict",
    )
    return response, 200
