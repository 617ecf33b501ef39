import logging

from flask import Blueprint, current_app, jsonify, request

from errors import ExternalServiceError, NotFoundError, ValidationError
from extensions import db  # type: ignore
from models.user_model import User
from schemas import query_params, validate_payload
from schemas.analysis_schema import (
    AnalyzeFoodRequest,
    HistoryQuery,
    SaveAnalysisRequest,
    UpdateAnalysisRequest,
)
from services.analysis_service import (
    get_analysis,
    get_history,
    save_analysis,
    update_analysis,
)
from services.gemini_service import (
    EstimatorError,
    EstimatorResponseError,
    analyze_food_image,
    decode_image_payload,
)
from services.language_service import resolve_request_language

logger = logging.getLogger(__name__)

analysis_bp = Blueprint("analysis", __name__)


def _get_analysis_or_404(raw_id: str):
    try:
        analysis_id = int(raw_id)
    except ValueError:
        raise ValidationError("Invalid analysis ID") from None
    analysis = get_analysis(analysis_id)
    if analysis is None:
        raise NotFoundError("Analysis not found")
    return analysis


@analysis_bp.route("/analyze-food", methods=["POST"])
def analyze_food():
    body = validate_payload(
        AnalyzeFoodRequest,
        request.get_json(silent=True),
        message="Missing or invalid image data",
    )
    try:
        image_bytes, mime_type = decode_image_payload(body.image)
    except ValueError as exc:
        raise ValidationError("Missing or invalid image data", error=str(exc)) from exc

    language = resolve_request_language(request)
    try:
        result = analyze_food_image(
            image_bytes=image_bytes,
            mime_type=mime_type,
            language=language,
        )
    except EstimatorResponseError as exc:
        logger.warning("Rejected malformed estimate: %s", exc.details)
        raise ValidationError("Invalid response format", details=exc.details) from exc
    except EstimatorError as exc:
        logger.error("Food analysis failed: %s", exc)
        raise ExternalServiceError("Failed to analyze food image", error=str(exc)) from exc

    return jsonify(result.model_dump(by_alias=True, exclude_none=True)), 200


@analysis_bp.route("/save-analysis", methods=["POST"])
def save_analysis_route():
    body = validate_payload(
        SaveAnalysisRequest,
        request.get_json(silent=True),
        message="Invalid analysis data",
    )
    if body.user_id is not None and db.session.get(User, body.user_id) is None:
        raise NotFoundError("User not found")

    supported = current_app.config["SUPPORTED_LANGUAGES"]
    language = body.language if body.language in supported else resolve_request_language(request)

    analysis = save_analysis(body, language)
    return jsonify(analysis.to_dict()), 201


@analysis_bp.route("/analysis-history", methods=["GET"])
def analysis_history():
    query = validate_payload(HistoryQuery, query_params(request.args), message="Invalid history query")
    analyses = get_history(
        user_id=query.user_id,
        limit=query.limit,
        start_date=query.start_date,
        end_date=query.end_date,
    )
    return jsonify([analysis.to_dict() for analysis in analyses]), 200


@analysis_bp.route("/analysis/<analysis_id>", methods=["GET"])
def analysis_detail(analysis_id: str):
    return jsonify(_get_analysis_or_404(analysis_id).to_dict()), 200


@analysis_bp.route("/analysis/<analysis_id>", methods=["PATCH"])
def analysis_update(analysis_id: str):
    analysis = _get_analysis_or_404(analysis_id)
    body = validate_payload(
        UpdateAnalysisRequest,
        request.get_json(silent=True),
        message="Invalid analysis data",
    )
    return jsonify(update_analysis(analysis, body).to_dict()), 200
