from datetime import date

from flask import Blueprint, jsonify, request

from errors import NotFoundError
from extensions import db  # type: ignore
from models.daily_log_model import DailyNutritionLog
from models.user_model import User
from schemas import query_params, validate_payload
from schemas.profile_schema import DailyLogQuery, ProgressQuery
from services.nutrition_service import summarize_progress

nutrition_bp = Blueprint("nutrition", __name__)


def _get_user_or_404(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@nutrition_bp.route("/daily-logs/<int:user_id>", methods=["GET"])
def daily_logs(user_id: int):
    query = validate_payload(DailyLogQuery, query_params(request.args), message="Invalid date range")
    _get_user_or_404(user_id)
    logs = DailyNutritionLog.get_logs(user_id, query.start_date, query.end_date)
    return jsonify([log.to_dict() for log in logs]), 200


@nutrition_bp.route("/daily-logs/<int:user_id>/progress", methods=["GET"])
def progress(user_id: int):
    query = validate_payload(ProgressQuery, query_params(request.args), message="Invalid progress query")
    _get_user_or_404(user_id)
    # Use local server time so "today" matches the day the logs are keyed on.
    summary = summarize_progress(
        user_id,
        period=query.period,
        end_day=query.day or date.today(),
    )
    return jsonify(summary), 200
