import logging

from flask import Blueprint, jsonify, request

from errors import NotFoundError, ValidationError
from extensions import db  # type: ignore
from models.profile_model import NutritionProfile
from models.user_model import User
from schemas import validate_payload
from schemas.profile_schema import ProfileUpsertRequest, TargetsPreviewRequest
from services.nutrition_targets import compute_targets, parse_measurements

logger = logging.getLogger(__name__)

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("/nutrition-profile", methods=["POST"])
def upsert_profile():
    body = validate_payload(
        ProfileUpsertRequest,
        request.get_json(silent=True),
        message="Invalid profile data",
    )
    if db.session.get(User, body.user_id) is None:
        raise NotFoundError("User not found")

    targets = compute_targets(
        weight=body.weight,
        height=body.height,
        age=body.age,
        gender=body.gender,
        activity_level=body.activity_level,
        goal=body.goal,
    )
    if targets is None:
        raise ValidationError("Profile values are not computable")

    profile = NutritionProfile.save_or_update_profile(
        user_id=body.user_id,
        weight=body.weight,
        height=body.height,
        age=body.age,
        gender=body.gender,
        activity_level=body.activity_level,
        goal=body.goal,
        targets=targets,
    )
    logger.info("Stored nutrition targets for user %s: %s", body.user_id, targets)
    return jsonify(profile.to_dict()), 200


@profile_bp.route("/nutrition-profile/<int:user_id>", methods=["GET"])
def get_profile(user_id: int):
    profile = NutritionProfile.get_profile_by_user_id(user_id)
    if profile is None:
        raise NotFoundError("Nutrition profile not found")
    return jsonify(profile.to_dict()), 200


@profile_bp.route("/nutrition-targets", methods=["POST"])
def preview_targets():
    """Run the calculator on raw form values without storing anything."""
    body = validate_payload(
        TargetsPreviewRequest,
        request.get_json(silent=True),
        message="Invalid profile data",
    )
    targets = compute_targets(
        weight=body.weight,
        height=body.height,
        age=body.age,
        gender=body.gender,
        activity_level=body.activity_level,
        goal=body.goal,
    )
    if targets is None:
        _, invalid = parse_measurements(body.weight, body.height, body.age)
        raise ValidationError(
            "Profile values are not computable",
            details=[
                {"field": field, "message": "Must be a number", "type": "not_computable"}
                for field in invalid
            ],
        )
    return jsonify({"targets": targets}), 200
