from typing import Optional

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from errors import ConflictError, NotFoundError, ValidationError
from extensions import db  # type: ignore
from models.user_model import User
from schemas import validate_payload
from schemas.user_schema import UserCreateRequest, UserUpdateRequest

users_bp = Blueprint("users", __name__)


def _get_user_or_404(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _check_language(code: Optional[str]) -> None:
    if code is not None and code not in current_app.config["SUPPORTED_LANGUAGES"]:
        raise ValidationError(
            "Unsupported language",
            details=[{"field": "preferredLanguage", "message": f"'{code}' is not supported", "type": "unsupported"}],
        )


@users_bp.route("/users", methods=["POST"])
def create_user():
    body = validate_payload(UserCreateRequest, request.get_json(silent=True), message="Invalid user data")
    username = body.username.strip()
    if not username:
        raise ValidationError("Username is required")
    _check_language(body.preferred_language)

    if User.get_by_username(username):
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        preferred_language=body.preferred_language or current_app.config["DEFAULT_LANGUAGE"],
        profile_image=body.profile_image,
    )
    user.set_password(body.password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise ConflictError("Username already exists") from exc

    return jsonify(user.to_dict()), 201


@users_bp.route("/users/<int:user_id>", methods=["GET"])
def get_user(user_id: int):
    return jsonify(_get_user_or_404(user_id).to_dict()), 200


@users_bp.route("/users/<int:user_id>", methods=["PATCH"])
def update_user(user_id: int):
    user = _get_user_or_404(user_id)
    body = validate_payload(UserUpdateRequest, request.get_json(silent=True), message="Invalid user data")
    _check_language(body.preferred_language)

    if body.password is not None:
        user.set_password(body.password)
    if body.preferred_language is not None:
        user.preferred_language = body.preferred_language
    if "profile_image" in body.model_fields_set:
        user.profile_image = body.profile_image
    db.session.commit()

    return jsonify(user.to_dict()), 200
