from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db  # type: ignore
from models import TimestampMixin


class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), nullable=False, unique=True)
    password_hash = db.Column(db.String(256), nullable=False)
    preferred_language = db.Column(db.String(8), nullable=False, default="pt")
    profile_image = db.Column(db.Text, nullable=True)

    nutrition_profiles = db.relationship(
        "NutritionProfile", back_populates="user", lazy="dynamic"
    )
    daily_logs = db.relationship(
        "DailyNutritionLog", back_populates="user", lazy="dynamic"
    )
    analyses = db.relationship("FoodAnalysis", back_populates="user", lazy="dynamic")

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @staticmethod
    def get_by_username(username: str) -> Optional["User"]:
        return User.query.filter_by(username=username).first()

    def to_dict(self) -> Dict[str, Any]:
        # The credential is never part of a response.
        return {
            "id": self.id,
            "username": self.username,
            "preferredLanguage": self.preferred_language,
            "profileImage": self.profile_image,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
