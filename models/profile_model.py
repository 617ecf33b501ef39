from typing import Any, Dict, Optional

from extensions import db  # type: ignore
from models import TimestampMixin


class NutritionProfile(TimestampMixin, db.Model):
    """Body measurements plus the daily targets derived from them."""

    __tablename__ = "nutrition_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    weight = db.Column(db.Float, nullable=False)
    height = db.Column(db.Float, nullable=False)
    age = db.Column(db.Integer, nullable=False)
    gender = db.Column(db.String(16), nullable=False)
    activity_level = db.Column(db.String(32), nullable=True)
    goal = db.Column(db.String(32), nullable=False)

    calories_target = db.Column(db.Integer, nullable=False)
    protein_target = db.Column(db.Integer, nullable=False)
    carbs_target = db.Column(db.Integer, nullable=False)
    fats_target = db.Column(db.Integer, nullable=False)
    fiber_target = db.Column(db.Integer, nullable=False)

    user = db.relationship("User", back_populates="nutrition_profiles")

    @staticmethod
    def get_profile_by_user_id(user_id: int) -> Optional["NutritionProfile"]:
        # Latest wins when more than one row exists.
        return (
            NutritionProfile.query.filter_by(user_id=user_id)
            .order_by(NutritionProfile.updated_at.desc(), NutritionProfile.id.desc())
            .first()
        )

    @staticmethod
    def save_or_update_profile(
        user_id: int,
        weight: float,
        height: float,
        age: int,
        gender: str,
        activity_level: Optional[str],
        goal: str,
        targets: Dict[str, int],
    ) -> "NutritionProfile":
        profile = NutritionProfile.get_profile_by_user_id(user_id)
        if profile is None:
            profile = NutritionProfile(user_id=user_id)
            db.session.add(profile)

        profile.weight = weight
        profile.height = height
        profile.age = age
        profile.gender = gender
        profile.activity_level = activity_level
        profile.goal = goal

        # New targets replace the old ones wholesale.
        profile.calories_target = targets["calories"]
        profile.protein_target = targets["protein"]
        profile.carbs_target = targets["carbs"]
        profile.fats_target = targets["fats"]
        profile.fiber_target = targets["fiber"]

        db.session.commit()
        return profile

    def targets_dict(self) -> Dict[str, int]:
        return {
            "calories": self.calories_target,
            "protein": self.protein_target,
            "carbs": self.carbs_target,
            "fats": self.fats_target,
            "fiber": self.fiber_target,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "weight": self.weight,
            "height": self.height,
            "age": self.age,
            "gender": self.gender,
            "activityLevel": self.activity_level,
            "goal": self.goal,
            "targets": self.targets_dict(),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
