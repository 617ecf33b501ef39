import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from extensions import db  # type: ignore
from models import TimestampMixin


def dump_list(values: Optional[List[Any]]) -> str:
    return json.dumps(list(values or []), ensure_ascii=False)


def load_list(raw: Optional[str]) -> List[Any]:
    if not raw:
        return []
    return json.loads(raw)


class FoodAnalysis(TimestampMixin, db.Model):
    """One saved photo analysis. List fields are stored as JSON text."""

    __tablename__ = "food_analyses"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=True,
        index=True,
    )
    daily_log_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_nutrition_logs.id"),
        nullable=True,
    )

    image_url = db.Column(db.Text, nullable=True)
    foods = db.Column(db.Text, nullable=False, default="[]")

    calories = db.Column(db.Float, nullable=False)
    protein = db.Column(db.Float, nullable=False)
    carbs = db.Column(db.Float, nullable=False)
    fats = db.Column(db.Float, nullable=False)
    fiber = db.Column(db.Float, nullable=False)

    analysis = db.Column(db.Text, nullable=False)
    suggestions = db.Column(db.Text, nullable=False, default="[]")
    food_details = db.Column(db.Text, nullable=True)

    language = db.Column(db.String(8), nullable=False)
    meal_type = db.Column(db.String(32), nullable=True)
    serving_size = db.Column(db.String(64), nullable=True)

    # Stamped in server local time, the same clock the daily log dates use.
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=False,
    )

    user = db.relationship("User", back_populates="analyses")
    daily_log = db.relationship("DailyNutritionLog", back_populates="analyses")

    @staticmethod
    def list_recent(
        user_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List["FoodAnalysis"]:
        query = FoodAnalysis.query
        if user_id is not None:
            query = query.filter(FoodAnalysis.user_id == user_id)
        query = query.order_by(FoodAnalysis.created_at.desc(), FoodAnalysis.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def list_between(
        user_id: int,
        start: datetime,
        end: datetime,
        limit: Optional[int] = None,
    ) -> List["FoodAnalysis"]:
        """Analyses with ``start <= created_at < end``, newest first."""
        query = (
            FoodAnalysis.query.filter(
                FoodAnalysis.user_id == user_id,
                FoodAnalysis.created_at >= start,
                FoodAnalysis.created_at < end,
            )
            .order_by(FoodAnalysis.created_at.desc(), FoodAnalysis.id.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "userId": self.user_id,
            "dailyLogId": self.daily_log_id,
            "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "foods": load_list(self.foods),
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
            "fiber": self.fiber,
            "analysis": self.analysis,
            "suggestions": load_list(self.suggestions),
            "language": self.language,
            "mealType": self.meal_type,
            "servingSize": self.serving_size,
        }
        if self.food_details:
            data["foodDetails"] = load_list(self.food_details)
        return data
