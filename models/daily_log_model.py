import datetime
from typing import Any, Dict, List, Optional

from extensions import db  # type: ignore
from models import TimestampMixin

NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fats", "fiber")


class DailyNutritionLog(TimestampMixin, db.Model):
    """Running nutrition totals for one user on one calendar date."""

    __tablename__ = "daily_nutrition_logs"
    __table_args__ = (db.UniqueConstraint("user_id", "date"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.Date, nullable=False)

    calories = db.Column(db.Float, nullable=False, default=0.0)
    protein = db.Column(db.Float, nullable=False, default=0.0)
    carbs = db.Column(db.Float, nullable=False, default=0.0)
    fats = db.Column(db.Float, nullable=False, default=0.0)
    fiber = db.Column(db.Float, nullable=False, default=0.0)

    user = db.relationship("User", back_populates="daily_logs")
    analyses = db.relationship("FoodAnalysis", back_populates="daily_log", lazy="dynamic")

    @staticmethod
    def get_log(user_id: int, day: datetime.date) -> Optional["DailyNutritionLog"]:
        return DailyNutritionLog.query.filter_by(user_id=user_id, date=day).first()

    @staticmethod
    def get_logs(
        user_id: int,
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
    ) -> List["DailyNutritionLog"]:
        """Logs for a user inside an inclusive date window, newest first."""
        query = DailyNutritionLog.query.filter(DailyNutritionLog.user_id == user_id)
        if start is not None:
            query = query.filter(DailyNutritionLog.date >= start)
        if end is not None:
            query = query.filter(DailyNutritionLog.date <= end)
        return query.order_by(DailyNutritionLog.date.desc()).all()

    def totals(self) -> Dict[str, float]:
        return {key: float(getattr(self, key) or 0.0) for key in NUTRIENT_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "date": self.date.isoformat(),
            **self.totals(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
