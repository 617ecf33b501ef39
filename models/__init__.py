from datetime import datetime, timezone

from extensions import db  # type: ignore


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    """Mixin that adds created_at and updated_at columns."""

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


def init_models():
    """Import models so that SQLAlchemy is aware of them."""
    # Local imports to avoid circular dependencies
    from .user_model import User  # noqa: F401
    from .profile_model import NutritionProfile  # noqa: F401
    from .daily_log_model import DailyNutritionLog  # noqa: F401
    from .analysis_model import FoodAnalysis  # noqa: F401
    from .language_model import Language  # noqa: F401
