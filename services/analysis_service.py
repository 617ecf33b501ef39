import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from extensions import db  # type: ignore
from models.analysis_model import FoodAnalysis, dump_list
from models.daily_log_model import NUTRIENT_FIELDS, DailyNutritionLog
from schemas.analysis_schema import SaveAnalysisRequest, UpdateAnalysisRequest

logger = logging.getLogger(__name__)


def _increment_statement(user_id: int, day: date, amounts: Dict[str, float]):
    values = {key: getattr(DailyNutritionLog, key) + amounts[key] for key in NUTRIENT_FIELDS}
    return (
        update(DailyNutritionLog)
        .where(DailyNutritionLog.user_id == user_id, DailyNutritionLog.date == day)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


def add_to_daily_log(user_id: int, day: date, amounts: Dict[str, float]) -> DailyNutritionLog:
    """
    Add nutrition amounts onto the user's log for ``day``.

    The increment runs as one ``UPDATE ... SET x = x + :v`` so concurrent saves
    never overwrite each other. A zeroed row is created first when the day
    has none; losing that insert race to another request is harmless.
    """
    result = db.session.execute(_increment_statement(user_id, day, amounts))
    if result.rowcount == 0:
        db.session.add(
            DailyNutritionLog(
                user_id=user_id,
                date=day,
                **{key: 0.0 for key in NUTRIENT_FIELDS},
            )
        )
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.debug("Daily log for user %s on %s created concurrently.", user_id, day)
        db.session.execute(_increment_statement(user_id, day, amounts))
    db.session.commit()
    return DailyNutritionLog.get_log(user_id, day)  # type: ignore[return-value]


def save_analysis(payload: SaveAnalysisRequest, language: str) -> FoodAnalysis:
    """
    Persist an analysis and, for a known user, fold it into today's log.

    The analysis row is committed first. Updating the daily log is
    best-effort: a failure there is logged and the save still succeeds.
    """
    now = datetime.now()
    analysis = FoodAnalysis(
        user_id=payload.user_id,
        image_url=payload.image_url,
        foods=dump_list(payload.foods),
        calories=payload.calories,
        protein=payload.protein,
        carbs=payload.carbs,
        fats=payload.fats,
        fiber=payload.fiber,
        analysis=payload.analysis,
        suggestions=dump_list(payload.suggestions),
        food_details=_dump_details(payload.food_details),
        language=language,
        meal_type=payload.meal_type,
        serving_size=payload.serving_size,
        created_at=now,
        updated_at=now,
    )
    db.session.add(analysis)
    db.session.commit()
    logger.info("Saved analysis %s for user %s", analysis.id, analysis.user_id)

    if payload.user_id is not None:
        amounts = {key: float(getattr(payload, key)) for key in NUTRIENT_FIELDS}
        try:
            log = add_to_daily_log(payload.user_id, now.date(), amounts)
            analysis.daily_log_id = log.id
            db.session.commit()
        except Exception as exc:
            db.session.rollback()
            logger.exception(
                "Daily log update failed for analysis %s (user %s): %s",
                analysis.id,
                payload.user_id,
                exc,
            )

    return analysis


def update_analysis(analysis: FoodAnalysis, payload: UpdateAnalysisRequest) -> FoodAnalysis:
    """Apply the fields present in ``payload``; daily logs are left untouched."""
    nullable = {"image_url", "meal_type", "serving_size", "food_details"}
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key not in nullable:
            continue
        if key in ("foods", "suggestions"):
            value = dump_list(value)
        elif key == "food_details":
            value = _dump_details(payload.food_details)
        setattr(analysis, key, value)
    db.session.commit()
    return analysis


def get_analysis(analysis_id: int) -> Optional[FoodAnalysis]:
    return db.session.get(FoodAnalysis, analysis_id)


def get_history(
    *,
    user_id: Optional[int] = None,
    limit: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[FoodAnalysis]:
    """Saved analyses, newest first, optionally limited to a user's date window."""
    if user_id is not None and (start_date or end_date):
        start = datetime.combine(start_date or date.min, time.min)
        end = datetime.max
        if end_date and end_date < date.max:
            end = datetime.combine(end_date + timedelta(days=1), time.min)
        return FoodAnalysis.list_between(user_id, start, end, limit=limit)
    return FoodAnalysis.list_recent(user_id=user_id, limit=limit)


def _dump_details(details: Optional[List[Any]]) -> Optional[str]:
    if details is None:
        return None
    return dump_list([item.model_dump(exclude_none=True) for item in details])
