from datetime import date, timedelta
from typing import Any, Dict, Iterable, Optional

from models.daily_log_model import NUTRIENT_FIELDS, DailyNutritionLog
from models.profile_model import NutritionProfile
from schemas.profile_schema import PERIOD_DAYS
from services.nutrition_targets import round_half_up


def calculate_progress(current: float, goal: Optional[float]) -> int:
    """Percentage of ``goal`` reached, capped at 100."""
    if not goal or goal <= 0:
        return 0
    return min(round_half_up(current / goal * 100), 100)


def aggregate_daily_nutrition(logs: Iterable[DailyNutritionLog]) -> Dict[str, float]:
    """Sum the running totals of several daily logs."""
    totals = {key: 0.0 for key in NUTRIENT_FIELDS}
    for log in logs:
        for key, value in log.totals().items():
            totals[key] += value
    return totals


def summarize_progress(user_id: int, *, period: str, end_day: date) -> Dict[str, Any]:
    """
    Progress towards the profile targets over a window ending at ``end_day``.

    Days without a log count as zero when averaging, so a skipped day pulls
    the average down the same way it does on the client charts.
    """
    days = PERIOD_DAYS[period]
    start_day = end_day - timedelta(days=days - 1)
    logs = DailyNutritionLog.get_logs(user_id, start_day, end_day)

    totals = aggregate_daily_nutrition(logs)
    averages = {key: round(value / days, 1) for key, value in totals.items()}

    profile = NutritionProfile.get_profile_by_user_id(user_id)
    targets = profile.targets_dict() if profile else None
    progress = (
        {key: calculate_progress(averages[key], targets[key]) for key in NUTRIENT_FIELDS}
        if targets
        else None
    )

    return {
        "userId": user_id,
        "period": period,
        "startDate": start_day.isoformat(),
        "endDate": end_day.isoformat(),
        "days": [log.to_dict() for log in logs],
        "totals": totals,
        "averages": averages,
        "targets": targets,
        "progress": progress,
    }
