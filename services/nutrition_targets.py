import math
from typing import Any, Dict, List, Optional, Tuple

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

GOAL_ADJUSTMENTS = {
    "lose_weight": 0.85,
    "maintain": 1.0,
    "gain_muscle": 1.10,
}

# (protein, carbs, fats) share of total calories.
MACRO_SPLITS = {
    "maintain": (0.30, 0.40, 0.30),
    "lose_weight": (0.35, 0.35, 0.30),
    "gain_muscle": (0.30, 0.45, 0.25),
}

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9
FIBER_GRAMS_PER_1000_KCAL = 14


def round_half_up(value: float) -> int:
    """Round .5 upwards, unlike the banker's rounding of ``round``."""
    return int(math.floor(value + 0.5))


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None:
        return None
    return int(number)


def parse_measurements(
    weight: Any, height: Any, age: Any
) -> Tuple[Optional[Tuple[float, float, int]], List[str]]:
    """
    Coerce raw weight/height/age into numbers.

    Returns ``((weight, height, age), [])`` on success, or ``(None, fields)``
    naming every input that is absent or not a finite number.
    """
    parsed = {
        "weight": _to_float(weight),
        "height": _to_float(height),
        "age": _to_int(age),
    }
    invalid = [name for name, value in parsed.items() if value is None]
    if invalid:
        return None, invalid
    return (parsed["weight"], parsed["height"], parsed["age"]), []


def basal_metabolic_rate(weight: float, height: float, age: int, gender: Optional[str]) -> float:
    """Mifflin-St Jeor BMR; anything other than ``male`` uses the female constant."""
    base = 10 * weight + 6.25 * height - 5 * age
    if gender == "male":
        return base + 5
    return base - 161


def compute_targets(
    *,
    weight: Any,
    height: Any,
    age: Any,
    gender: Optional[str],
    activity_level: Optional[str],
    goal: Optional[str],
) -> Optional[Dict[str, int]]:
    """
    Daily calorie and macro targets for a profile.

    Returns ``None`` when the numeric inputs cannot be used; the caller keeps
    whatever targets it had before. Unknown activity levels count as
    sedentary and unknown goals as maintenance.
    """
    measurements, _ = parse_measurements(weight, height, age)
    if measurements is None:
        return None
    weight_kg, height_cm, age_years = measurements

    bmr = basal_metabolic_rate(weight_kg, height_cm, age_years, gender)
    multiplier = ACTIVITY_MULTIPLIERS.get(activity_level or "", DEFAULT_ACTIVITY_MULTIPLIER)
    calories = round_half_up(bmr * multiplier * GOAL_ADJUSTMENTS.get(goal or "", 1.0))

    protein_pct, carbs_pct, fats_pct = MACRO_SPLITS.get(goal or "", MACRO_SPLITS["maintain"])

    return {
        "calories": calories,
        "protein": round_half_up(calories * protein_pct / KCAL_PER_GRAM_PROTEIN),
        "carbs": round_half_up(calories * carbs_pct / KCAL_PER_GRAM_CARBS),
        "fats": round_half_up(calories * fats_pct / KCAL_PER_GRAM_FAT),
        "fiber": round_half_up(calories / 1000 * FIBER_GRAMS_PER_1000_KCAL),
    }
