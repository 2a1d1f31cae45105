"""Goal and BMI calculations for the profile/stats overlay."""

from __future__ import annotations

from typing import Optional

from app.core.constants import BMI_NORMAL_BELOW, BMI_OVERWEIGHT_BELOW, BMI_UNDERWEIGHT_BELOW
from app.core.enums import BmiCategory
from app.schemas.settings import UserSettingsRead
from app.schemas.stats import GoalProgress
from app.services.aggregation import round1


def bmi(weight_kg: Optional[float], height_cm: Optional[float]) -> Optional[float]:
    """weight / height_m^2, rounded to 0.1. None if either input is missing or non-positive."""
    if not weight_kg or not height_cm or weight_kg <= 0 or height_cm <= 0:
        return None
    height_m = height_cm / 100
    return round1(weight_kg / (height_m ** 2))


def bmi_category(value: float) -> BmiCategory:
    if value < BMI_UNDERWEIGHT_BELOW:
        return BmiCategory.UNDERWEIGHT
    if value < BMI_NORMAL_BELOW:
        return BmiCategory.NORMAL
    if value < BMI_OVERWEIGHT_BELOW:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def goal_delta(latest_weight: float, target_weight: float) -> float:
    """Positive = still above target; zero or negative = goal met."""
    return round1(latest_weight - target_weight)


def goal_progress_ratio(latest_weight: Optional[float], target_weight: Optional[float]) -> Optional[float]:
    """Progress-bar fill in [0, 1]: target / latest, clamped."""
    if target_weight is None or not latest_weight or latest_weight <= 0:
        return None
    return max(0.0, min(1.0, target_weight / latest_weight))


def goal_progress(latest_weight: Optional[float], settings: UserSettingsRead) -> GoalProgress:
    """Goal delta, progress and BMI (current and at target) for the latest weight against the saved profile.

    A latest weight of 0 (the empty-summary sentinel) counts as "no data".
    """
    latest = latest_weight if latest_weight and latest_weight > 0 else None
    target = settings.target_weight
    value = bmi(latest, settings.height)
    target_value = bmi(target, settings.height)
    return GoalProgress(
        latest_weight=latest,
        target_weight=target,
        delta=goal_delta(latest, target) if latest is not None and target is not None else None,
        progress_ratio=goal_progress_ratio(latest, target),
        bmi=value,
        bmi_category=bmi_category(value) if value is not None else None,
        target_bmi=target_value,
        target_bmi_category=bmi_category(target_value) if target_value is not None else None,
    )
