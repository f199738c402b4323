"""Energy targets from body metrics (Mifflin-St Jeor)."""

from nutriplan.domain.nutrition import round_half_up
from nutriplan.domain.profile import (
    ActivityLevel,
    EnergyTargets,
    PlanGoal,
    Sex,
    UserProfile,
)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

DEFICIT_KCAL = 500
FALLBACK_DEFICIT_RATIO = 0.85
MIN_DEFICIT_CALORIES = 1200


def compute_bmr(sex: Sex, age: int, height_cm: float, weight_kg: float) -> float:
    """Return basal metabolic rate in kcal/day.

    The "other" category uses the female offset.
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == Sex.MALE:
        return base + 5
    return base - 161


def compute_tdee(bmr: float, activity_level: ActivityLevel) -> int:
    """Return total daily energy expenditure, rounded to whole kcal."""
    return round_half_up(bmr * ACTIVITY_MULTIPLIERS[activity_level])


def compute_target_calories(bmr: float, tdee: int, goal: PlanGoal) -> int:
    """Return the daily calorie target for a goal.

    A deficit plan subtracts a fixed amount while that stays above BMR.
    Otherwise it falls back to a proportional cut floored at
    MIN_DEFICIT_CALORIES.
    """
    if goal == PlanGoal.MAINTENANCE:
        return tdee
    candidate = tdee - DEFICIT_KCAL
    if candidate > bmr:
        return candidate
    return max(MIN_DEFICIT_CALORIES, round_half_up(tdee * FALLBACK_DEFICIT_RATIO))


def compute_energy_targets(profile: UserProfile) -> EnergyTargets:
    """Compute BMR, TDEE and the target calories for a profile."""
    bmr = compute_bmr(
        profile.sex, profile.age, profile.height_cm, profile.weight_kg
    )
    tdee = compute_tdee(bmr, profile.activity_level)
    return EnergyTargets(
        bmr=bmr,
        tdee=tdee,
        target_calories=compute_target_calories(bmr, tdee, profile.plan_goal),
    )
