"""Read-only views over a plan for display."""

from nutriplan.domain.nutrition import (
    KCAL_PER_GRAM,
    ZERO_MACROS,
    MacroNutrients,
    round_half_up,
)
from nutriplan.domain.plan import DayPlan, ShoppingCategory

WEEK_LENGTH = 7


def group_into_weeks(
    days: list[DayPlan], week_length: int = WEEK_LENGTH
) -> list[list[DayPlan]]:
    """Split days into consecutive weeks."""
    return [days[i : i + week_length] for i in range(0, len(days), week_length)]


def absolute_day_index(
    week_index: int, day_in_week: int, week_length: int = WEEK_LENGTH
) -> int:
    """Map a (week, day) position to an index into the full day list."""
    return week_index * week_length + day_in_week


def format_day_label(label: str) -> str:
    """Normalize labels such as "2" to "Day 2"."""
    cleaned = label.strip()
    if not cleaned:
        return ""
    if cleaned.lower().startswith("day"):
        return cleaned
    return f"Day {cleaned}"


def filter_shopping_list(
    shopping_list: list[ShoppingCategory], term: str | None
) -> list[ShoppingCategory]:
    """Keep items containing the term, dropping categories left empty."""
    if not term or not term.strip():
        return shopping_list
    lowered = term.strip().lower()
    filtered: list[ShoppingCategory] = []
    for category in shopping_list:
        items = [item for item in category.items if lowered in item.lower()]
        if items:
            filtered.append(category.model_copy(update={"items": items}))
    return filtered


def macro_calorie_shares(day: DayPlan) -> MacroNutrients:
    """Percent of the day's calories supplied by each macronutrient."""
    if day.total_calories <= 0:
        return ZERO_MACROS
    macros = day.daily_macros
    return MacroNutrients(
        protein=_share(macros.protein * KCAL_PER_GRAM["protein"], day.total_calories),
        carbs=_share(macros.carbs * KCAL_PER_GRAM["carbs"], day.total_calories),
        fats=_share(macros.fats * KCAL_PER_GRAM["fats"], day.total_calories),
    )


def _share(kcal: float, total: float) -> int:
    return round_half_up(kcal / total * 100)
