"""Keeps day totals consistent with their meal items."""

from nutriplan.domain.nutrition import MacroNutrients, round_half_up
from nutriplan.domain.plan import DayPlan, MealItem, NutritionPlan


def recompute_day_totals(day: DayPlan) -> DayPlan:
    """Return the day with totals summed from its items.

    Sums are rounded once at the end. Meal items are left as they are.
    """
    calories = 0.0
    protein = 0.0
    carbs = 0.0
    fats = 0.0
    for group in day.meals:
        for item in group.items:
            calories += item.calories
            protein += item.macros.protein
            carbs += item.macros.carbs
            fats += item.macros.fats
    return day.model_copy(
        update={
            "total_calories": round_half_up(calories),
            "daily_macros": MacroNutrients(
                protein=round_half_up(protein),
                carbs=round_half_up(carbs),
                fats=round_half_up(fats),
            ),
        }
    )


def recompute_plan_totals(plan: NutritionPlan) -> NutritionPlan:
    """Return the plan with every day's totals recomputed."""
    return plan.model_copy(
        update={"days": [recompute_day_totals(day) for day in plan.days]}
    )


def replace_meal_item(
    plan: NutritionPlan,
    day_index: int,
    group_index: int,
    item_index: int,
    new_item: MealItem,
) -> NutritionPlan:
    """Return a new plan with one item replaced and its day recomputed.

    Only the affected day is rebuilt; other days are shared with the input
    plan, which is not modified.
    """
    plan.meal_item(day_index, group_index, item_index)
    day = plan.days[day_index]
    group = day.meals[group_index]

    items = list(group.items)
    items[item_index] = new_item
    meals = list(day.meals)
    meals[group_index] = group.model_copy(update={"items": items})
    new_day = recompute_day_totals(day.model_copy(update={"meals": meals}))

    days = list(plan.days)
    days[day_index] = new_day
    return plan.model_copy(update={"days": days})
