"""Meal plan models returned by the content provider."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutriplan.domain.nutrition import MacroNutrients


class _PlanModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MealItem(_PlanModel):
    """Single dish within a meal."""

    name: str
    description: str
    calories: float = Field(ge=0.0)
    macros: MacroNutrients
    recipe_tip: str | None = None
    ingredients: list[str] | None = None
    instructions: list[str] | None = None


class MealGroup(_PlanModel):
    """A labelled meal (Breakfast, Lunch, Snack 1, ...) and its items."""

    type: str
    items: list[MealItem]


class DayPlan(_PlanModel):
    """One day of meals with its aggregate totals."""

    day: str
    meals: list[MealGroup]
    total_calories: float = Field(ge=0.0)
    daily_macros: MacroNutrients


class ShoppingCategory(_PlanModel):
    """Shopping list items grouped by store section."""

    category: str
    items: list[str]


class NutritionPlan(_PlanModel):
    """Complete multi-day plan with shopping list."""

    safe_calorie_range: str
    summary: str
    days: list[DayPlan]
    shopping_list: list[ShoppingCategory]

    def meal_item(self, day_index: int, group_index: int, item_index: int) -> MealItem:
        """Return the item at the given position, raising IndexError if absent."""
        _check_index(day_index, len(self.days), "day")
        day = self.days[day_index]
        _check_index(group_index, len(day.meals), "meal group")
        group = day.meals[group_index]
        _check_index(item_index, len(group.items), "meal item")
        return group.items[item_index]


def _check_index(index: int, size: int, label: str) -> None:
    if not 0 <= index < size:
        raise IndexError(f"No {label} at index {index}")
