"""Nutrition primitives shared across the planner."""

import math

from pydantic import BaseModel, ConfigDict, Field

KCAL_PER_GRAM: dict[str, int] = {
    "protein": 4,
    "carbs": 4,
    "fats": 9,
}


class MacroNutrients(BaseModel):
    """Macronutrient amounts in grams."""

    model_config = ConfigDict(frozen=True)

    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)


ZERO_MACROS = MacroNutrients(protein=0, carbs=0, fats=0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)
