"""Domain models for the food log."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from nutriplan.domain.nutrition import MacroNutrients


@dataclass(frozen=True)
class FoodLogEntry:
    """A logged food with its energy and macros."""

    id: str
    name: str
    calories: float
    macros: MacroNutrients
    timestamp: str
    day_number: int = 1


@dataclass(frozen=True)
class DailyIntake:
    """Summed intake for one plan day against a goal."""

    day_number: int
    calories: float
    protein: float
    carbs: float
    fats: float
    goal: float
    remaining: int
    progress_pct: float


class FoodAnalysis(BaseModel):
    """Structured output for a food description or photo."""

    name: str
    calories: float = Field(ge=0.0)
    macros: MacroNutrients
