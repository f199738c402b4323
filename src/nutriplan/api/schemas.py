"""Request bodies for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutriplan.domain.nutrition import ZERO_MACROS, MacroNutrients
from nutriplan.domain.plan import MealItem


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MealSlot(_RequestModel):
    """Position of a meal item in the current plan."""

    day_index: int = Field(ge=0)
    group_index: int = Field(ge=0)
    item_index: int = Field(ge=0)


class SwapRequest(MealSlot):
    """Swap the item at a slot for an alternative."""

    meal_type: str | None = None
    current_item: MealItem | None = None


class ManualLogRequest(_RequestModel):
    """Manually logged food."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    macros: MacroNutrients = ZERO_MACROS
    day_number: int = Field(default=1, ge=1)


class AnalyzeRequest(_RequestModel):
    """Food description and/or base64 photo (optionally a data URL)."""

    description: str | None = None
    image_base64: str | None = None
