"""Content provider gateway: prompts, schemas and response validation."""

import base64
import logging
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from nutriplan.domain.food_log import FoodAnalysis
from nutriplan.domain.plan import MealItem, NutritionPlan
from nutriplan.domain.profile import UserProfile
from nutriplan.services.plan_views import format_day_label
from nutriplan.services.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    PLAN_SYSTEM_PROMPT,
    SWAP_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_plan_prompt,
    build_swap_prompt,
    planned_day_count,
)

_logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

MACROS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "protein": {"type": "number", "minimum": 0, "description": "grams"},
        "carbs": {"type": "number", "minimum": 0, "description": "grams"},
        "fats": {"type": "number", "minimum": 0, "description": "grams"},
    },
    "required": ["protein", "carbs", "fats"],
    "additionalProperties": False,
}

MEAL_ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "description": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "macros": MACROS_SCHEMA,
        "recipeTip": {
            "anyOf": [{"type": "string"}, {"type": "null"}],
            "description": "Chef tip: technique, flavor variation, substitution.",
        },
        "ingredients": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Each entry as 'Quantity Unit Ingredient'.",
        },
        "instructions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "3-4 cooking steps.",
        },
    },
    "required": [
        "name",
        "description",
        "calories",
        "macros",
        "recipeTip",
        "ingredients",
        "instructions",
    ],
    "additionalProperties": False,
}

DAY_PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "day": {"type": "string", "description": "Day 1, Day 2, ..."},
        "meals": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {
                        "type": "string",
                        "description": "Breakfast, Lunch, Dinner, Snack 1, ...",
                    },
                    "items": {"type": "array", "items": MEAL_ITEM_SCHEMA},
                },
                "required": ["type", "items"],
                "additionalProperties": False,
            },
        },
        "totalCalories": {"type": "number", "minimum": 0},
        "dailyMacros": MACROS_SCHEMA,
    },
    "required": ["day", "meals", "totalCalories", "dailyMacros"],
    "additionalProperties": False,
}

PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "safeCalorieRange": {"type": "string", "description": "e.g. 1800-2000 kcal"},
        "summary": {"type": "string"},
        "days": {"type": "array", "items": DAY_PLAN_SCHEMA},
        "shoppingList": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "items": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["category", "items"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["safeCalorieRange", "summary", "days", "shoppingList"],
    "additionalProperties": False,
}

FOOD_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "macros": MACROS_SCHEMA,
    },
    "required": ["name", "calories", "macros"],
    "additionalProperties": False,
}


class ContentClient(Protocol):
    """Interface for structured LLM generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return JSON output conforming to the schema."""


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """Validated value or the reason the call failed."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True when the call produced a valid value."""
        return self.error is None and self.value is not None


@dataclass
class ContentGateway:
    """Builds content requests and validates the responses."""

    client: ContentClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate_plan(self, profile: UserProfile) -> GatewayResult[NutritionPlan]:
        """Request a full multi-day plan for a profile with energy targets."""
        expected_days = planned_day_count(profile.duration)
        result = await self._call(
            NutritionPlan,
            action="plan",
            instructions=PLAN_SYSTEM_PROMPT,
            prompt=build_plan_prompt(profile),
            schema_name="nutrition_plan",
            schema=PLAN_SCHEMA,
        )
        if not result.ok:
            return result
        plan = result.value
        if len(plan.days) != expected_days:
            return _failure(
                "plan",
                f"expected {expected_days} days, got {len(plan.days)}",
            )
        days = [
            day.model_copy(update={"day": format_day_label(day.day)})
            for day in plan.days
        ]
        return GatewayResult(value=plan.model_copy(update={"days": days}))

    async def generate_alternative_meal(
        self, profile: UserProfile, current_item: MealItem, meal_type: str
    ) -> GatewayResult[MealItem]:
        """Request one replacement item for a meal slot."""
        return await self._call(
            MealItem,
            action="swap",
            instructions=SWAP_SYSTEM_PROMPT,
            prompt=build_swap_prompt(profile, current_item, meal_type),
            schema_name="meal_item",
            schema=MEAL_ITEM_SCHEMA,
        )

    async def analyze_food(
        self, description: str | None = None, image_bytes: bytes | None = None
    ) -> GatewayResult[FoodAnalysis]:
        """Estimate calories and macros from a description and/or a photo."""
        cleaned = description.strip() if description else None
        if not cleaned and not image_bytes:
            raise ValueError("A description or an image is required")
        return await self._call(
            FoodAnalysis,
            action="analysis",
            instructions=ANALYSIS_SYSTEM_PROMPT,
            prompt=build_analysis_prompt(cleaned, has_image=bool(image_bytes)),
            schema_name="food_analysis",
            schema=FOOD_ANALYSIS_SCHEMA,
            image_data_url=_to_data_url(image_bytes) if image_bytes else None,
        )

    async def _call(  # noqa: PLR0913
        self,
        model_cls: type[M],
        *,
        action: str,
        instructions: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> GatewayResult[M]:
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                instructions=instructions,
                prompt=prompt,
                schema_name=schema_name,
                schema=schema,
                image_data_url=image_data_url,
            )
        except Exception as exc:
            _logger.exception("Content provider %s request failed", action)
            return GatewayResult(error=f"{type(exc).__name__}: {exc}")
        try:
            return GatewayResult(value=model_cls.model_validate(raw))
        except ValidationError as exc:
            return _failure(action, f"response did not match schema: {exc}")


def _failure(action: str, reason: str) -> GatewayResult:
    _logger.warning("Content provider %s response rejected: %s", action, reason)
    return GatewayResult(error=reason)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
