"""Tests for the content gateway."""

import asyncio
from dataclasses import dataclass

import pytest

from nutriplan.domain.plan import MealItem
from nutriplan.domain.profile import UserProfile
from nutriplan.services.energy import compute_energy_targets
from nutriplan.services.gateway import MEAL_ITEM_SCHEMA, PLAN_SCHEMA
from nutriplan.services.prompts import build_plan_prompt, planned_day_count
from tests.conftest import (
    FakeContentClient,
    make_gateway,
    make_profile,
    meal_item_payload,
    plan_payload,
)


@dataclass
class StaticContentClient:
    """Client returning a fixed payload for every request."""

    payload: dict[str, object]

    async def generate(self, **kwargs: object) -> dict[str, object]:
        return self.payload


def _enriched(**overrides: object) -> UserProfile:
    profile = make_profile(**overrides)
    return profile.with_energy_targets(compute_energy_targets(profile))


@pytest.mark.parametrize(
    ("duration", "expected"), [(1, 1), (3, 3), (5, 5), (7, 7), (30, 28)]
)
def test_planned_day_count(duration: int, expected: int) -> None:
    assert planned_day_count(duration) == expected


def test_generate_plan_returns_requested_days() -> None:
    client = FakeContentClient(plan_days=3)
    gateway = make_gateway(client)

    result = asyncio.run(gateway.generate_plan(_enriched()))

    assert result.ok
    assert [day.day for day in result.value.days] == ["Day 1", "Day 2", "Day 3"]
    assert client.calls[0]["schema_name"] == "nutrition_plan"


def test_month_plan_requests_four_weeks() -> None:
    client = FakeContentClient(plan_days=28)
    gateway = make_gateway(client)

    result = asyncio.run(gateway.generate_plan(_enriched(duration=30)))

    assert result.ok
    assert len(result.value.days) == 28
    assert result.value.days[0].day == "Day 1"
    assert result.value.days[27].day == "Day 28"
    prompt = client.calls[0]["prompt"]
    assert "4-week plan (28 days)" in prompt
    assert "'Day 1' through 'Day 28'" in prompt


def test_day_count_mismatch_is_an_error() -> None:
    gateway = make_gateway(FakeContentClient(plan_days=3))

    result = asyncio.run(gateway.generate_plan(_enriched(duration=5)))

    assert not result.ok
    assert result.value is None
    assert "expected 5 days, got 3" in result.error


def test_day_labels_are_normalized() -> None:
    payload = plan_payload(days=3)
    for index, day in enumerate(payload["days"]):
        day["day"] = str(index + 1)
    gateway = make_gateway(StaticContentClient(payload))

    result = asyncio.run(gateway.generate_plan(_enriched()))

    assert [day.day for day in result.value.days] == ["Day 1", "Day 2", "Day 3"]


def test_provider_error_fails_closed() -> None:
    gateway = make_gateway(FakeContentClient(fail=True))

    result = asyncio.run(gateway.generate_plan(_enriched()))

    assert not result.ok
    assert result.value is None
    assert "provider unavailable" in result.error


def test_schema_violation_is_an_error() -> None:
    gateway = make_gateway(StaticContentClient({"summary": "no days"}))

    result = asyncio.run(gateway.generate_plan(_enriched()))

    assert not result.ok
    assert "did not match schema" in result.error


def test_negative_calories_rejected() -> None:
    gateway = make_gateway(StaticContentClient(meal_item_payload(calories=-5)))
    current = MealItem.model_validate(meal_item_payload())

    result = asyncio.run(
        gateway.generate_alternative_meal(_enriched(), current, "Lunch")
    )

    assert not result.ok


def test_alternative_meal_prompt_names_current_item() -> None:
    client = FakeContentClient()
    gateway = make_gateway(client)
    current = MealItem.model_validate(meal_item_payload("Chicken Rice", 600))

    result = asyncio.run(
        gateway.generate_alternative_meal(_enriched(), current, "Lunch")
    )

    assert result.ok
    assert result.value.name == "Beef Pho"
    call = client.calls[0]
    assert call["schema_name"] == "meal_item"
    assert '"Chicken Rice" (600 kcal)' in call["prompt"]
    assert "Meal Type: Lunch" in call["prompt"]
    assert "within +/- 10%" in call["prompt"]


def test_analyze_food_requires_input() -> None:
    gateway = make_gateway(FakeContentClient())

    with pytest.raises(ValueError, match="description or an image"):
        asyncio.run(gateway.analyze_food("   ", None))


def test_analyze_food_from_description() -> None:
    client = FakeContentClient()
    gateway = make_gateway(client)

    result = asyncio.run(gateway.analyze_food("chicken salad with dressing"))

    assert result.ok
    assert result.value.name == "Grilled Chicken Salad"
    assert result.value.calories == 420
    assert client.calls[0]["image_data_url"] is None
    assert 'described as: "chicken salad with dressing"' in client.calls[0]["prompt"]


def test_analyze_food_sends_png_data_url() -> None:
    client = FakeContentClient()
    gateway = make_gateway(client)
    image = b"\x89PNG\r\n\x1a\nrest"

    result = asyncio.run(gateway.analyze_food(None, image))

    assert result.ok
    assert client.calls[0]["image_data_url"].startswith("data:image/png;base64,")
    assert "provided food image" in client.calls[0]["prompt"]


def test_plan_prompt_contains_targets_and_structure() -> None:
    prompt = build_plan_prompt(
        _enriched(plan_goal="deficit", allergies="peanuts", meals_per_day=4)
    )

    assert "Target Calorie Goal: 1750 kcal (Safe Deficit)" in prompt
    assert "Calculated BMR: 1451.5 kcal" in prompt
    assert "Allergies: peanuts" in prompt
    assert "exactly 4 main meals and 2 snacks" in prompt
    assert "Southeast Asian focus" in prompt


def test_plan_prompt_without_snacks() -> None:
    prompt = build_plan_prompt(
        _enriched(include_snacks=False, cuisine_preference="Western")
    )

    assert "Snacks per day: 0 (No snacks)" in prompt
    assert "exactly 3 main meals for each day" in prompt
    assert "Southeast Asian focus" not in prompt


def test_schemas_are_strict() -> None:
    assert PLAN_SCHEMA["additionalProperties"] is False
    assert set(MEAL_ITEM_SCHEMA["required"]) == set(MEAL_ITEM_SCHEMA["properties"])
