"""Tests for plan display helpers."""

import pytest

from nutriplan.domain.plan import DayPlan, NutritionPlan, ShoppingCategory
from nutriplan.services.plan_views import (
    absolute_day_index,
    filter_shopping_list,
    format_day_label,
    group_into_weeks,
    macro_calorie_shares,
)
from tests.conftest import day_payload, plan_payload


def _days(count: int) -> list[DayPlan]:
    return NutritionPlan.model_validate(plan_payload(days=count)).days


def test_group_into_weeks_splits_long_plan() -> None:
    weeks = group_into_weeks(_days(28))

    assert [len(week) for week in weeks] == [7, 7, 7, 7]
    assert weeks[3][6].day == "Day 28"


def test_group_into_weeks_keeps_partial_week() -> None:
    assert [len(week) for week in group_into_weeks(_days(10))] == [7, 3]
    assert [len(week) for week in group_into_weeks(_days(3))] == [3]
    assert group_into_weeks([]) == []


def test_absolute_day_index_round_trips_weeks() -> None:
    days = _days(28)
    weeks = group_into_weeks(days)

    for week_index, week in enumerate(weeks):
        for position, day in enumerate(week):
            assert days[absolute_day_index(week_index, position)] is day


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Day 3", "Day 3"),
        ("3", "Day 3"),
        ("  4 ", "Day 4"),
        ("day 5", "day 5"),
        ("Monday", "Day Monday"),
        ("", ""),
        ("   ", ""),
    ],
)
def test_format_day_label(label: str, expected: str) -> None:
    assert format_day_label(label) == expected


def _shopping_list() -> list[ShoppingCategory]:
    return NutritionPlan.model_validate(plan_payload(days=1)).shopping_list


def test_filter_shopping_list_is_case_insensitive() -> None:
    filtered = filter_shopping_list(_shopping_list(), "CHICKEN")

    assert [category.category for category in filtered] == ["Meat"]
    assert filtered[0].items == ["Chicken Breast"]


def test_filter_shopping_list_drops_empty_categories() -> None:
    filtered = filter_shopping_list(_shopping_list(), "tomato")

    assert len(filtered) == 1
    assert filtered[0].category == "Produce"
    assert filtered[0].items == ["Cherry Tomatoes"]


def test_filter_shopping_list_blank_term_returns_all() -> None:
    shopping_list = _shopping_list()

    assert filter_shopping_list(shopping_list, None) == shopping_list
    assert filter_shopping_list(shopping_list, "  ") == shopping_list


def test_filter_shopping_list_no_match() -> None:
    assert filter_shopping_list(_shopping_list(), "salmon") == []


def test_macro_calorie_shares() -> None:
    shares = macro_calorie_shares(DayPlan.model_validate(day_payload("Day 1")))

    assert shares.protein == 20
    assert shares.carbs == 40
    assert shares.fats == 23


def test_macro_calorie_shares_zero_calorie_day() -> None:
    payload = day_payload("Day 1")
    payload["totalCalories"] = 0
    shares = macro_calorie_shares(DayPlan.model_validate(payload))

    assert (shares.protein, shares.carbs, shares.fats) == (0, 0, 0)
