"""User profile models for plan requests."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Sex(StrEnum):
    """Biological sex category used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    """Ordinal activity categories."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class PlanGoal(StrEnum):
    """Calorie goal for a plan. Surplus plans are not offered."""

    MAINTENANCE = "maintenance"
    DEFICIT = "deficit"


class Cuisine(StrEnum):
    """Cuisine options offered to the user."""

    SOUTHEAST_ASIAN_FUSION = "Southeast Asian Fusion"
    CHINESE = "Chinese"
    INDIAN = "Indian"
    THAI = "Thai"
    INDONESIAN = "Indonesian"
    VIETNAMESE = "Vietnamese"
    MALAY = "Malay"
    FILIPINO = "Filipino"
    WESTERN = "Western"
    MIXED = "Mixed"
    OTHER = "Other"


@dataclass(frozen=True)
class EnergyTargets:
    """Derived energy values for a profile."""

    bmr: float
    tdee: int
    target_calories: int


class UserProfile(BaseModel):
    """Body metrics and preferences submitted for a plan."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    age: int = Field(ge=15, le=100)
    sex: Sex = Field(alias="gender")
    height_cm: float = Field(ge=100, le=250, alias="height")
    weight_kg: float = Field(ge=30, le=300, alias="weight")
    activity_level: ActivityLevel
    dietary_preference: str = "Normal"
    allergies: str = ""
    meals_per_day: int = Field(default=3, ge=2, le=4)
    include_snacks: bool = True
    snacks_per_day: int = Field(default=2, ge=1, le=3)
    cuisine_preference: Cuisine = Cuisine.SOUTHEAST_ASIAN_FUSION
    duration: Literal[1, 3, 5, 7, 30] = 3
    plan_goal: PlanGoal = PlanGoal.MAINTENANCE
    calculated_bmr: float | None = Field(default=None, ge=0, alias="calculatedBMR")
    calculated_tdee: float | None = Field(default=None, ge=0, alias="calculatedTDEE")
    target_calories: float | None = Field(default=None, ge=0)

    @property
    def snack_count(self) -> int:
        """Number of snacks per day, zero when snacks are disabled."""
        return self.snacks_per_day if self.include_snacks else 0

    def with_energy_targets(self, targets: EnergyTargets) -> "UserProfile":
        """Return a copy carrying the derived energy fields."""
        return self.model_copy(
            update={
                "calculated_bmr": max(targets.bmr, 0.0),
                "calculated_tdee": max(targets.tdee, 0),
                "target_calories": max(targets.target_calories, 0),
            }
        )
