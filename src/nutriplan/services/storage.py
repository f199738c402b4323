"""Persistent key-value state for the planner."""

from typing import Protocol

PROFILE_KEY = "nutriplan.profile"
PLAN_KEY = "nutriplan.plan"
FAVORITES_KEY = "nutriplan.favorites"
FOOD_LOG_KEY = "nutriplan.food_log"


class StateStore(Protocol):
    """Stores JSON-compatible values under fixed keys."""

    def load(self, key: str) -> object | None:
        """Return the stored value, if present."""

    def save(self, key: str, value: object) -> None:
        """Store a value, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Remove a stored value."""
