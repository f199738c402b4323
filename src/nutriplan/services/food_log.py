"""Food logging service."""

import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from uuid import uuid4

from nutriplan.domain.errors import FoodAnalysisFailure
from nutriplan.domain.food_log import DailyIntake, FoodAnalysis, FoodLogEntry
from nutriplan.domain.nutrition import MacroNutrients, round_half_up
from nutriplan.domain.plan import MealItem
from nutriplan.services.gateway import ContentGateway
from nutriplan.services.storage import FOOD_LOG_KEY, StateStore

_logger = logging.getLogger(__name__)


@dataclass
class FoodLogService:
    """Records eaten foods per plan day and summarizes intake."""

    gateway: ContentGateway
    store: StateStore

    def add_entry(
        self,
        name: str,
        calories: float,
        macros: MacroNutrients,
        day_number: int = 1,
    ) -> FoodLogEntry:
        """Log a food and return the stored entry."""
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Food name is required")
        if calories < 0:
            raise ValueError("Calories must not be negative")
        if day_number < 1:
            raise ValueError("Day number starts at 1")
        entry = FoodLogEntry(
            id=str(uuid4()),
            name=cleaned,
            calories=float(calories),
            macros=macros,
            timestamp=datetime.now(tz=UTC).isoformat(),
            day_number=day_number,
        )
        entries = self.list_entries()
        entries.append(entry)
        self._save(entries)
        return entry

    def log_meal_item(self, item: MealItem, day_number: int) -> FoodLogEntry:
        """Log a planned meal as eaten on a plan day."""
        return self.add_entry(item.name, item.calories, item.macros, day_number)

    async def analyze(
        self, description: str | None = None, image_bytes: bytes | None = None
    ) -> FoodAnalysis:
        """Estimate a food's calories and macros without logging it."""
        result = await self.gateway.analyze_food(description, image_bytes)
        if not result.ok:
            raise FoodAnalysisFailure(result.error)
        return result.value

    def remove_entry(self, entry_id: str) -> bool:
        """Delete an entry by id; return False when it does not exist."""
        entries = self.list_entries()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self._save(remaining)
        return True

    def list_entries(self, day_number: int | None = None) -> list[FoodLogEntry]:
        """Return logged entries, optionally for a single plan day."""
        raw = self.store.load(FOOD_LOG_KEY)
        entries = [
            entry
            for entry in (_entry_from_dict(row) for row in _as_rows(raw))
            if entry is not None
        ]
        if day_number is None:
            return entries
        return [entry for entry in entries if entry.day_number == day_number]

    def daily_intake(self, day_number: int, daily_goal: float) -> DailyIntake:
        """Sum a day's entries and compare them with the goal."""
        entries = self.list_entries(day_number)
        calories = sum(entry.calories for entry in entries)
        progress = min(100.0, calories / daily_goal * 100) if daily_goal > 0 else 0.0
        return DailyIntake(
            day_number=day_number,
            calories=calories,
            protein=sum(entry.macros.protein for entry in entries),
            carbs=sum(entry.macros.carbs for entry in entries),
            fats=sum(entry.macros.fats for entry in entries),
            goal=daily_goal,
            remaining=max(0, round_half_up(daily_goal - round_half_up(calories))),
            progress_pct=progress,
        )

    def _save(self, entries: list[FoodLogEntry]) -> None:
        self.store.save(FOOD_LOG_KEY, [_entry_to_dict(entry) for entry in entries])


def _as_rows(raw: object) -> list[dict[str, object]]:
    if not isinstance(raw, list):
        return []
    return [row for row in raw if isinstance(row, dict)]


def _entry_to_dict(entry: FoodLogEntry) -> dict[str, object]:
    payload = asdict(entry)
    payload["macros"] = entry.macros.model_dump()
    payload["dayNumber"] = payload.pop("day_number")
    return payload


def _entry_from_dict(row: dict[str, object]) -> FoodLogEntry | None:
    macros = row.get("macros") or {}
    try:
        return FoodLogEntry(
            id=str(row["id"]),
            name=str(row["name"]),
            calories=float(row.get("calories") or 0.0),
            macros=MacroNutrients(
                protein=float(macros.get("protein") or 0.0),
                carbs=float(macros.get("carbs") or 0.0),
                fats=float(macros.get("fats") or 0.0),
            ),
            timestamp=str(row.get("timestamp", "")),
            day_number=int(row.get("dayNumber") or 1),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        _logger.warning("Skipping malformed food log entry: %s", row.get("id"))
        return None
