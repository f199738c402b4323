"""Favorite meals service."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from nutriplan.domain.plan import MealItem
from nutriplan.services.storage import FAVORITES_KEY, StateStore

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesService:
    """Keeps a list of favorite meals, identified by name."""

    store: StateStore

    def list_favorites(self) -> list[MealItem]:
        """Return saved favorites in the order they were added."""
        raw = self.store.load(FAVORITES_KEY)
        if not isinstance(raw, list):
            return []
        favorites: list[MealItem] = []
        for row in raw:
            try:
                favorites.append(MealItem.model_validate(row))
            except ValidationError:
                _logger.warning("Skipping malformed favorite entry")
        return favorites

    def is_favorite(self, name: str) -> bool:
        """Return True when a meal with this name is saved."""
        return any(item.name == name for item in self.list_favorites())

    def toggle(self, item: MealItem) -> bool:
        """Add the meal, or remove it if already saved; return True if added."""
        favorites = self.list_favorites()
        remaining = [saved for saved in favorites if saved.name != item.name]
        if len(remaining) != len(favorites):
            self._save(remaining)
            return False
        favorites.append(item)
        self._save(favorites)
        return True

    def remove(self, name: str) -> bool:
        """Remove a favorite by name; return False when it is not saved."""
        favorites = self.list_favorites()
        remaining = [saved for saved in favorites if saved.name != name]
        if len(remaining) == len(favorites):
            return False
        self._save(remaining)
        return True

    def _save(self, favorites: list[MealItem]) -> None:
        self.store.save(
            FAVORITES_KEY,
            [item.model_dump(mode="json", by_alias=True) for item in favorites],
        )
