"""Session owner that persists the reconciliation engine's memory."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_memory.domain.meals import FoodItem, MacroTotals, Meal, MealCacheEntry
from nutrition_memory.domain.memory import FoodDensity
from nutrition_memory.services.macros import aggregate
from nutrition_memory.services.reconciliation import ReconciliationEngine

_logger = logging.getLogger(__name__)


class MemoryRepository(Protocol):
    """Persistence interface for memory snapshots."""

    def load_snapshot(self, owner_key: str) -> dict[str, object] | None:
        """Return the stored snapshot for an owner, if any."""

    def save_snapshot(self, owner_key: str, snapshot: dict[str, object]) -> None:
        """Store the full snapshot for an owner."""


@dataclass
class MemoryService:
    """Loads memory at startup and persists it after every mutation."""

    engine: ReconciliationEngine
    repository: MemoryRepository
    owner_key: str = "default"

    def load(self) -> None:
        """Load the stored snapshot into the engine."""
        snapshot = self.repository.load_snapshot(self.owner_key)
        self.engine.load(snapshot or {})
        _logger.info(
            "Loaded memory: owner=%s densities=%s phrases=%s",
            self.owner_key,
            len(self.engine.list_densities()),
            len(self.engine.list_phrases()),
        )

    async def reconcile(
        self,
        description: str,
        custom_name: str | None = None,
        want_insight: bool = True,
        *,
        goal: str | None = None,
        remaining_calories: float | None = None,
    ) -> Meal:
        """Reconcile a meal description and persist memory when it changed.

        A failed save is logged and the meal is still returned; the in-process
        memory keeps the update and the next successful save carries it.
        """
        revision = self.engine.revision
        meal = await self.engine.reconcile(
            description,
            custom_name,
            want_insight,
            goal=goal,
            remaining_calories=remaining_calories,
        )
        if self.engine.revision == revision:
            return meal
        try:
            self._persist()
        except RuntimeError:
            _logger.exception("Failed to persist memory: owner=%s", self.owner_key)
        return meal

    def edit_items(self, meal: Meal, items: list[FoodItem]) -> Meal:
        """Replace a meal's items and re-derive its totals."""
        return self.engine.replace_items(meal, items)

    def upsert_density(self, name: str, density: FoodDensity) -> str:
        """Store a density and persist."""
        key = self.engine.upsert_density(name, density)
        self._persist()
        return key

    def remove_density(self, name: str) -> bool:
        """Remove a density and persist when something changed."""
        removed = self.engine.remove_density(name)
        if removed:
            self._persist()
        return removed

    def upsert_phrase(self, description: str, entry: MealCacheEntry) -> None:
        """Store a cached meal and persist."""
        self.engine.upsert_phrase(description, entry)
        self._persist()

    def remove_phrase(self, description: str) -> bool:
        """Remove a cached meal and persist when something changed."""
        removed = self.engine.remove_phrase(description)
        if removed:
            self._persist()
        return removed

    def list_densities(self) -> dict[str, FoodDensity]:
        """Return all learned densities."""
        return self.engine.list_densities()

    def list_phrases(self) -> dict[str, MealCacheEntry]:
        """Return all cached meals."""
        return self.engine.list_phrases()

    @staticmethod
    def totals(items: list[FoodItem]) -> MacroTotals:
        """Return aggregate macros for an item list."""
        return aggregate(items)

    def _persist(self) -> None:
        self.repository.save_snapshot(self.owner_key, self.engine.export())
