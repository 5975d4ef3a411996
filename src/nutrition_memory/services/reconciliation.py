"""Reconciliation of analyzed meals against learned memory."""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import uuid4

from nutrition_memory.domain.analysis import AnalysisUnavailable, MealAnalysis
from nutrition_memory.domain.meals import FoodItem, Meal, MealCacheEntry
from nutrition_memory.domain.memory import FoodDensity
from nutrition_memory.services.analysis import MealAnalysisService
from nutrition_memory.services.density import DensityLibrary, derive_density
from nutrition_memory.services.macros import aggregate, scale_density
from nutrition_memory.services.normalization import normalize_food_name
from nutrition_memory.services.phrases import PhraseCache
from nutrition_memory.services.quantities import extract_grams

DEFAULT_MEAL_NAME = "Meal"

_logger = logging.getLogger(__name__)


class AnalysisUnavailableError(RuntimeError):
    """Raised when a meal cannot be analyzed and has no cached record."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Meal analysis unavailable: {reason}")
        self.reason = reason


class EmptyDescriptionError(ValueError):
    """Raised when a meal description is blank."""


@dataclass
class ReconciliationEngine:
    """Owns the density library and phrase cache for one session.

    ``reconcile`` answers from the phrase cache when it can. Otherwise it asks
    the analysis service, lets learned densities override the analyzed macros,
    seeds densities for unknown foods and caches the finished meal.
    """

    analysis_service: MealAnalysisService
    densities: DensityLibrary = field(default_factory=DensityLibrary)
    phrases: PhraseCache = field(default_factory=PhraseCache)
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )
    _revision: int = field(default=0, init=False, repr=False)

    @property
    def revision(self) -> int:
        """Counter bumped by every change to either store."""
        return self._revision

    async def reconcile(
        self,
        description: str,
        custom_name: str | None = None,
        want_insight: bool = True,
        *,
        goal: str | None = None,
        remaining_calories: float | None = None,
    ) -> Meal:
        """Return a meal record for a raw description."""
        if not description.strip():
            raise EmptyDescriptionError("Meal description is empty")

        with self._lock:
            cached = self.phrases.lookup(description)
        if cached is not None:
            _logger.info("Phrase cache hit: %s", description.strip().lower())
            return _build_meal(description, cached, custom_name, want_insight)

        _logger.info("Phrase cache miss: %s", description.strip().lower())
        result = await self.analysis_service.analyze(
            description, goal=goal, remaining_calories=remaining_calories
        )
        if isinstance(result, AnalysisUnavailable):
            raise AnalysisUnavailableError(result.reason)

        with self._lock:
            entry = self._resolve(result.analysis)
            self.phrases.upsert(description, entry)
            self._revision += 1
        return _build_meal(description, entry, custom_name, want_insight)

    def replace_items(self, meal: Meal, items: list[FoodItem]) -> Meal:
        """Return the meal with a new item list and re-derived totals."""
        return replace(meal, items=list(items), macros=aggregate(items))

    def upsert_density(self, name: str, density: FoodDensity) -> str:
        """Store a density under the normalized name and return the key."""
        key = normalize_food_name(name)
        with self._lock:
            self.densities.upsert(key, density)
            self._revision += 1
        return key

    def remove_density(self, name: str) -> bool:
        """Delete the density stored for a food name."""
        with self._lock:
            removed = self.densities.remove(normalize_food_name(name))
            if removed:
                self._revision += 1
            return removed

    def upsert_phrase(self, description: str, entry: MealCacheEntry) -> None:
        """Store a cached meal, re-deriving its totals from the items."""
        with self._lock:
            self.phrases.upsert(description, entry)
            self._revision += 1

    def remove_phrase(self, description: str) -> bool:
        """Delete the cached meal stored for a description."""
        with self._lock:
            removed = self.phrases.remove(description)
            if removed:
                self._revision += 1
            return removed

    def list_densities(self) -> dict[str, FoodDensity]:
        """Return all learned densities."""
        with self._lock:
            return self.densities.entries()

    def list_phrases(self) -> dict[str, MealCacheEntry]:
        """Return all cached meals."""
        with self._lock:
            return self.phrases.entries()

    def export(self) -> dict[str, object]:
        """Serialize both stores into a snapshot."""
        with self._lock:
            return {
                "densities": self.densities.export(),
                "phrases": self.phrases.export(),
            }

    def load(self, snapshot: dict[str, object]) -> None:
        """Replace both stores from a snapshot."""
        densities = snapshot.get("densities")
        phrases = snapshot.get("phrases")
        with self._lock:
            self.densities.load(densities if isinstance(densities, dict) else {})
            self.phrases.load(phrases if isinstance(phrases, dict) else {})
            self._revision += 1

    def _resolve(self, analysis: MealAnalysis) -> MealCacheEntry:
        items: list[FoodItem] = []
        for analyzed in analysis.items:
            key = normalize_food_name(analyzed.name)
            grams = extract_grams(analyzed.quantity)
            density = self.densities.lookup(key)
            if density is not None:
                _logger.debug("Density override: key=%s grams=%s", key, grams)
                items.append(
                    scale_density(analyzed.name, analyzed.quantity, density, grams)
                )
                continue
            item = FoodItem(
                name=analyzed.name,
                quantity=analyzed.quantity,
                calories=analyzed.calories,
                protein=analyzed.protein,
                carbs=analyzed.carbs,
                fat=analyzed.fat,
            )
            items.append(item)
            if not key:
                continue
            self.densities.upsert(key, derive_density(item, grams))
            _logger.info("Learned density: key=%s grams=%s", key, grams)
        return MealCacheEntry(
            name=analysis.name or DEFAULT_MEAL_NAME,
            items=items,
            macros=aggregate(items),
            insight=analysis.insight,
            tier=analysis.tier,
            swaps=list(analysis.swaps),
        )


def _build_meal(
    description: str,
    entry: MealCacheEntry,
    custom_name: str | None,
    want_insight: bool,
) -> Meal:
    return Meal(
        id=uuid4(),
        timestamp=datetime.now(tz=UTC),
        description=description,
        name=(custom_name or "").strip() or entry.name or DEFAULT_MEAL_NAME,
        items=list(entry.items),
        macros=entry.macros,
        insight=entry.insight if want_insight else None,
        tier=entry.tier if want_insight else None,
        swaps=list(entry.swaps) if want_insight else None,
    )
