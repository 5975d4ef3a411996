"""Phrase cache of previously computed meals."""

import logging
from dataclasses import asdict, dataclass, field, replace

from nutrition_memory.domain.analysis import coerce_number
from nutrition_memory.domain.meals import TIERS, FoodItem, MealCacheEntry
from nutrition_memory.services.macros import aggregate
from nutrition_memory.services.normalization import normalize_description

_logger = logging.getLogger(__name__)


@dataclass
class PhraseCache:
    """Mapping from normalized meal description to a cached meal.

    Every operation takes the raw description and applies
    ``normalize_description`` itself, so insert, lookup and removal always
    agree on the key.
    """

    _entries: dict[str, MealCacheEntry] = field(default_factory=dict)

    def lookup(self, description: str) -> MealCacheEntry | None:
        """Return the cached meal for a description, if any."""
        return self._entries.get(normalize_description(description))

    def upsert(self, description: str, entry: MealCacheEntry) -> None:
        """Store a meal under the description, replacing any prior entry.

        The stored totals are re-derived from the entry's items.
        """
        self._entries[normalize_description(description)] = replace(
            entry, macros=aggregate(entry.items)
        )

    def remove(self, description: str) -> bool:
        """Delete a cached meal, returning True when one was stored."""
        return self._entries.pop(normalize_description(description), None) is not None

    def entries(self) -> dict[str, MealCacheEntry]:
        """Return a copy of all cached meals keyed by normalized description."""
        return dict(self._entries)

    def export(self) -> dict[str, dict[str, object]]:
        """Serialize the cache into plain JSON-compatible data."""
        return {key: asdict(entry) for key, entry in self._entries.items()}

    def load(self, payload: dict[str, object]) -> None:
        """Replace the cache contents from serialized data."""
        self._entries = {}
        for key, raw in payload.items():
            if not isinstance(raw, dict):
                _logger.warning("Skipping malformed phrase entry: key=%s", key)
                continue
            self._entries[normalize_description(str(key))] = parse_cache_entry(raw)


def parse_cache_entry(raw: dict[str, object]) -> MealCacheEntry:
    """Parse a serialized cache entry, re-deriving totals from its items."""
    raw_items = raw.get("items")
    items = [
        parse_food_item(item)
        for item in (raw_items if isinstance(raw_items, list) else [])
        if isinstance(item, dict)
    ]
    tier = raw.get("tier")
    swaps = raw.get("swaps")
    return MealCacheEntry(
        name=str(raw.get("name") or "Meal"),
        items=items,
        macros=aggregate(items),
        insight=str(raw.get("insight") or ""),
        tier=tier if tier in TIERS else None,
        swaps=[str(swap) for swap in swaps] if isinstance(swaps, list) else [],
    )


def parse_food_item(raw: dict[str, object]) -> FoodItem:
    """Parse a serialized food item, coercing macros to numbers."""
    return FoodItem(
        name=str(raw.get("name") or ""),
        quantity=str(raw.get("quantity") or ""),
        calories=coerce_number(raw.get("calories")),
        protein=coerce_number(raw.get("protein")),
        carbs=coerce_number(raw.get("carbs")),
        fat=coerce_number(raw.get("fat")),
    )
