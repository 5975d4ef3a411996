"""Density library of learned per-gram macro rates."""

import logging
from dataclasses import asdict, dataclass, field

from nutrition_memory.domain.analysis import coerce_number
from nutrition_memory.domain.meals import FoodItem
from nutrition_memory.domain.memory import FoodDensity

_logger = logging.getLogger(__name__)


@dataclass
class DensityLibrary:
    """Mapping from normalized food name to its latest learned density."""

    _entries: dict[str, FoodDensity] = field(default_factory=dict)

    def lookup(self, key: str) -> FoodDensity | None:
        """Return the density stored for a normalized name, if any."""
        return self._entries.get(key)

    def upsert(self, key: str, density: FoodDensity) -> None:
        """Replace any prior density stored for the key."""
        self._entries[key] = density

    def remove(self, key: str) -> bool:
        """Delete a density, returning True when one was stored."""
        return self._entries.pop(key, None) is not None

    def entries(self) -> dict[str, FoodDensity]:
        """Return a copy of all stored densities."""
        return dict(self._entries)

    def export(self) -> dict[str, dict[str, object]]:
        """Serialize the library into plain JSON-compatible data."""
        return {key: asdict(density) for key, density in self._entries.items()}

    def load(self, payload: dict[str, object]) -> None:
        """Replace the library contents from serialized data."""
        self._entries = {}
        for key, raw in payload.items():
            if not isinstance(raw, dict):
                _logger.warning("Skipping malformed density entry: key=%s", key)
                continue
            self._entries[str(key)] = _parse_density(raw)


def derive_density(item: FoodItem, grams: float) -> FoodDensity:
    """Derive per-gram rates from an item's absolute macros."""
    divisor = max(grams, 1.0)
    return FoodDensity(
        calories_per_gram=max(item.calories, 0.0) / divisor,
        protein_per_gram=max(item.protein, 0.0) / divisor,
        carbs_per_gram=max(item.carbs, 0.0) / divisor,
        fat_per_gram=max(item.fat, 0.0) / divisor,
        last_quantity=item.quantity,
    )


def _parse_density(raw: dict[str, object]) -> FoodDensity:
    return FoodDensity(
        calories_per_gram=max(coerce_number(raw.get("calories_per_gram")), 0.0),
        protein_per_gram=max(coerce_number(raw.get("protein_per_gram")), 0.0),
        carbs_per_gram=max(coerce_number(raw.get("carbs_per_gram")), 0.0),
        fat_per_gram=max(coerce_number(raw.get("fat_per_gram")), 0.0),
        last_quantity=str(raw.get("last_quantity") or ""),
    )
