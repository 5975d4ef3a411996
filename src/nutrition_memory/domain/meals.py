"""Domain models for meals and their cached templates."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import UUID

Tier = Literal["S", "A", "B", "C", "D"]

TIERS: frozenset[str] = frozenset({"S", "A", "B", "C", "D"})


@dataclass(frozen=True)
class FoodItem:
    """One ingredient line within a meal."""

    name: str
    quantity: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MacroTotals:
    """Aggregate macros for a list of food items."""

    calories: float
    protein: float
    carbs: float
    fat: float

    def display(self) -> "MacroTotals":
        """Return totals rounded for display."""
        return MacroTotals(
            calories=float(round(self.calories)),
            protein=round(self.protein, 1),
            carbs=round(self.carbs, 1),
            fat=round(self.fat, 1),
        )


@dataclass(frozen=True)
class MealCacheEntry:
    """Previously computed meal stored under its description."""

    name: str
    items: list[FoodItem]
    macros: MacroTotals
    insight: str
    tier: Tier | None = None
    swaps: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Meal:
    """Meal record produced by the reconciliation engine."""

    id: UUID
    timestamp: datetime
    description: str
    name: str
    items: list[FoodItem]
    macros: MacroTotals
    insight: str | None = None
    tier: Tier | None = None
    swaps: list[str] | None = None
