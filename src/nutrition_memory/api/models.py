"""Pydantic models for API payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from nutrition_memory.domain.analysis import coerce_number
from nutrition_memory.domain.meals import (
    FoodItem,
    MacroTotals,
    Meal,
    MealCacheEntry,
    Tier,
)
from nutrition_memory.domain.memory import FoodDensity


class FoodItemPayload(BaseModel):
    """Food item as edited by a client."""

    name: str
    quantity: str = ""
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce_macro(cls, value: object) -> float:
        return coerce_number(value)

    def to_domain(self) -> FoodItem:
        """Convert to a domain food item."""
        return FoodItem(
            name=self.name,
            quantity=self.quantity,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


class MacroTotalsPayload(BaseModel):
    """Aggregate macros."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class AnalyzeMealRequest(BaseModel):
    """Request to log a meal from a free-text description."""

    description: str
    name: str | None = None
    include_insight: bool = True
    goal: str | None = None
    remaining_calories: float | None = None

    @field_validator("description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value


class ItemsRequest(BaseModel):
    """Request carrying a list of food items."""

    items: list[FoodItemPayload]

    def to_domain(self) -> list[FoodItem]:
        """Convert to domain food items."""
        return [item.to_domain() for item in self.items]


class MealPayload(BaseModel):
    """Meal record exchanged with clients."""

    id: UUID
    timestamp: datetime
    description: str
    name: str
    items: list[FoodItemPayload]
    macros: MacroTotalsPayload = Field(default_factory=MacroTotalsPayload)
    insight: str | None = None
    tier: Tier | None = None
    swaps: list[str] | None = None

    def to_domain(self) -> Meal:
        """Convert to a domain meal."""
        return Meal(
            id=self.id,
            timestamp=self.timestamp,
            description=self.description,
            name=self.name,
            items=[item.to_domain() for item in self.items],
            macros=MacroTotals(
                calories=self.macros.calories,
                protein=self.macros.protein,
                carbs=self.macros.carbs,
                fat=self.macros.fat,
            ),
            insight=self.insight,
            tier=self.tier,
            swaps=self.swaps,
        )


class DensityPayload(BaseModel):
    """Manually provided food density."""

    calories_per_gram: float = Field(ge=0.0)
    protein_per_gram: float = Field(ge=0.0)
    carbs_per_gram: float = Field(ge=0.0)
    fat_per_gram: float = Field(ge=0.0)
    last_quantity: str = ""

    def to_domain(self) -> FoodDensity:
        """Convert to a domain density."""
        return FoodDensity(
            calories_per_gram=self.calories_per_gram,
            protein_per_gram=self.protein_per_gram,
            carbs_per_gram=self.carbs_per_gram,
            fat_per_gram=self.fat_per_gram,
            last_quantity=self.last_quantity,
        )


class PhrasePayload(BaseModel):
    """Manually provided cached meal for a description."""

    description: str
    name: str = "Meal"
    items: list[FoodItemPayload]
    insight: str = ""
    tier: Tier | None = None
    swaps: list[str] = Field(default_factory=list)

    @field_validator("description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value

    def to_domain(self) -> MealCacheEntry:
        """Convert to a cache entry; totals are re-derived on store."""
        return MealCacheEntry(
            name=self.name,
            items=[item.to_domain() for item in self.items],
            macros=MacroTotals(0.0, 0.0, 0.0, 0.0),
            insight=self.insight,
            tier=self.tier,
            swaps=list(self.swaps),
        )
