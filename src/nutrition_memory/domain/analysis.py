"""Models for meal analysis results."""

import math
from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator

from nutrition_memory.domain.meals import TIERS, Tier


def coerce_number(value: object) -> float:
    """Coerce a loosely typed numeric value, falling back to zero."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


class AnalyzedItem(BaseModel):
    """Single food item returned by the analysis collaborator."""

    name: str = ""
    quantity: str = ""
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce_macro(cls, value: object) -> float:
        return coerce_number(value)

    @field_validator("name", "quantity", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)


class AnalyzedTotals(BaseModel):
    """Meal-level totals reported by the analysis collaborator."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce_macro(cls, value: object) -> float:
        return coerce_number(value)


class MealAnalysis(BaseModel):
    """Structured output for meal analysis."""

    name: str | None = None
    items: list[AnalyzedItem] = Field(default_factory=list)
    total: AnalyzedTotals = Field(default_factory=AnalyzedTotals)
    tier: Tier | None = None
    swaps: list[str] = Field(default_factory=list)
    insight: str = ""

    @field_validator("tier", mode="before")
    @classmethod
    def _known_tier(cls, value: object) -> str | None:
        if isinstance(value, str) and value.strip().upper() in TIERS:
            return value.strip().upper()
        return None

    @field_validator("swaps", mode="before")
    @classmethod
    def _swap_list(cls, value: object) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(swap) for swap in value if swap]

    @field_validator("insight", mode="before")
    @classmethod
    def _insight_text(cls, value: object) -> str:
        return "" if value is None else str(value)


@dataclass(frozen=True)
class AnalysisSucceeded:
    """Analysis returned a usable payload."""

    analysis: MealAnalysis


@dataclass(frozen=True)
class AnalysisUnavailable:
    """Analysis produced no result."""

    reason: str


AnalysisResult = AnalysisSucceeded | AnalysisUnavailable
