"""Domain models for learned food densities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodDensity:
    """Per-gram macro rates learned for a normalized food name."""

    calories_per_gram: float
    protein_per_gram: float
    carbs_per_gram: float
    fat_per_gram: float
    last_quantity: str
