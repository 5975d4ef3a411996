"""Macro aggregation over food item lists."""

import math
from collections.abc import Iterable

from nutrition_memory.domain.analysis import coerce_number
from nutrition_memory.domain.meals import FoodItem, MacroTotals, Meal
from nutrition_memory.domain.memory import FoodDensity


def aggregate(items: Iterable[FoodItem]) -> MacroTotals:
    """Sum item macros; non-numeric values contribute zero."""
    calories = protein = carbs = fat = 0.0
    for item in items:
        calories += coerce_number(item.calories)
        protein += coerce_number(item.protein)
        carbs += coerce_number(item.carbs)
        fat += coerce_number(item.fat)
    return MacroTotals(calories=calories, protein=protein, carbs=carbs, fat=fat)


def scale_density(
    name: str, quantity: str, density: FoodDensity, grams: float
) -> FoodItem:
    """Compute an item's macros from a known density and weight."""
    return FoodItem(
        name=name,
        quantity=quantity,
        calories=round_half_up(density.calories_per_gram * grams),
        protein=round_half_up(density.protein_per_gram * grams, 1),
        carbs=round_half_up(density.carbs_per_gram * grams, 1),
        fat=round_half_up(density.fat_per_gram * grams, 1),
    )


def remaining_calories(target_calories: float, meals: Iterable[Meal]) -> float:
    """Return the calories left for the day after the given meals."""
    consumed = sum(meal.macros.calories for meal in meals)
    return target_calories - consumed


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
