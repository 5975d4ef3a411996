"""Quantity extraction from free-text portions."""

import re

DEFAULT_GRAMS = 100.0

_WEIGHT_PATTERN = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(?:grams|gram|grs|gr|g|milliliters|millilitres|ml)\b",
    re.IGNORECASE,
)
_LEADING_NUMBER_PATTERN = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")


def extract_grams(quantity: str | None) -> float:
    """Return the weight in grams described by a quantity fragment.

    A number followed by a gram or milliliter unit wins. Otherwise a leading
    bare number is read as a unit count ("2 eggs" -> 2). Anything else falls
    back to ``DEFAULT_GRAMS``.
    """
    if not quantity:
        return DEFAULT_GRAMS
    match = _WEIGHT_PATTERN.search(quantity)
    if match is None:
        match = _LEADING_NUMBER_PATTERN.search(quantity)
    if match is None:
        return DEFAULT_GRAMS
    return float(match.group(1).replace(",", "."))
