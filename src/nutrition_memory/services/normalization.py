"""Lookup-key normalization for food names and meal descriptions."""

import re

LEADING_FILLERS = frozenset({"a", "an", "some", "of", "with", "made", "in"})
CONNECTORS = frozenset({"of", "with", "made", "in"})

_LEADING_FILLER_PATTERN = re.compile(
    r"^(?:" + "|".join(sorted(LEADING_FILLERS)) + r")\s+"
)
_CONNECTOR_PATTERN = re.compile(r"\s+(?:" + "|".join(sorted(CONNECTORS)) + r")\s+")


def normalize_food_name(name: str) -> str:
    """Return the density-library key for a food item name.

    Strips one leading filler word and collapses interior connectors to a
    single space. The pass is repeated until the key stops changing so the
    result is idempotent.
    """
    key = name.lower().strip()
    while True:
        collapsed = _CONNECTOR_PATTERN.sub(" ", _LEADING_FILLER_PATTERN.sub("", key))
        collapsed = collapsed.strip()
        if collapsed == key:
            return key
        key = collapsed


def normalize_description(description: str) -> str:
    """Return the phrase-cache key for a raw meal description."""
    return description.strip().lower()
