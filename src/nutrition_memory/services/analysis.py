"""Meal analysis service using LLMs."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutrition_memory.domain.analysis import (
    AnalysisResult,
    AnalysisSucceeded,
    AnalysisUnavailable,
    MealAnalysis,
)

_logger = logging.getLogger(__name__)

_MACRO_PROPERTIES: dict[str, object] = {
    "calories": {"type": "number"},
    "protein": {"type": "number"},
    "carbs": {"type": "number"},
    "fat": {"type": "number"},
}

MEAL_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "string"},
                    **_MACRO_PROPERTIES,
                },
                "required": ["name", "quantity", "calories", "protein", "carbs", "fat"],
                "additionalProperties": False,
            },
        },
        "total": {
            "type": "object",
            "properties": _MACRO_PROPERTIES,
            "required": ["calories", "protein", "carbs", "fat"],
            "additionalProperties": False,
        },
        "tier": {"type": "string", "enum": ["S", "A", "B", "C", "D"]},
        "swaps": {"type": "array", "items": {"type": "string"}},
        "insight": {"type": "string"},
    },
    "required": ["name", "items", "total", "tier", "swaps", "insight"],
    "additionalProperties": False,
}


class MealAnalysisClient(Protocol):
    """Interface for LLM meal analysis."""

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured meal analysis data."""


@dataclass
class MealAnalysisService:
    """Service that prepares analysis prompts and validates results."""

    client: MealAnalysisClient
    model: str
    reasoning_effort: str | None
    store: bool
    timeout_seconds: float = 45.0

    async def analyze(
        self,
        description: str,
        goal: str | None = None,
        remaining_calories: float | None = None,
    ) -> AnalysisResult:
        """Analyze a meal description, reporting failures as unavailable."""
        prompt = build_prompt(description, goal, remaining_calories)
        try:
            raw = await asyncio.wait_for(
                self.client.analyze(
                    model=self.model,
                    reasoning_effort=self.reasoning_effort,
                    store=self.store,
                    schema=MEAL_ANALYSIS_SCHEMA,
                    prompt=prompt,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            _logger.warning("Meal analysis call was cancelled")
            return AnalysisUnavailable(reason="cancelled")
        except TimeoutError:
            _logger.warning("Meal analysis timed out after %ss", self.timeout_seconds)
            return AnalysisUnavailable(reason="timeout")
        except Exception as exc:
            _logger.warning("Meal analysis failed: %s", exc)
            return AnalysisUnavailable(reason=str(exc) or type(exc).__name__)

        if not isinstance(raw, dict):
            return AnalysisUnavailable(reason="empty response")
        try:
            analysis = MealAnalysis.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Meal analysis returned an invalid payload: %s", exc)
            return AnalysisUnavailable(reason="invalid payload")
        return AnalysisSucceeded(analysis=analysis)


def build_prompt(
    description: str, goal: str | None, remaining_calories: float | None
) -> str:
    """Build the analysis prompt for a meal description."""
    lines = [f'Analyze the following meal description: "{description}".']
    if goal or remaining_calories is not None:
        context = []
        if goal:
            context.append(f"goal is {goal}")
        if remaining_calories is not None:
            context.append(
                f"remaining calories for today is {round(remaining_calories)}kcal"
            )
        lines.append(f"User context: {', '.join(context)}.")
    lines.extend(
        [
            "",
            "Tasks:",
            "1. Break down into individual food items with a quantity "
            '(for example "200g" or "2 units") and estimated macros.',
            "2. Sum total macros.",
            "3. Classify the meal tier (S, A, B, C or D) based on the goal "
            "and nutrient density. S is ideal, D is a significant setback.",
            "4. Suggest 1 or 2 smart swaps for items in the meal.",
            "5. Provide a short health insight.",
        ]
    )
    return "\n".join(lines)
