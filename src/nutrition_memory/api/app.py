"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from nutrition_memory.api.memory import router as memory_router
from nutrition_memory.api.models import AnalyzeMealRequest, ItemsRequest, MealPayload
from nutrition_memory.app_logging import configure_logging
from nutrition_memory.containers import AppContainer
from nutrition_memory.domain.meals import MacroTotals, Meal
from nutrition_memory.services.reconciliation import AnalysisUnavailableError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.memory_service.load()
        except Exception:
            logger.exception("Failed to load nutrition memory, starting empty")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(memory_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meals/analyze")
    async def analyze_meal(payload: AnalyzeMealRequest, request: Request) -> Meal:
        """Log a meal from its description, reusing learned memory."""
        state_container: AppContainer = request.app.state.container
        try:
            return await state_container.memory_service.reconcile(
                payload.description,
                payload.name,
                payload.include_insight,
                goal=payload.goal,
                remaining_calories=payload.remaining_calories,
            )
        except AnalysisUnavailableError as exc:
            logger.warning("Meal not logged: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Meal analysis unavailable, try again",
            ) from exc

    @app.post("/meals/recalculate")
    async def recalculate_meal(payload: MealPayload, request: Request) -> Meal:
        """Return an edited meal with totals re-derived from its items."""
        state_container: AppContainer = request.app.state.container
        meal = payload.to_domain()
        return state_container.memory_service.edit_items(meal, meal.items)

    @app.post("/meals/totals")
    async def meal_totals(payload: ItemsRequest, request: Request) -> MacroTotals:
        """Aggregate macros for an item list, rounded for display."""
        state_container: AppContainer = request.app.state.container
        totals = state_container.memory_service.totals(payload.to_domain())
        return totals.display()

    return app
