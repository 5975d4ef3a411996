"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_memory.adapters.openai_meal_client import OpenAIMealAnalysisClient
from nutrition_memory.adapters.supabase_memory_repository import (
    SupabaseMemoryRepository,
)
from nutrition_memory.config import Settings
from nutrition_memory.services.analysis import MealAnalysisService
from nutrition_memory.services.memory import MemoryService
from nutrition_memory.services.reconciliation import ReconciliationEngine


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: MealAnalysisService
    memory_service: MemoryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    openai_client = OpenAIMealAnalysisClient.create(resolved_settings.openai_api_key)
    analysis_service = MealAnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
    )
    memory_service = MemoryService(
        engine=ReconciliationEngine(analysis_service),
        repository=SupabaseMemoryRepository(supabase_client),
        owner_key=resolved_settings.memory_owner_key,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        memory_service=memory_service,
        close_resources=close_resources,
    )
