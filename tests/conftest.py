"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from nutrition_memory.config import Settings
from nutrition_memory.containers import AppContainer
from nutrition_memory.services.analysis import MealAnalysisClient, MealAnalysisService
from nutrition_memory.services.memory import MemoryRepository, MemoryService
from nutrition_memory.services.reconciliation import ReconciliationEngine


def chicken_rice_payload() -> dict[str, object]:
    return {
        "name": "Chicken and rice",
        "items": [
            {
                "name": "grilled chicken",
                "quantity": "200g",
                "calories": 330,
                "protein": 62,
                "carbs": 0,
                "fat": 7.2,
            },
            {
                "name": "rice",
                "quantity": "100g",
                "calories": 130,
                "protein": 2.7,
                "carbs": 28,
                "fat": 0.3,
            },
        ],
        "total": {"calories": 460, "protein": 64.7, "carbs": 28, "fat": 7.5},
        "tier": "A",
        "swaps": ["Swap white rice for brown rice"],
        "insight": "Lean protein with a moderate carb portion.",
    }


@dataclass
class FakeMealAnalysisClient(MealAnalysisClient):
    """Fake analysis client returning queued payloads and recording prompts."""

    payloads: list[dict[str, object]] = field(
        default_factory=lambda: [chicken_rice_payload()]
    )
    error: BaseException | None = None
    prompts: list[str] = field(default_factory=list)

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if len(self.payloads) > 1:
            return self.payloads.pop(0)
        return self.payloads[0]


@dataclass
class InMemoryMemoryRepository(MemoryRepository):
    """In-memory snapshot repository for tests."""

    snapshots: dict[str, dict[str, object]] = field(default_factory=dict)
    saves: int = 0

    def load_snapshot(self, owner_key: str) -> dict[str, object] | None:
        return self.snapshots.get(owner_key)

    def save_snapshot(self, owner_key: str, snapshot: dict[str, object]) -> None:
        self.saves += 1
        self.snapshots[owner_key] = snapshot


@dataclass
class FailingMemoryRepository(InMemoryMemoryRepository):
    """Repository whose saves always fail."""

    def save_snapshot(self, owner_key: str, snapshot: dict[str, object]) -> None:
        raise RuntimeError("Failed to save memory snapshot")


def make_engine(
    client: FakeMealAnalysisClient | None = None,
) -> tuple[ReconciliationEngine, FakeMealAnalysisClient]:
    resolved_client = client or FakeMealAnalysisClient()
    service = MealAnalysisService(
        client=resolved_client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )
    return ReconciliationEngine(service), resolved_client


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def analysis_client() -> FakeMealAnalysisClient:
    return FakeMealAnalysisClient()


@pytest.fixture
def memory_repository() -> InMemoryMemoryRepository:
    return InMemoryMemoryRepository()


@pytest.fixture
def container(
    settings: Settings,
    analysis_client: FakeMealAnalysisClient,
    memory_repository: InMemoryMemoryRepository,
) -> AppContainer:
    analysis_service = MealAnalysisService(
        client=analysis_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    memory_service = MemoryService(
        engine=ReconciliationEngine(analysis_service),
        repository=memory_repository,
        owner_key=settings.memory_owner_key,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        memory_service=memory_service,
        close_resources=close_resources,
    )
