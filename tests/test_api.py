"""Tests for meal endpoints."""

import asyncio

from fastapi.testclient import TestClient

from nutrition_memory.api.app import create_app
from tests.conftest import FailingMemoryRepository, FakeMealAnalysisClient

DESCRIPTION = "200g grilled chicken, 100g rice"


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_meal_returns_meal(container, analysis_client) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/meals/analyze",
        json={"description": DESCRIPTION, "goal": "LOSE", "remaining_calories": 1800},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Chicken and rice"
    assert data["macros"]["calories"] == 460
    assert data["tier"] == "A"
    assert len(data["items"]) == 2
    assert "goal is LOSE" in analysis_client.prompts[0]


def test_analyze_meal_twice_hits_cache(container, analysis_client) -> None:
    client = TestClient(create_app(container))

    first = client.post("/meals/analyze", json={"description": DESCRIPTION})
    second = client.post(
        "/meals/analyze",
        json={"description": DESCRIPTION, "name": "Lunch", "include_insight": False},
    )

    assert analysis_client.calls == 1
    assert second.json()["macros"] == first.json()["macros"]
    assert second.json()["name"] == "Lunch"
    assert second.json()["insight"] is None
    assert second.json()["id"] != first.json()["id"]


def test_analyze_meal_rejects_blank_description(container, analysis_client) -> None:
    client = TestClient(create_app(container))

    response = client.post("/meals/analyze", json={"description": "   "})

    assert response.status_code == 422
    assert analysis_client.calls == 0


def test_analyze_meal_unavailable(
    container, analysis_client: FakeMealAnalysisClient
) -> None:
    analysis_client.error = RuntimeError("quota exceeded")
    client = TestClient(create_app(container))

    response = client.post("/meals/analyze", json={"description": DESCRIPTION})

    assert response.status_code == 503
    assert response.json()["detail"] == "Meal analysis unavailable, try again"


def test_analyze_meal_cancelled_call_is_unavailable(
    container, analysis_client: FakeMealAnalysisClient
) -> None:
    analysis_client.error = asyncio.CancelledError()
    client = TestClient(create_app(container))

    response = client.post("/meals/analyze", json={"description": DESCRIPTION})

    assert response.status_code == 503
    assert container.memory_service.list_phrases() == {}


def test_analyze_meal_survives_failed_save(container) -> None:
    container.memory_service.repository = FailingMemoryRepository()
    client = TestClient(create_app(container))

    response = client.post("/meals/analyze", json={"description": DESCRIPTION})

    assert response.status_code == 200
    assert response.json()["macros"]["calories"] == 460


def test_recalculate_meal_rederives_totals(container) -> None:
    client = TestClient(create_app(container))
    meal = client.post("/meals/analyze", json={"description": DESCRIPTION}).json()
    meal["items"] = [
        meal["items"][0],
        {"name": "beans", "quantity": "50g", "calories": "60", "protein": 4},
    ]

    response = client.post("/meals/recalculate", json=meal)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == meal["id"]
    assert data["macros"]["calories"] == 390
    assert data["macros"]["protein"] == 66


def test_totals_treats_bad_numbers_as_zero(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/meals/totals",
        json={
            "items": [
                {"name": "toast", "calories": "abc", "protein": 3},
                {"name": "jam", "calories": 50, "carbs": "12.5"},
            ]
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "calories": 50.0,
        "protein": 3.0,
        "carbs": 12.5,
        "fat": 0.0,
    }
