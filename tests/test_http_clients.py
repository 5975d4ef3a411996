"""Tests for HTTP-based adapters."""

import asyncio
import json

import pytest

from nutrition_memory.adapters.openai_meal_client import OpenAIMealAnalysisClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)


def test_openai_meal_client_parses_output() -> None:
    fake = _FakeOpenAI(json.dumps({"items": []}))
    client = OpenAIMealAnalysisClient(client=fake)

    result = asyncio.run(
        client.analyze(
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
            schema={"type": "object"},
            prompt="Analyze toast",
        )
    )

    assert result == {"items": []}
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["text"]["format"]["name"] == "meal_analysis"
    assert payload["input"][0]["content"][0]["text"] == "Analyze toast"


def test_openai_meal_client_omits_reasoning_when_unset() -> None:
    fake = _FakeOpenAI(json.dumps({"items": []}))
    client = OpenAIMealAnalysisClient(client=fake)

    asyncio.run(
        client.analyze(
            model="gpt-5.2",
            reasoning_effort=None,
            store=False,
            schema={"type": "object"},
            prompt="Analyze toast",
        )
    )

    payload = fake.responses.last_payload
    assert payload is not None
    assert "reasoning" not in payload


def test_openai_meal_client_rejects_empty_output() -> None:
    client = OpenAIMealAnalysisClient(client=_FakeOpenAI(""))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.analyze(
                model="gpt-5.2",
                reasoning_effort=None,
                store=False,
                schema={"type": "object"},
                prompt="Analyze toast",
            )
        )
