from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from openai import APITimeoutError

from strategy_pipeline.exceptions import ResearchProviderError
from strategy_pipeline.llm import OpenAIResearchProvider, _parse_structured_response
from strategy_pipeline.researcher import Researcher

PANEL = {
    "competitors": [
        {
            "name": "Acme Build",
            "domain": "acme.example",
            "market_position": "leader",
            "strengths": ["Fast"],
            "weaknesses": ["Pricey"],
            "market_share": 40,
        }
    ],
    "market_analysis": {"market_size": "$1B", "growth_rate": "10% CAGR"},
}


class FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: FakeCompletions) -> Any:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_parse_strips_code_fences() -> None:
    raw = "```json\n" + json.dumps(PANEL) + "\n```"

    assert _parse_structured_response(raw) == PANEL


def test_parse_rejects_non_objects() -> None:
    assert _parse_structured_response("[1, 2]") is None
    assert _parse_structured_response("not json") is None


def test_fetch_panel_validates_payload() -> None:
    completions = FakeCompletions(content=json.dumps(PANEL))
    provider = OpenAIResearchProvider(_client(completions), model="gpt-4o-mini")

    panel = provider.fetch_panel("Development Environment", "development")

    assert panel.competitors[0].name == "Acme Build"
    assert completions.calls[0]["model"] == "gpt-4o-mini"


@pytest.mark.parametrize("content", [None, "", "nonsense", json.dumps({"competitors": []})])
def test_bad_output_raises_provider_error(content: str | None) -> None:
    provider = OpenAIResearchProvider(_client(FakeCompletions(content=content)))

    with pytest.raises(ResearchProviderError):
        provider.fetch_panel("Web Application", "")


def test_timeout_is_absorbed_by_researcher() -> None:
    error = APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    provider = OpenAIResearchProvider(_client(FakeCompletions(error=error)))

    with pytest.raises(ResearchProviderError) as excinfo:
        provider.fetch_panel("Web Application", "")
    assert excinfo.value.__cause__ is error

    result = Researcher(provider=provider).research("Development Environment", "development")
    assert result.degraded is True
    assert result.top_competitors[0].name == "Replit"
