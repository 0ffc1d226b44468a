from __future__ import annotations

from datetime import date

import pytest

from strategy_pipeline.exceptions import ResearchProviderError
from strategy_pipeline.researcher import (
    DEGRADED_CONFIDENCE,
    DEVELOPMENT_PANEL,
    GENERIC_PANEL,
    UNMET_NEEDS,
    Researcher,
    common_weaknesses,
)
from strategy_pipeline.schemas import CompetitorProfile, MarketPanel, MarketPosition

TODAY = date(2025, 1, 6)


class FailingProvider:
    name = "failing"

    def __init__(self) -> None:
        self.calls = 0

    def fetch_panel(self, project_type: str, industry: str) -> MarketPanel:
        self.calls += 1
        raise ResearchProviderError("timed out", provider=self.name)


class FixedProvider:
    name = "fixed"

    def fetch_panel(self, project_type: str, industry: str) -> MarketPanel:
        return GENERIC_PANEL


def test_development_domain_uses_curated_panel() -> None:
    result = Researcher(clock=lambda: TODAY).research("Development Environment", "development")

    assert [c.name for c in result.top_competitors] == [c.name for c in DEVELOPMENT_PANEL.competitors]
    assert result.market_analysis.market_size.startswith("$2.3 billion")
    assert result.last_updated == TODAY
    assert result.degraded is False


def test_unrecognized_industry_returns_generic_panel() -> None:
    result = Researcher().research("Web Application", "underwater basket weaving")

    assert len(result.top_competitors) == 1
    assert result.top_competitors[0].name == "Generic Competitor 1"
    assert result.confidence < 0.89


def test_non_string_input_still_returns_a_panel() -> None:
    result = Researcher().research(None, 17)

    assert result.top_competitors


def _competitor(name: str, *weaknesses: str) -> CompetitorProfile:
    return CompetitorProfile(
        name=name,
        domain=f"{name.lower()}.example",
        market_position=MarketPosition.NICHE,
        weaknesses=list(weaknesses),
    )


def test_shared_weaknesses_need_two_competitors() -> None:
    panel = [
        _competitor("Alpha", "Slow builds", "Pricey"),
        _competitor("Beta", "Pricey", "No offline mode"),
        _competitor("Gamma", "Weak docs"),
    ]

    assert common_weaknesses(panel) == ["Industry-wide issue: Pricey"]


def test_shared_weaknesses_capped_at_three_most_frequent_first_seen_on_ties() -> None:
    panel = [
        _competitor("Alpha", "Weak docs", "Slow builds", "Pricey", "No offline mode"),
        _competitor("Beta", "Weak docs", "Slow builds", "Pricey", "No offline mode"),
        _competitor("Gamma", "No offline mode"),
    ]

    assert common_weaknesses(panel) == [
        "Industry-wide issue: No offline mode",
        "Industry-wide issue: Weak docs",
        "Industry-wide issue: Slow builds",
    ]


def test_curated_panel_has_no_shared_weaknesses() -> None:
    assert common_weaknesses(DEVELOPMENT_PANEL.competitors) == []


def test_gaps_start_with_unmet_needs() -> None:
    result = Researcher().research("Development Environment", "development")

    assert result.competitive_gaps == list(UNMET_NEEDS)


def test_recommendations_name_competitors() -> None:
    result = Researcher().research("Development Environment", "development")

    assert len(result.recommendations) == 10
    assert any("Replit" in item for item in result.recommendations)


def test_provider_failure_falls_back_and_flags_degraded() -> None:
    provider = FailingProvider()
    result = Researcher(provider=provider).research("Development Environment", "development")

    assert provider.calls == 1
    assert result.degraded is True
    assert result.confidence == DEGRADED_CONFIDENCE
    assert result.top_competitors[0].name == "Replit"


def test_live_provider_result_is_used_as_is() -> None:
    result = Researcher(provider=FixedProvider()).research("Development Environment", "development")

    assert result.top_competitors[0].name == "Generic Competitor 1"
    assert result.model_used == "fixed"
    assert result.degraded is False


class BrokenProvider:
    name = "broken"

    def __init__(self, error: Exception) -> None:
        self.error = error

    def fetch_panel(self, project_type: str, industry: str) -> MarketPanel:
        raise self.error


@pytest.mark.parametrize(
    "error",
    [TimeoutError("socket timed out"), ValueError("bad payload"), KeyError("competitors")],
)
def test_any_provider_error_falls_back_to_static_panel(error: Exception) -> None:
    result = Researcher(provider=BrokenProvider(error)).research("Development Environment", "development")

    assert result.degraded is True
    assert result.confidence == DEGRADED_CONFIDENCE
    assert [c.name for c in result.top_competitors] == [c.name for c in DEVELOPMENT_PANEL.competitors]


def test_editing_a_result_leaves_the_curated_panel_untouched() -> None:
    first = Researcher(clock=lambda: TODAY).research("Development Environment", "development")
    baseline = first.model_dump_json()

    first.top_competitors[0].weaknesses.append("Edited")
    first.market_analysis.key_trends.clear()

    again = Researcher(clock=lambda: TODAY).research("Development Environment", "development")
    assert again.model_dump_json() == baseline
    assert "Edited" not in DEVELOPMENT_PANEL.competitors[0].weaknesses
