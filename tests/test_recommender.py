from __future__ import annotations

from strategy_pipeline.recommender import Recommender
from strategy_pipeline.schemas import (
    InnovationType,
    PlanningResult,
    Priority,
    RecommendationCategory,
    RecommendationResult,
    ResearchResult,
)


def test_priority_mix(recommendation: RecommendationResult) -> None:
    priorities = [item.priority for item in recommendation.strategic_recommendations]

    assert priorities.count(Priority.CRITICAL) == 2
    assert priorities.count(Priority.HIGH) == 2
    assert priorities.count(Priority.MEDIUM) == 1


def test_categories_cover_every_bucket(recommendation: RecommendationResult) -> None:
    categories = {item.category for item in recommendation.strategic_recommendations}

    assert categories == set(RecommendationCategory)


def test_one_innovation_of_each_type(recommendation: RecommendationResult) -> None:
    types = [item.type for item in recommendation.innovation_suggestions]

    assert sorted(types, key=lambda t: t.value) == sorted(InnovationType, key=lambda t: t.value)


def test_positioning_uses_market_analysis(recommendation: RecommendationResult, research: ResearchResult) -> None:
    positioning = recommendation.competitive_positioning

    assert research.market_analysis.market_size in positioning
    assert research.market_analysis.growth_rate in positioning
    assert "Replit" in positioning


def test_value_propositions_are_unique_and_ordered(recommendation: RecommendationResult) -> None:
    propositions = recommendation.unique_value_propositions

    assert len(propositions) == len(set(propositions))
    assert propositions[0].startswith("Multi-Agent AI Intelligence")


def test_shared_weaknesses_become_value_propositions(planning: PlanningResult, research: ResearchResult) -> None:
    gaps = [*research.competitive_gaps, "Industry-wide issue: Limited enterprise features"]
    shared = research.model_copy(update={"competitive_gaps": gaps})

    propositions = Recommender().recommend(planning, shared).unique_value_propositions

    assert propositions[-1] == "Answer to limited enterprise features"


def test_degraded_research_lowers_confidence(
    planning: PlanningResult, research: ResearchResult, recommendation: RecommendationResult
) -> None:
    degraded = research.model_copy(update={"degraded": True})

    assert Recommender().recommend(planning, degraded).confidence < recommendation.confidence
