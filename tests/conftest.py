from __future__ import annotations

from datetime import date

import pytest

from strategy_pipeline.config import get_settings
from strategy_pipeline.judge import Judge
from strategy_pipeline.planner import Planner
from strategy_pipeline.recommender import Recommender
from strategy_pipeline.researcher import Researcher
from strategy_pipeline.schemas import JudgmentResult, PlanningResult, RecommendationResult, ResearchResult

START = date(2025, 1, 6)

DESCRIPTION = "Build a real-time collaborative IDE"
REQUIREMENTS = "needs auth, database, AI features"
INDUSTRY = "development"


def fixed_clock() -> date:
    return START


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Ensure cached settings do not leak between tests."""

    get_settings.cache_clear()


@pytest.fixture
def planning() -> PlanningResult:
    return Planner().analyze(DESCRIPTION, REQUIREMENTS)


@pytest.fixture
def research(planning: PlanningResult) -> ResearchResult:
    return Researcher(clock=fixed_clock).research(planning.analysis.project_type, INDUSTRY)


@pytest.fixture
def recommendation(planning: PlanningResult, research: ResearchResult) -> RecommendationResult:
    return Recommender().recommend(planning, research)


@pytest.fixture
def judgment(planning: PlanningResult, research: ResearchResult, recommendation: RecommendationResult) -> JudgmentResult:
    return Judge().evaluate(planning, research, recommendation)
