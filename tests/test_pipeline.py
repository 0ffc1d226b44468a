from __future__ import annotations

import threading
from datetime import date

import pytest

from strategy_pipeline.config import PipelineSettings
from strategy_pipeline.exceptions import RubricConfigurationError
from strategy_pipeline.judge import Judge
from strategy_pipeline.llm import OpenAIResearchProvider
from strategy_pipeline.pipeline import (
    COMPLETED,
    STARTED,
    StageEvent,
    StrategyPipeline,
    build_pipeline,
    list_stage_definitions,
    run_pipeline,
)
from strategy_pipeline.planner import Planner
from strategy_pipeline.researcher import Researcher
from strategy_pipeline.schemas import JudgmentCriterion, PipelineStage

START = date(2025, 1, 6)
ARGS = ("Build a real-time collaborative IDE", "needs auth, database, AI features", "development")


def test_full_run_returns_every_stage() -> None:
    result = StrategyPipeline(clock=lambda: START).run(*ARGS)

    assert result.planning.analysis.project_type == "Development Environment"
    assert result.research.top_competitors[0].name == "Replit"
    assert result.judgment.best_plan.plan_id == "aggressive-ai-first"
    assert result.execution.recommended_plan.plan_id == "aggressive-ai-first"
    assert len(result.execution.alternative_plans) == 2
    assert result.summary.startswith("# Strategic Decision Summary")


def test_repeated_runs_are_identical() -> None:
    pipeline = StrategyPipeline(clock=lambda: START)

    first = pipeline.run(*ARGS)
    second = StrategyPipeline(clock=lambda: START).run(*ARGS)

    assert first.model_dump_json() == second.model_dump_json()


def test_editing_a_result_does_not_leak_into_later_runs() -> None:
    pipeline = StrategyPipeline(clock=lambda: START)
    first = pipeline.run(*ARGS)
    baseline = first.model_dump_json()

    first.research.top_competitors[0].weaknesses.append("Edited")
    first.planning.development_roadmap[0].objectives.append("Edited")
    first.execution.recommended_plan.critical_path.clear()
    first.judgment.evaluation_metrics.clear()

    assert pipeline.run(*ARGS).model_dump_json() == baseline
    assert StrategyPipeline(clock=lambda: START).run(*ARGS).model_dump_json() == baseline


def test_model_routing_sets_model_used() -> None:
    routing = {"planning": ("Model A",), "judgment": ("Model B", "Model C")}
    result = StrategyPipeline(model_routing=routing, clock=lambda: START).run(*ARGS)

    assert result.planning.model_used == "Model A"
    assert result.judgment.model_used == "Model B"
    assert result.recommendation.model_used == "rule-based-recommendations"


def test_default_routing_is_applied() -> None:
    result = StrategyPipeline(clock=lambda: START).run(*ARGS)

    assert result.research.model_used == "Perplexity Pro"
    assert result.execution.model_used == "Grok-2"


def test_stage_events_in_order() -> None:
    events: list[StageEvent] = []
    StrategyPipeline(clock=lambda: START, listeners=[events.append]).run(*ARGS)

    assert len(events) == 10
    assert {event.stage for event in events[:4]} == {PipelineStage.PLANNING, PipelineStage.RESEARCH}
    assert [event.status for event in events[:2]] == [STARTED, STARTED]
    assert [(event.stage, event.status) for event in events[4:]] == [
        (PipelineStage.RECOMMENDATION, STARTED),
        (PipelineStage.RECOMMENDATION, COMPLETED),
        (PipelineStage.JUDGMENT, STARTED),
        (PipelineStage.JUDGMENT, COMPLETED),
        (PipelineStage.EXECUTION, STARTED),
        (PipelineStage.EXECUTION, COMPLETED),
    ]
    assert all(event.duration_ms is not None for event in events if event.status == COMPLETED)


def test_planning_and_research_run_concurrently() -> None:
    barrier = threading.Barrier(2, timeout=5)

    class WaitingPlanner(Planner):
        def analyze(self, description: object, requirements: object = ""):
            barrier.wait()
            return super().analyze(description, requirements)

    class WaitingResearcher(Researcher):
        def research(self, project_type: object, industry: object = ""):
            barrier.wait()
            return super().research(project_type, industry)

    pipeline = StrategyPipeline(
        planner=WaitingPlanner(),
        researcher=WaitingResearcher(clock=lambda: START),
        clock=lambda: START,
    )

    # Would raise BrokenBarrierError if the two stages ran one after the other.
    result = pipeline.run(*ARGS)

    assert result.research.last_updated == START


def test_bad_rubric_fails_before_any_run() -> None:
    rubric = [JudgmentCriterion(category="Only", weight=0.7, description="", scoring_method="")]

    with pytest.raises(RubricConfigurationError):
        StrategyPipeline(judge=Judge(rubric=rubric))


def test_explicit_start_date_wins_over_clock() -> None:
    result = StrategyPipeline(clock=lambda: START).run(*ARGS, start_date=date(2026, 3, 2))

    assert result.execution.recommended_plan.phases[0].start_date == date(2026, 3, 2)
    assert result.research.last_updated == START


def test_run_pipeline_helper() -> None:
    result = run_pipeline(*ARGS)

    assert result.judgment.best_plan.overall_score == 90


def test_malformed_input_still_completes() -> None:
    result = StrategyPipeline(clock=lambda: START).run(None, None, None)

    assert result.planning.analysis.project_type == "Web Application"
    assert len(result.research.top_competitors) == 1
    assert result.judgment.ranked_recommendations


def test_build_pipeline_uses_static_research_by_default() -> None:
    pipeline = build_pipeline(PipelineSettings())

    assert not isinstance(pipeline.researcher.provider, OpenAIResearchProvider)


def test_build_pipeline_enables_live_research() -> None:
    settings = PipelineSettings(openai_api_key="test-key", live_research=True)

    pipeline = build_pipeline(settings, clock=lambda: START)

    assert isinstance(pipeline.researcher.provider, OpenAIResearchProvider)
    assert pipeline.researcher.model_used == "Perplexity Pro"


def test_stage_definitions_are_ordered() -> None:
    definitions = list_stage_definitions()

    assert [definition.id for definition in definitions] == list(PipelineStage)
    assert definitions[2].depends_on == [PipelineStage.PLANNING, PipelineStage.RESEARCH]
