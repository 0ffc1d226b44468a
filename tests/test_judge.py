from __future__ import annotations

import pytest

from strategy_pipeline.exceptions import RubricConfigurationError
from strategy_pipeline.judge import (
    DEFAULT_RUBRIC,
    SCALABILITY_RISK,
    Judge,
    PlanVariant,
    ScoreTable,
    create_plan_variants,
    round_half_up,
)
from strategy_pipeline.schemas import (
    InvestmentTier,
    JudgmentCriterion,
    JudgmentResult,
    PlanningResult,
    RecommendationResult,
    ResearchResult,
    RiskLevel,
    Severity,
    Verdict,
)


def _by_id(judgment: JudgmentResult) -> dict:
    return {evaluation.plan_id: evaluation for evaluation in judgment.evaluations}


def test_rubric_weights_sum_to_one() -> None:
    assert sum(criterion.weight for criterion in DEFAULT_RUBRIC) == pytest.approx(1.0, abs=1e-9)


def test_aggressive_plan_wins_and_parity_trails(judgment: JudgmentResult) -> None:
    evaluations = _by_id(judgment)

    assert evaluations["aggressive-ai-first"].overall_score == 90
    assert evaluations["aggressive-ai-first"].overall_score >= 85
    assert evaluations["aggressive-ai-first"].recommendation is Verdict.STRONGLY_RECOMMEND
    assert evaluations["competitive-parity"].overall_score < 70
    assert judgment.best_plan.plan_id == "aggressive-ai-first"


def test_scores_for_every_variant(judgment: JudgmentResult) -> None:
    scores = {plan_id: evaluation.overall_score for plan_id, evaluation in _by_id(judgment).items()}

    assert scores == {
        "aggressive-ai-first": 90,
        "incremental-enhancement": 84,
        "competitive-parity": 66,
        "innovation-focused": 68,
    }


def test_overall_score_is_sum_of_rounded_category_scores(judgment: JudgmentResult) -> None:
    weights = {criterion.category: criterion.weight for criterion in DEFAULT_RUBRIC}
    for evaluation in judgment.evaluations:
        assert evaluation.overall_score == sum(score.score for score in evaluation.category_scores)
        for score in evaluation.category_scores:
            assert score.max_score == round_half_up(weights[score.category] * 100)
            assert 0 <= score.score <= score.max_score


def test_ranking_is_descending_and_best_is_first(judgment: JudgmentResult) -> None:
    ranked = judgment.ranked_recommendations

    assert [item.overall_score for item in ranked] == sorted((item.overall_score for item in ranked), reverse=True)
    assert ranked[0] == judgment.best_plan
    assert [item.plan_id for item in ranked] == [
        "aggressive-ai-first",
        "incremental-enhancement",
        "innovation-focused",
        "competitive-parity",
    ]


def test_round_half_up() -> None:
    assert round_half_up(0.95 * 0.10 * 100) == 10
    assert round_half_up(0.90 * 0.15 * 100) == 14
    assert round_half_up(12.5) == 13
    assert round_half_up(12.49) == 12


def test_strengths_and_weaknesses(judgment: JudgmentResult) -> None:
    evaluations = _by_id(judgment)

    assert "Strong market viability: Strong market demand with significant gaps" in evaluations["aggressive-ai-first"].strengths
    assert evaluations["aggressive-ai-first"].weaknesses == []
    parity_weaknesses = evaluations["competitive-parity"].weaknesses
    assert any(item.startswith("Competitive Advantage concerns") for item in parity_weaknesses)
    assert any(item.startswith("Innovation Potential concerns") for item in parity_weaknesses)


def test_risk_assessment(judgment: JudgmentResult) -> None:
    evaluations = _by_id(judgment)
    aggressive = evaluations["aggressive-ai-first"].risk_assessment
    innovation = evaluations["innovation-focused"].risk_assessment

    assert aggressive.overall_risk is RiskLevel.MEDIUM
    assert len(aggressive.mitigation) == 3
    severities = {factor.factor: factor.severity for factor in innovation.risk_factors}
    assert severities[SCALABILITY_RISK] is Severity.HIGH
    assert severities["AI Model Integration Complexity"] is Severity.LOW
    assert {factor.factor: factor.severity for factor in aggressive.risk_factors}[SCALABILITY_RISK] is Severity.MEDIUM


def test_reasoning_cites_score_and_risk(judgment: JudgmentResult) -> None:
    best = judgment.best_plan

    assert "(90/100)" in best.reasoning
    assert "medium" in best.reasoning


def test_consensus_mentions_winner_and_market(judgment: JudgmentResult, research: ResearchResult) -> None:
    consensus = judgment.consensus_analysis

    assert judgment.best_plan.plan_title in consensus
    assert "90/100" in consensus
    assert research.market_analysis.market_size in consensus
    assert research.competitive_gaps[0] in consensus


def test_confidence_and_metrics(judgment: JudgmentResult) -> None:
    assert judgment.confidence == 0.94
    assert judgment.evaluation_metrics == list(DEFAULT_RUBRIC)


@pytest.mark.parametrize(
    "weights",
    [
        (0.5, 0.6),
        (0.5, 0.4),
        (),
    ],
)
def test_bad_rubric_fails_at_construction(weights: tuple) -> None:
    rubric = [
        JudgmentCriterion(category=f"Category {index}", weight=weight, description="", scoring_method="")
        for index, weight in enumerate(weights)
    ]

    with pytest.raises(RubricConfigurationError):
        Judge(rubric=rubric)


def test_duplicate_categories_rejected() -> None:
    rubric = [
        JudgmentCriterion(category="Same", weight=0.5, description="", scoring_method=""),
        JudgmentCriterion(category="Same", weight=0.5, description="", scoring_method=""),
    ]

    with pytest.raises(RubricConfigurationError):
        Judge(rubric=rubric)


def test_score_table_defaults_and_clamps() -> None:
    variant = PlanVariant("custom", "Custom", "", "1 month", InvestmentTier.MEDIUM, ())
    criterion = DEFAULT_RUBRIC[0]

    assert ScoreTable().score(variant, criterion) == 0.5
    assert ScoreTable({("custom", criterion.category): 1.7}).score(variant, criterion) == 1.0


def test_custom_scorer_is_used(
    planning: PlanningResult, research: ResearchResult, recommendation: RecommendationResult
) -> None:
    class Flat:
        def score(self, variant: PlanVariant, criterion: JudgmentCriterion) -> float:
            return 0.5

    judgment = Judge(scorer=Flat()).evaluate(planning, research, recommendation)

    assert {evaluation.overall_score for evaluation in judgment.evaluations} == {51}
    # Ties keep variant order.
    assert judgment.best_plan.plan_id == "aggressive-ai-first"
    assert judgment.best_plan.strengths == ["Balanced approach across all criteria"]


def test_missing_buckets_skip_variants(
    planning: PlanningResult, research: ResearchResult, recommendation: RecommendationResult
) -> None:
    only_medium = recommendation.model_copy(
        update={
            "strategic_recommendations": [
                item for item in recommendation.strategic_recommendations if item.priority.value == "medium"
            ],
            "innovation_suggestions": [],
        }
    )

    judgment = Judge().evaluate(planning, research, only_medium)

    assert [evaluation.plan_id for evaluation in judgment.evaluations] == ["competitive-parity"]
    assert judgment.confidence == pytest.approx(0.79)


def test_empty_recommendations_use_fallback_variant(recommendation: RecommendationResult) -> None:
    empty = recommendation.model_copy(update={"strategic_recommendations": [], "innovation_suggestions": []})

    variants = create_plan_variants(empty)

    assert [variant.plan_id for variant in variants] == ["competitive-parity"]
    assert variants[0].investment is InvestmentTier.LOW_MEDIUM
