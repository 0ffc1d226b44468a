"""Judgment stage: generate plan variants, score them on a weighted rubric, rank.

Scoring is deterministic. Each rubric category contributes
``round(raw * weight * 100)`` points (half-up rounding), and a plan's overall
score is the sum of those contributions, so the category breakdown always adds
up to the headline number.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Protocol, Sequence, Tuple, Union

from .exceptions import RubricConfigurationError
from .logging import get_logger
from .schemas import (
    CategoryScore,
    InnovationSuggestion,
    InnovationType,
    InvestmentTier,
    JudgmentCriterion,
    JudgmentResult,
    PlanEvaluation,
    PlanningResult,
    Priority,
    RecommendationResult,
    ResearchResult,
    RiskAssessment,
    RiskFactor,
    RiskLevel,
    Severity,
    StrategicRecommendation,
    Verdict,
)

logger = get_logger(__name__)

WEIGHT_TOLERANCE = 1e-9


def round_half_up(value: float) -> int:
    """Round like a spreadsheet would; 12.5 becomes 13, not 12.

    The value is first snapped to 6 decimals so products such as
    ``0.9 * 0.15 * 100`` (13.499999...) land on the intended half.
    """

    return int(math.floor(round(value, 6) + 0.5))


# ---------------------------------------------------------------------------
# Rubric
# ---------------------------------------------------------------------------

MARKET_VIABILITY = "Market Viability"
TECHNICAL_FEASIBILITY = "Technical Feasibility"
COMPETITIVE_ADVANTAGE = "Competitive Advantage"
RESOURCE_EFFICIENCY = "Resource Efficiency"
RISK_MANAGEMENT = "Risk Management"
INNOVATION_POTENTIAL = "Innovation Potential"

DEFAULT_RUBRIC: Tuple[JudgmentCriterion, ...] = (
    JudgmentCriterion(
        category=MARKET_VIABILITY,
        weight=0.25,
        description="Assessment of market demand, size, and growth potential",
        scoring_method="Market size × growth rate × competitive gaps",
    ),
    JudgmentCriterion(
        category=TECHNICAL_FEASIBILITY,
        weight=0.20,
        description="Evaluation of technical complexity and implementation feasibility",
        scoring_method="Technology maturity × team capability × development timeline",
    ),
    JudgmentCriterion(
        category=COMPETITIVE_ADVANTAGE,
        weight=0.20,
        description="Strength of differentiation and defensibility against competitors",
        scoring_method="Uniqueness × barriers to entry × patent potential",
    ),
    JudgmentCriterion(
        category=RESOURCE_EFFICIENCY,
        weight=0.15,
        description="Optimal use of time, money, and human resources",
        scoring_method="Expected ROI × development cost × time to market",
    ),
    JudgmentCriterion(
        category=RISK_MANAGEMENT,
        weight=0.10,
        description="Assessment and mitigation of potential risks",
        scoring_method="100 - (risk probability × impact severity)",
    ),
    JudgmentCriterion(
        category=INNOVATION_POTENTIAL,
        weight=0.10,
        description="Potential for breakthrough innovation and industry disruption",
        scoring_method="Novelty × market impact × scalability potential",
    ),
)


def validate_weights(weights: Mapping[str, float], stage: str = "judgment") -> None:
    """Reject empty, negative, or non-unit weight sets."""

    if not weights:
        raise RubricConfigurationError("Rubric must define at least one category", total_weight=0.0, stage=stage)
    negative = [name for name, weight in weights.items() if weight < 0]
    if negative:
        raise RubricConfigurationError(f"Negative weights for: {', '.join(negative)}", stage=stage)
    total = math.fsum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise RubricConfigurationError(f"Rubric weights sum to {total:.6f}, expected 1.0", total_weight=total, stage=stage)


def validate_rubric(rubric: Sequence[JudgmentCriterion]) -> None:
    categories = [criterion.category for criterion in rubric]
    if len(set(categories)) != len(categories):
        raise RubricConfigurationError("Rubric categories must be unique")
    validate_weights({criterion.category: criterion.weight for criterion in rubric})


# ---------------------------------------------------------------------------
# Plan variants
# ---------------------------------------------------------------------------

Feature = Union[StrategicRecommendation, InnovationSuggestion]


@dataclass(frozen=True)
class PlanVariant:
    """A candidate strategy; lives only inside one ``Judge.evaluate`` call."""

    plan_id: str
    plan_title: str
    approach: str
    timeline: str
    investment: InvestmentTier
    features: Tuple[Feature, ...]


@dataclass(frozen=True)
class VariantBlueprint:
    plan_id: str
    plan_title: str
    approach: str
    timeline: str
    investment: InvestmentTier
    priority: Priority | None = None
    innovation_type: InnovationType | None = None

    def select(self, recommendation: RecommendationResult) -> Tuple[Feature, ...]:
        if self.innovation_type is not None:
            return tuple(s for s in recommendation.innovation_suggestions if s.type is self.innovation_type)
        return tuple(r for r in recommendation.strategic_recommendations if r.priority is self.priority)

    def build(self, features: Tuple[Feature, ...]) -> PlanVariant:
        return PlanVariant(
            plan_id=self.plan_id,
            plan_title=self.plan_title,
            approach=self.approach,
            timeline=self.timeline,
            investment=self.investment,
            features=features,
        )


VARIANT_BLUEPRINTS: Tuple[VariantBlueprint, ...] = (
    VariantBlueprint(
        plan_id="aggressive-ai-first",
        plan_title="Aggressive AI-First Platform",
        approach="Full multi-agent AI implementation with enterprise focus",
        timeline="4-6 months",
        investment=InvestmentTier.HIGH,
        priority=Priority.CRITICAL,
    ),
    VariantBlueprint(
        plan_id="incremental-enhancement",
        plan_title="Incremental AI Enhancement Strategy",
        approach="Gradual AI integration starting with core features",
        timeline="6-8 months",
        investment=InvestmentTier.MEDIUM,
        priority=Priority.HIGH,
    ),
    VariantBlueprint(
        plan_id="competitive-parity",
        plan_title="Competitive Parity Plus Strategy",
        approach="Match competitor features with selective AI advantages",
        timeline="3-4 months",
        investment=InvestmentTier.LOW_MEDIUM,
        priority=Priority.MEDIUM,
    ),
    VariantBlueprint(
        plan_id="innovation-focused",
        plan_title="Pure Innovation Strategy",
        approach="Focus on breakthrough features ignoring current market",
        timeline="8-12 months",
        investment=InvestmentTier.VERY_HIGH,
        innovation_type=InnovationType.DISRUPTIVE,
    ),
)

# Used alone when no blueprint finds any features to work with.
FALLBACK_BLUEPRINT = VARIANT_BLUEPRINTS[2]


def create_plan_variants(recommendation: RecommendationResult) -> List[PlanVariant]:
    """Build one variant per blueprint whose feature bucket is non-empty."""

    variants = []
    for blueprint in VARIANT_BLUEPRINTS:
        features = blueprint.select(recommendation)
        if features:
            variants.append(blueprint.build(features))
    if not variants:
        variants.append(FALLBACK_BLUEPRINT.build(tuple(recommendation.strategic_recommendations)))
    return variants


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


class CategoryScorer(Protocol):
    """Return a raw score in [0, 1] for a variant on one rubric category."""

    def score(self, variant: PlanVariant, criterion: JudgmentCriterion) -> float:
        ...


DEFAULT_RAW_SCORE = 0.5

DEFAULT_SCORE_TABLE: Dict[Tuple[str, str], float] = {
    ("aggressive-ai-first", MARKET_VIABILITY): 0.95,
    ("incremental-enhancement", MARKET_VIABILITY): 0.80,
    ("competitive-parity", MARKET_VIABILITY): 0.60,
    ("innovation-focused", MARKET_VIABILITY): 0.70,
    ("aggressive-ai-first", TECHNICAL_FEASIBILITY): 0.85,
    ("incremental-enhancement", TECHNICAL_FEASIBILITY): 0.95,
    ("competitive-parity", TECHNICAL_FEASIBILITY): 0.90,
    ("innovation-focused", TECHNICAL_FEASIBILITY): 0.60,
    ("aggressive-ai-first", COMPETITIVE_ADVANTAGE): 0.98,
    ("incremental-enhancement", COMPETITIVE_ADVANTAGE): 0.75,
    ("competitive-parity", COMPETITIVE_ADVANTAGE): 0.40,
    ("innovation-focused", COMPETITIVE_ADVANTAGE): 0.85,
    ("aggressive-ai-first", RESOURCE_EFFICIENCY): 0.80,
    ("incremental-enhancement", RESOURCE_EFFICIENCY): 0.90,
    ("competitive-parity", RESOURCE_EFFICIENCY): 0.85,
    ("innovation-focused", RESOURCE_EFFICIENCY): 0.50,
    ("aggressive-ai-first", RISK_MANAGEMENT): 0.70,
    ("incremental-enhancement", RISK_MANAGEMENT): 0.85,
    ("competitive-parity", RISK_MANAGEMENT): 0.90,
    ("innovation-focused", RISK_MANAGEMENT): 0.40,
    ("aggressive-ai-first", INNOVATION_POTENTIAL): 0.95,
    ("incremental-enhancement", INNOVATION_POTENTIAL): 0.70,
    ("competitive-parity", INNOVATION_POTENTIAL): 0.30,
    ("innovation-focused", INNOVATION_POTENTIAL): 0.90,
}


class ScoreTable:
    """Lookup-table scorer keyed by ``(plan_id, category)``."""

    def __init__(self, table: Mapping[Tuple[str, str], float] = DEFAULT_SCORE_TABLE, default: float = DEFAULT_RAW_SCORE) -> None:
        self._table = dict(table)
        self._default = default

    def score(self, variant: PlanVariant, criterion: JudgmentCriterion) -> float:
        raw = self._table.get((variant.plan_id, criterion.category), self._default)
        return min(1.0, max(0.0, raw))


RATIONALES: Dict[str, Tuple[str, str]] = {
    MARKET_VIABILITY: ("Strong market demand with significant gaps", "Moderate market potential"),
    TECHNICAL_FEASIBILITY: ("Highly achievable with current technology", "Some technical challenges expected"),
    COMPETITIVE_ADVANTAGE: ("Significant differentiation from competitors", "Limited competitive advantage"),
    RESOURCE_EFFICIENCY: ("Excellent ROI potential with reasonable investment", "Moderate efficiency expected"),
    RISK_MANAGEMENT: ("Well-managed risks with clear mitigation", "Some risks requiring attention"),
    INNOVATION_POTENTIAL: ("High potential for industry disruption", "Incremental innovation expected"),
}
FAVORABLE_THRESHOLD = 0.8


def score_rationale(category: str, raw: float) -> str:
    phrasing = RATIONALES.get(category)
    if phrasing is None:
        return "Standard evaluation criteria applied"
    favorable, neutral = phrasing
    return favorable if raw > FAVORABLE_THRESHOLD else neutral


# ---------------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------------

SEVERITY_POINTS: Dict[Severity, int] = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}

INTEGRATION_RISK = "AI Model Integration Complexity"
COMPETITION_RISK = "Market Competition Response"
SCALABILITY_RISK = "Technical Scalability Challenges"

RISK_MITIGATIONS: Tuple[str, ...] = (
    "Implement phased rollout to reduce integration risks",
    "Maintain competitive intelligence monitoring",
    "Plan for scalable architecture from day one",
)


def scalability_severity(investment: InvestmentTier) -> Severity:
    """Scalability risk is high only for the top investment tier."""

    return Severity.HIGH if investment is InvestmentTier.VERY_HIGH else Severity.MEDIUM


def _carries_critical_work(variant: PlanVariant) -> bool:
    return any(
        isinstance(feature, StrategicRecommendation) and feature.priority is Priority.CRITICAL
        for feature in variant.features
    )


def overall_risk(factors: Sequence[RiskFactor]) -> RiskLevel:
    mean = sum(SEVERITY_POINTS[factor.severity] for factor in factors) / len(factors)
    if mean < 1.5:
        return RiskLevel.LOW
    if mean < 2.5:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def assess_risks(variant: PlanVariant) -> RiskAssessment:
    factors = [
        RiskFactor(
            factor=INTEGRATION_RISK,
            severity=Severity.MEDIUM if _carries_critical_work(variant) else Severity.LOW,
            probability=0.3,
            impact="Development timeline delays of 2-4 weeks",
        ),
        RiskFactor(
            factor=COMPETITION_RISK,
            severity=Severity.MEDIUM,
            probability=0.6,
            impact="Competitors may accelerate their AI development",
        ),
        RiskFactor(
            factor=SCALABILITY_RISK,
            severity=scalability_severity(variant.investment),
            probability=0.4,
            impact="Additional infrastructure and optimization costs",
        ),
    ]
    return RiskAssessment(overall_risk=overall_risk(factors), risk_factors=factors, mitigation=list(RISK_MITIGATIONS))


# ---------------------------------------------------------------------------
# Verdicts
# ---------------------------------------------------------------------------

STRENGTH_RATIO = 0.8
WEAKNESS_RATIO = 0.6
BALANCED_STRENGTH = "Balanced approach across all criteria"


def identify_strengths(scores: Sequence[CategoryScore]) -> List[str]:
    strengths = [
        f"Strong {score.category.lower()}: {score.rationale}"
        for score in scores
        if score.score >= score.max_score * STRENGTH_RATIO
    ]
    return strengths or [BALANCED_STRENGTH]


def identify_weaknesses(scores: Sequence[CategoryScore]) -> List[str]:
    return [
        f"{score.category} concerns: Requires additional attention and mitigation strategies"
        for score in scores
        if score.score < score.max_score * WEAKNESS_RATIO
    ]


def verdict_for(score: int, risk: RiskLevel) -> Tuple[Verdict, str]:
    """Tier the plan and explain it, citing the score and risk level."""

    level = risk.value
    if score >= 85:
        return Verdict.STRONGLY_RECOMMEND, (
            f"Exceptional plan with high scores across all categories ({score}/100). Risk level is {level} and "
            "manageable. This approach offers the best combination of market opportunity, competitive advantage, "
            "and feasible execution."
        )
    if score >= 70:
        return Verdict.RECOMMEND, (
            f"Solid plan with good potential ({score}/100). Some areas need strengthening but overall approach is "
            f"sound with {level} risk level."
        )
    if score >= 55:
        return Verdict.CONDITIONAL, (
            f"Plan has merit but requires significant improvements ({score}/100). Risk level is {level}. "
            "Recommend addressing weaknesses before proceeding."
        )
    return Verdict.NOT_RECOMMEND, (
        f"Plan scores below acceptable threshold ({score}/100) with {level} risk level. Recommend alternative "
        "approach or major revisions."
    )


def rank_evaluations(evaluations: Sequence[PlanEvaluation]) -> List[PlanEvaluation]:
    """Descending by overall score; ties keep variant order."""

    return sorted(evaluations, key=lambda evaluation: evaluation.overall_score, reverse=True)


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------

BASE_CONFIDENCE = 0.94


class Judge:
    """Fourth pipeline stage.

    The rubric is validated here, so a bad configuration fails when the
    pipeline is assembled rather than on the first request.
    """

    def __init__(
        self,
        rubric: Sequence[JudgmentCriterion] = DEFAULT_RUBRIC,
        scorer: CategoryScorer | None = None,
        models: Sequence[str] = (),
    ) -> None:
        validate_rubric(rubric)
        self.rubric: Tuple[JudgmentCriterion, ...] = tuple(rubric)
        self.scorer: CategoryScorer = scorer or ScoreTable()
        self.model_used = models[0] if models else "weighted-rubric"

    def score_variant(self, variant: PlanVariant) -> List[CategoryScore]:
        scores = []
        for criterion in self.rubric:
            raw = self.scorer.score(variant, criterion)
            scores.append(
                CategoryScore(
                    category=criterion.category,
                    score=round_half_up(raw * criterion.weight * 100),
                    max_score=round_half_up(criterion.weight * 100),
                    rationale=score_rationale(criterion.category, raw),
                )
            )
        return scores

    def evaluate_variant(self, variant: PlanVariant) -> PlanEvaluation:
        category_scores = self.score_variant(variant)
        overall_score = sum(score.score for score in category_scores)
        risk_assessment = assess_risks(variant)
        verdict, reasoning = verdict_for(overall_score, risk_assessment.overall_risk)
        return PlanEvaluation(
            plan_id=variant.plan_id,
            plan_title=variant.plan_title,
            investment=variant.investment,
            timeline=variant.timeline,
            overall_score=overall_score,
            category_scores=category_scores,
            strengths=identify_strengths(category_scores),
            weaknesses=identify_weaknesses(category_scores),
            risk_assessment=risk_assessment,
            recommendation=verdict,
            reasoning=reasoning,
        )

    def evaluate(
        self,
        planning: PlanningResult,
        research: ResearchResult,
        recommendation: RecommendationResult,
    ) -> JudgmentResult:
        variants = create_plan_variants(recommendation)
        if len(variants) < len(VARIANT_BLUEPRINTS):
            logger.info("plan_variants_reduced", derived=len(variants), expected=len(VARIANT_BLUEPRINTS))

        evaluations = [self.evaluate_variant(variant) for variant in variants]
        ranked = rank_evaluations(evaluations)
        best = ranked[0]

        confidence = BASE_CONFIDENCE - 0.05 * (len(VARIANT_BLUEPRINTS) - len(variants))
        if research.degraded:
            confidence -= 0.1

        return JudgmentResult(
            evaluations=evaluations,
            ranked_recommendations=ranked,
            best_plan=best,
            consensus_analysis=consensus_analysis(ranked, planning, research),
            model_used=self.model_used,
            confidence=round(max(confidence, 0.0), 2),
            evaluation_metrics=list(self.rubric),
        )


def consensus_analysis(ranked: Sequence[PlanEvaluation], planning: PlanningResult, research: ResearchResult) -> str:
    best = ranked[0]
    market = research.market_analysis
    top_gap = research.competitive_gaps[0] if research.competitive_gaps else "unserved customer needs"
    lines = [
        f"After analysis of {len(ranked)} strategic approaches for this {planning.analysis.project_type.lower()}, "
        f"the **{best.plan_title}** emerges as the optimal strategy with a score of {best.overall_score}/100.",
        "",
        "Key factors influencing this decision:",
        f"- Market analysis reveals a {market.market_size} opportunity with {market.growth_rate} growth",
        f"- Competitive gap analysis highlights: {top_gap}",
        f"- Investment tier {best.investment.label} over {best.timeline}",
    ]
    if len(ranked) > 1:
        runner_up = ranked[1]
        lines.append(
            f"- Runner-up {runner_up.plan_title} scored {runner_up.overall_score}/100 "
            f"({best.overall_score - runner_up.overall_score} points behind)"
        )
    lines.extend(
        [
            "",
            f"The {best.risk_assessment.overall_risk.value} risk level of the winning plan is acceptable given the "
            "potential market impact.",
        ]
    )
    return "\n".join(lines)
