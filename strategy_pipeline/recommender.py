"""Recommendation stage: strategic moves, innovation ideas and positioning.

Categories, priorities and innovation types are assigned by fixed domain
rules. Nothing is ranked here; ranking belongs to the judge.
"""

from __future__ import annotations

from typing import List, Sequence

from .schemas import (
    CompetitorProfile,
    InnovationSuggestion,
    InnovationType,
    MarketPosition,
    PlanningResult,
    Priority,
    RecommendationCategory,
    RecommendationResult,
    ResearchResult,
    StrategicRecommendation,
)
from .text import unique

CONFIDENCE = 0.87
CREATIVITY_SCORE = 0.92


def _leader(competitors: Sequence[CompetitorProfile]) -> str:
    for competitor in competitors:
        if competitor.market_position is MarketPosition.LEADER:
            return competitor.name
    return competitors[0].name if competitors else "the market leader"


def _challenger(competitors: Sequence[CompetitorProfile], leader: str) -> str:
    for competitor in competitors:
        if competitor.market_position is MarketPosition.CHALLENGER and competitor.name != leader:
            return competitor.name
    for competitor in competitors:
        if competitor.name != leader:
            return competitor.name
    return "smaller rivals"


def strategic_recommendations(planning: PlanningResult, research: ResearchResult) -> List[StrategicRecommendation]:
    project_type = planning.analysis.project_type
    headline_features = ", ".join(planning.analysis.required_features[:3])
    leader = _leader(research.top_competitors)

    return [
        StrategicRecommendation(
            category=RecommendationCategory.COMPETITIVE_ADVANTAGE,
            priority=Priority.CRITICAL,
            title="Implement Multi-Agent AI System",
            description=(
                "Deploy specialized AI agents for planning, research, recommendation, judgment and execution, "
                f"a capability {leader} does not offer today."
            ),
            implementation="Build five specialized agents on different top-tier models working in orchestrated collaboration.",
            expected_impact="10x faster project planning and competitive intelligence than existing solutions",
            timeframe="4-6 weeks",
            resources="2 senior developers, AI integration specialist",
            risks=["AI model API costs", "Integration complexity"],
            success_metrics=["90% faster planning process", "Competitive intelligence accuracy >95%"],
        ),
        StrategicRecommendation(
            category=RecommendationCategory.FEATURE_INNOVATION,
            priority=Priority.CRITICAL,
            title="Integrated Real-time Competitive Intelligence",
            description="Continuously monitor competitors and suggest strategic adjustments as the market moves.",
            implementation="Automated collection and analysis of competitor changes with real-time alerts and recommendation updates.",
            expected_impact="Stay 2-3 months ahead of competitors on market trends and feature releases",
            timeframe="3-4 weeks",
            resources="Data engineer, AI researcher",
            risks=["Data privacy concerns", "Rate limiting from monitored sites"],
            success_metrics=["99% monitoring uptime", "Alert accuracy >90%"],
        ),
        StrategicRecommendation(
            category=RecommendationCategory.MARKET_POSITIONING,
            priority=Priority.HIGH,
            title=f"Enterprise-First {project_type}",
            description=f"Position as the most advanced enterprise {project_type.lower()} with AI-driven project management.",
            implementation=f"Enterprise-grade security, team management and AI insights built around {headline_features}.",
            expected_impact="Capture 15-20% of the enterprise segment currently underserved by competitors",
            timeframe="6-8 weeks",
            resources="Enterprise architect, security specialist, UI/UX designer",
            risks=["Enterprise sales cycle complexity", "Security compliance requirements"],
            success_metrics=["5 enterprise pilot customers", "SOC 2 compliance"],
        ),
        StrategicRecommendation(
            category=RecommendationCategory.TECHNICAL_ARCHITECTURE,
            priority=Priority.HIGH,
            title="Hybrid Cloud-Edge Architecture",
            description="Combine cloud scalability with edge performance for faster user-facing workloads.",
            implementation=(
                "Run latency-sensitive execution on edge nodes while keeping collaboration in the cloud, "
                f"on a {', '.join(planning.analysis.technical_stack[:3])} core."
            ),
            expected_impact="50% faster execution and 80% lower latency than pure cloud solutions",
            timeframe="8-10 weeks",
            resources="DevOps engineer, infrastructure architect",
            risks=["Edge deployment complexity", "Higher infrastructure costs"],
            success_metrics=["<500ms response time globally", "99.9% uptime"],
        ),
        StrategicRecommendation(
            category=RecommendationCategory.MONETIZATION,
            priority=Priority.MEDIUM,
            title="AI-Powered Premium Tiers",
            description="Tiered pricing based on AI agent access and advanced analytics capabilities.",
            implementation=f"Freemium model with basic AI, premium agents and an enterprise suite, priced against {leader}.",
            expected_impact="$50-100K MRR within 6 months through premium AI features",
            timeframe="2-3 weeks",
            resources="Product manager, billing integration developer",
            risks=["Pricing model complexity", "Customer acquisition cost"],
            success_metrics=["20% conversion to premium", "Average revenue per user >$25/month"],
        ),
    ]


def innovation_suggestions(planning: PlanningResult, research: ResearchResult) -> List[InnovationSuggestion]:
    project_type = planning.analysis.project_type.lower()
    top_trend = research.market_analysis.key_trends[0] if research.market_analysis.key_trends else "AI adoption"

    return [
        InnovationSuggestion(
            type=InnovationType.DISRUPTIVE,
            concept="Predictive Assistant",
            differentiation="AI that anticipates user needs, prepares resources and prevents issues before they occur.",
            market_potential=f"Could define the next generation of {project_type} products; no competitor has predictive capabilities.",
            technical_feasibility="High - language models combined with usage pattern recognition and predictive analytics.",
            implementation_approach="Machine learning pipeline over behaviour patterns and project lifecycle signals to assist proactively.",
        ),
        InnovationSuggestion(
            type=InnovationType.INCREMENTAL,
            concept="Voice-Controlled Workflows",
            differentiation="Natural language voice commands for the core workflows, enabling hands-free operation.",
            market_potential="Appeals to users with accessibility needs and those seeking faster workflows.",
            technical_feasibility="Medium-High - speech recognition, natural language processing and action generation.",
            implementation_approach="Speech-to-action AI with context awareness and multi-modal interaction.",
        ),
        InnovationSuggestion(
            type=InnovationType.ARCHITECTURAL,
            concept="Collaborative AI Teams",
            differentiation="Virtual AI team members specialising in frontend, backend, testing and deployment.",
            market_potential=f"Rides the '{top_trend}' trend and multiplies capacity for small teams.",
            technical_feasibility="High - orchestrated specialist agents with defined roles and communication protocols.",
            implementation_approach="Multi-agent system with discipline-specific agents and inter-agent messaging.",
        ),
    ]


def competitive_positioning(planning: PlanningResult, research: ResearchResult) -> str:
    """One-paragraph positioning statement anchored in the market analysis."""

    market = research.market_analysis
    leader = _leader(research.top_competitors)
    challenger = _challenger(research.top_competitors, leader)
    leader_focus = next(
        (c.strengths[0].lower() for c in research.top_competitors if c.name == leader and c.strengths),
        "breadth",
    )
    return (
        f'Position the product as the "AI-First {planning.analysis.project_type}" for a {market.market_size} market '
        f"growing at {market.growth_rate}. While {leader} competes on {leader_focus} and {challenger} on its "
        "existing footprint, this product integrates multiple AI models into every step, with predictive "
        'assistance, competitive intelligence and multi-agent collaboration. Target positioning: "The platform that thinks ahead of you."'
    )


def unique_value_propositions(planning: PlanningResult, research: ResearchResult) -> List[str]:
    propositions = [
        "Multi-Agent AI Intelligence: five specialized agents for planning, research, recommendation, judgment and execution",
        "Real-time Competitive Intelligence: continuous competitor monitoring with suggested strategic pivots",
        "Predictive Assistant: anticipates needs and prepares solutions before they are requested",
        "10x Faster Project Planning: competitive analysis and strategic planning in minutes, not weeks",
        "Enterprise-Grade AI Analytics: market trends, competitive positioning and growth opportunities in one dashboard",
        "Global Edge Performance: hybrid cloud-edge architecture with local-like performance",
        "AI-Powered Security: intelligent threat detection and automated security recommendations",
    ]
    propositions.extend(
        f"{feature}: delivered with AI assistance built in" for feature in planning.analysis.required_features
    )
    propositions.extend(
        f"Answer to {gap.removeprefix('Industry-wide issue: ').lower()}"
        for gap in research.competitive_gaps
        if gap.startswith("Industry-wide issue: ")
    )
    return unique(propositions)


class Recommender:
    """Third pipeline stage."""

    def __init__(self, models: Sequence[str] = ()) -> None:
        self.model_used = models[0] if models else "rule-based-recommendations"

    def recommend(self, planning: PlanningResult, research: ResearchResult) -> RecommendationResult:
        confidence = CONFIDENCE if not research.degraded else round(CONFIDENCE - 0.15, 2)
        return RecommendationResult(
            strategic_recommendations=strategic_recommendations(planning, research),
            innovation_suggestions=innovation_suggestions(planning, research),
            competitive_positioning=competitive_positioning(planning, research),
            unique_value_propositions=unique_value_propositions(planning, research),
            model_used=self.model_used,
            confidence=confidence,
            creativity_score=CREATIVITY_SCORE,
        )
