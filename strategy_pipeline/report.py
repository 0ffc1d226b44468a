"""Markdown rendering for stage results and the final pipeline summary."""

from __future__ import annotations

from typing import List

from .schemas import (
    ExecutionPlan,
    ExecutionResult,
    JudgmentResult,
    PlanEvaluation,
    PlanningResult,
    RecommendationResult,
    ResearchResult,
)
from .text import bullet_list, format_currency


def format_planning_markdown(planning: PlanningResult) -> str:
    analysis = planning.analysis
    roadmap_sections = []
    for phase in planning.development_roadmap:
        lines = [f"**{phase.phase}**", f"*Duration:* {phase.duration}"]
        if phase.objectives:
            lines.append(f"*Objectives:*\n{bullet_list(phase.objectives)}")
        roadmap_sections.append("\n".join(lines))
    roadmap = "\n\n".join(roadmap_sections)

    resource_lines = [
        f"**{item.resource}** ({item.type.value}): {item.quantity}; {item.justification}"
        for item in planning.resource_requirements
    ]

    return "\n\n".join(
        section
        for section in [
            "# Planning",
            f"## Project Analysis\n\n- Type: {analysis.project_type}\n- Complexity: {analysis.complexity.value}\n"
            f"- Estimated timeline: {analysis.estimated_timeline}",
            f"## Required Features\n\n{bullet_list(analysis.required_features)}",
            f"## Technical Stack\n\n{bullet_list(analysis.technical_stack)}",
            f"## Development Roadmap\n\n{roadmap}" if roadmap else "",
            f"## Resource Requirements\n\n{bullet_list(resource_lines)}" if resource_lines else "",
            f"## Risk Factors\n\n{bullet_list(analysis.risk_factors)}" if analysis.risk_factors else "",
        ]
        if section
    )


def format_research_markdown(research: ResearchResult) -> str:
    competitor_lines = [
        f"**{competitor.name}** ({competitor.market_position.value}, {competitor.market_share:g}% share): "
        f"strengths: {', '.join(competitor.strengths) or 'n/a'}; weaknesses: {', '.join(competitor.weaknesses) or 'n/a'}"
        for competitor in research.top_competitors
    ]
    market = research.market_analysis

    return "\n\n".join(
        section
        for section in [
            "# Research",
            "> Live research was unavailable; figures come from the curated panel." if research.degraded else "",
            f"## Market Size\n\n{market.market_size} growing at {market.growth_rate}",
            f"## Top Competitors\n\n{bullet_list(competitor_lines)}",
            f"## Key Trends\n\n{bullet_list(market.key_trends)}" if market.key_trends else "",
            f"## Competitive Gaps\n\n{bullet_list(research.competitive_gaps)}" if research.competitive_gaps else "",
            f"## Recommendations\n\n{bullet_list(research.recommendations)}" if research.recommendations else "",
        ]
        if section
    )


def format_recommendation_markdown(recommendation: RecommendationResult) -> str:
    strategic_lines = [
        f"**{item.title}** [{item.priority.value}, {item.category.value}]: {item.description}"
        for item in recommendation.strategic_recommendations
    ]
    innovation_lines = [
        f"**{item.concept}** ({item.type.value}): {item.differentiation}"
        for item in recommendation.innovation_suggestions
    ]

    return "\n\n".join(
        section
        for section in [
            "# Recommendations",
            f"## Strategic Recommendations\n\n{bullet_list(strategic_lines)}" if strategic_lines else "",
            f"## Innovation Suggestions\n\n{bullet_list(innovation_lines)}" if innovation_lines else "",
            f"## Competitive Positioning\n\n{recommendation.competitive_positioning}",
            f"## Unique Value Propositions\n\n{bullet_list(recommendation.unique_value_propositions)}"
            if recommendation.unique_value_propositions
            else "",
        ]
        if section
    )


def _format_evaluation_row(rank: int, evaluation: PlanEvaluation) -> str:
    return (
        f"| {rank} | {evaluation.plan_title} | {evaluation.overall_score} | "
        f"{evaluation.recommendation.value} | {evaluation.risk_assessment.overall_risk.value} |"
    )


def format_judgment_markdown(judgment: JudgmentResult) -> str:
    table = "\n".join(
        ["| Rank | Plan | Score | Verdict | Risk |", "| --- | --- | --- | --- | --- |"]
        + [_format_evaluation_row(rank, item) for rank, item in enumerate(judgment.ranked_recommendations, start=1)]
    )
    best = judgment.best_plan
    score_lines = [f"{score.category}: {score.score}/{score.max_score} ({score.rationale})" for score in best.category_scores]

    return "\n\n".join(
        section
        for section in [
            "# Judgment",
            f"## Ranking\n\n{table}",
            f"## Winning Plan: {best.plan_title}\n\n{best.reasoning}",
            f"### Category Scores\n\n{bullet_list(score_lines)}",
            f"### Strengths\n\n{bullet_list(best.strengths)}" if best.strengths else "",
            f"### Weaknesses\n\n{bullet_list(best.weaknesses)}" if best.weaknesses else "",
            f"## Consensus\n\n{judgment.consensus_analysis}",
        ]
        if section
    )


def _format_plan_schedule(plan: ExecutionPlan) -> str:
    lines = [
        f"**{phase.name}** ({phase.start_date.isoformat()} to {phase.end_date.isoformat()}, {phase.duration})"
        for phase in plan.phases
    ]
    return bullet_list(lines)


def format_execution_markdown(execution: ExecutionResult) -> str:
    plan = execution.recommended_plan
    phase_names = {phase.phase_id: phase.name for phase in plan.phases}
    budget_lines = [f"{item.category}: {format_currency(item.estimated)}" for item in plan.budget_breakdown]
    risk_lines = [
        f"{entry.risk} (p={entry.probability:g}, {entry.impact.value}, {entry.status.value}): owner {entry.owner}"
        for entry in plan.risk_mitigation
    ]
    alternatives = [f"{alt.plan_name}: {alt.total_duration}, {format_currency(alt.total_budget)}" for alt in execution.alternative_plans]

    return "\n\n".join(
        section
        for section in [
            "# Execution",
            f"## {plan.plan_name}\n\nTotal duration: {plan.total_duration}. Readiness score: {execution.readiness_score}/100.",
            f"## Schedule\n\n{_format_plan_schedule(plan)}",
            f"## Critical Path\n\n{' → '.join(phase_names[phase_id] for phase_id in plan.critical_path)}",
            f"## Budget\n\n{bullet_list(budget_lines)}\n\nTotal: {format_currency(plan.total_budget)}",
            f"## Risk Register\n\n{bullet_list(risk_lines)}",
            f"## Implementation Strategy\n\n{execution.implementation_strategy}",
            f"## Next Steps\n\n{bullet_list(execution.next_steps)}",
            f"## Alternative Plans\n\n{bullet_list(alternatives)}" if alternatives else "",
        ]
        if section
    )


def final_summary(
    planning: PlanningResult,
    research: ResearchResult,
    recommendation: RecommendationResult,
    judgment: JudgmentResult,
    execution: ExecutionResult,
) -> str:
    """Headline summary of a complete pipeline run."""

    best = judgment.best_plan
    plan = execution.recommended_plan
    steps: List[str] = execution.next_steps[:3]

    return "\n\n".join(
        section
        for section in [
            "# Strategic Decision Summary",
            f"## Winning Strategy: {best.plan_title}",
            bullet_list(
                [
                    f"Overall score: {best.overall_score}/100 ({best.recommendation.value})",
                    f"Judge confidence: {judgment.confidence:.0%}",
                    f"Implementation readiness: {execution.readiness_score}%",
                    f"Market opportunity: {research.market_analysis.market_size} growing at {research.market_analysis.growth_rate}",
                    f"Unique value propositions: {len(recommendation.unique_value_propositions)}",
                    f"Timeline: {plan.total_duration}",
                    f"Total budget: {format_currency(plan.total_budget)}",
                    f"Competitors analysed: {len(research.top_competitors)}",
                    f"Competitive gaps found: {len(research.competitive_gaps)}",
                    f"Project: {planning.analysis.project_type} ({planning.analysis.complexity.value} complexity)",
                ]
            ),
            f"## Immediate Next Steps\n\n{bullet_list(steps)}" if steps else "",
        ]
        if section
    )


def render_markdown(
    planning: PlanningResult,
    research: ResearchResult,
    recommendation: RecommendationResult,
    judgment: JudgmentResult,
    execution: ExecutionResult,
) -> str:
    """Full report, one section per stage, separated the way session exports are."""

    return "\n\n---\n\n".join(
        [
            final_summary(planning, research, recommendation, judgment, execution),
            format_planning_markdown(planning),
            format_research_markdown(research),
            format_recommendation_markdown(recommendation),
            format_judgment_markdown(judgment),
            format_execution_markdown(execution),
        ]
    )
