"""Pydantic models and enums for the strategic decision pipeline.

Every stage record is frozen: a stage builds a fresh record and never edits
one it received.
"""

from __future__ import annotations

import datetime as dt
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PipelineStage(str, Enum):
    """Enumerate the pipeline stages."""

    PLANNING = "planning"
    RESEARCH = "research"
    RECOMMENDATION = "recommendation"
    JUDGMENT = "judgment"
    EXECUTION = "execution"

    @property
    def order(self) -> int:
        """Return a human-friendly order index for the stage."""
        stage_order = {
            PipelineStage.PLANNING: 1,
            PipelineStage.RESEARCH: 2,
            PipelineStage.RECOMMENDATION: 3,
            PipelineStage.JUDGMENT: 4,
            PipelineStage.EXECUTION: 5,
        }
        return stage_order[self]


class Complexity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ENTERPRISE = "enterprise"


class ResourceType(str, Enum):
    HUMAN = "human"
    TECHNICAL = "technical"
    FINANCIAL = "financial"


class MarketPosition(str, Enum):
    LEADER = "leader"
    CHALLENGER = "challenger"
    NICHE = "niche"
    EMERGING = "emerging"


class RecommendationCategory(str, Enum):
    """The five categories the judge buckets recommendations by."""

    COMPETITIVE_ADVANTAGE = "competitive-advantage"
    FEATURE_INNOVATION = "feature-innovation"
    MARKET_POSITIONING = "market-positioning"
    TECHNICAL_ARCHITECTURE = "technical-architecture"
    MONETIZATION = "monetization"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InnovationType(str, Enum):
    DISRUPTIVE = "disruptive"
    INCREMENTAL = "incremental"
    ARCHITECTURAL = "architectural"


class InvestmentTier(str, Enum):
    """Investment tiers a plan variant can be assigned, cheapest first."""

    LOW_MEDIUM = "Low-Medium"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"

    @property
    def budget_range(self) -> str:
        ranges = {
            InvestmentTier.LOW_MEDIUM: "$50K-$100K",
            InvestmentTier.MEDIUM: "$100K-$150K",
            InvestmentTier.HIGH: "$200K-$300K",
            InvestmentTier.VERY_HIGH: "$300K+",
        }
        return ranges[self]

    @property
    def budget_multiplier(self) -> float:
        """Scale applied to the reference (High tier) execution budget."""
        multipliers = {
            InvestmentTier.LOW_MEDIUM: 0.4,
            InvestmentTier.MEDIUM: 0.65,
            InvestmentTier.HIGH: 1.0,
            InvestmentTier.VERY_HIGH: 1.5,
        }
        return multipliers[self]

    @property
    def label(self) -> str:
        return f"{self.value} ({self.budget_range})"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Verdict(str, Enum):
    """Recommendation tier attached to a plan evaluation."""

    STRONGLY_RECOMMEND = "strongly-recommend"
    RECOMMEND = "recommend"
    CONDITIONAL = "conditional"
    NOT_RECOMMEND = "not-recommend"


class DeliverableType(str, Enum):
    CODE = "code"
    DESIGN = "design"
    DOCUMENTATION = "documentation"
    TESTING = "testing"
    DEPLOYMENT = "deployment"


class MitigationStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    MITIGATED = "mitigated"


class Record(BaseModel):
    """Base class for immutable stage records."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


class ProjectAnalysis(Record):
    project_type: str
    complexity: Complexity
    required_features: List[str]
    technical_stack: List[str]
    estimated_timeline: str
    risk_factors: List[str]
    success_metrics: List[str]


class RoadmapPhase(Record):
    phase: str
    duration: str
    objectives: List[str]
    deliverables: List[str]
    dependencies: List[str]


class ResourceRequirement(Record):
    type: ResourceType
    resource: str
    quantity: str
    justification: str


class PlanningResult(Record):
    analysis: ProjectAnalysis
    development_roadmap: List[RoadmapPhase]
    resource_requirements: List[ResourceRequirement]
    model_used: str
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str


# ---------------------------------------------------------------------------
# Research
# ---------------------------------------------------------------------------


class CompetitorProfile(Record):
    name: str
    domain: str
    market_position: MarketPosition
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    pricing: str = ""
    user_base: str = ""
    key_features: List[str] = Field(default_factory=list)
    technology_stack: List[str] = Field(default_factory=list)
    market_share: float = Field(default=0.0, ge=0.0, le=100.0)
    recent_news: List[str] = Field(default_factory=list)


class MarketAnalysis(Record):
    market_size: str
    growth_rate: str
    key_trends: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    threats: List[str] = Field(default_factory=list)
    target_segments: List[str] = Field(default_factory=list)


class MarketPanel(Record):
    """Competitor panel plus market analysis returned by a research provider."""

    competitors: List[CompetitorProfile] = Field(min_length=1)
    market_analysis: MarketAnalysis


class ResearchResult(Record):
    top_competitors: List[CompetitorProfile]
    market_analysis: MarketAnalysis
    competitive_gaps: List[str]
    recommendations: List[str]
    model_used: str
    confidence: float = Field(ge=0.0, le=1.0)
    last_updated: date
    degraded: bool = Field(
        default=False,
        description="True when a live research backend failed and the static panel was used.",
    )


# ---------------------------------------------------------------------------
# Recommendation
# ---------------------------------------------------------------------------


class StrategicRecommendation(Record):
    category: RecommendationCategory
    priority: Priority
    title: str
    description: str
    implementation: str
    expected_impact: str
    timeframe: str
    resources: str
    risks: List[str]
    success_metrics: List[str]


class InnovationSuggestion(Record):
    type: InnovationType
    concept: str
    differentiation: str
    market_potential: str
    technical_feasibility: str
    implementation_approach: str


class RecommendationResult(Record):
    strategic_recommendations: List[StrategicRecommendation]
    innovation_suggestions: List[InnovationSuggestion]
    competitive_positioning: str
    unique_value_propositions: List[str]
    model_used: str
    confidence: float = Field(ge=0.0, le=1.0)
    creativity_score: float = Field(ge=0.0, le=1.0)


# ---------------------------------------------------------------------------
# Judgment
# ---------------------------------------------------------------------------


class JudgmentCriterion(Record):
    category: str
    weight: float = Field(ge=0.0, le=1.0)
    description: str
    scoring_method: str


class CategoryScore(Record):
    category: str
    score: int
    max_score: int
    rationale: str


class RiskFactor(Record):
    factor: str
    severity: Severity
    probability: float = Field(ge=0.0, le=1.0)
    impact: str


class RiskAssessment(Record):
    overall_risk: RiskLevel
    risk_factors: List[RiskFactor]
    mitigation: List[str]


class PlanEvaluation(Record):
    plan_id: str
    plan_title: str
    investment: InvestmentTier
    timeline: str
    overall_score: int = Field(ge=0)
    category_scores: List[CategoryScore]
    strengths: List[str]
    weaknesses: List[str]
    risk_assessment: RiskAssessment
    recommendation: Verdict
    reasoning: str


class JudgmentResult(Record):
    evaluations: List[PlanEvaluation]
    ranked_recommendations: List[PlanEvaluation] = Field(min_length=1)
    best_plan: PlanEvaluation
    consensus_analysis: str
    model_used: str
    confidence: float = Field(ge=0.0, le=1.0)
    evaluation_metrics: List[JudgmentCriterion]


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


class Deliverable(Record):
    id: str
    name: str
    description: str
    type: DeliverableType
    priority: Priority
    estimated_hours: int = Field(ge=0)
    assigned_to: str
    due_date: date


class Milestone(Record):
    id: str
    name: str
    date: dt.date
    criteria: List[str]
    review_process: str


class ResourceAllocation(Record):
    role: str
    allocation: int = Field(ge=0, le=100, description="Percentage of the role's time.")
    duration: str
    responsibilities: List[str]


class ExecutionPhase(Record):
    phase_id: str
    name: str
    duration: str
    duration_weeks: int = Field(ge=1)
    start_date: date
    end_date: date
    objectives: List[str]
    deliverables: List[Deliverable]
    milestones: List[Milestone]
    resources: List[ResourceAllocation]
    dependencies: List[str]
    risks: List[str]
    success_criteria: List[str]


class RiskMitigationPlan(Record):
    risk_id: str
    risk: str
    probability: float = Field(ge=0.0, le=1.0)
    impact: Severity
    mitigation: str
    owner: str
    status: MitigationStatus


class QualityGate(Record):
    gate_id: str
    phase: str
    criteria: List[str]
    approvers: List[str]
    tools: List[str]


class BudgetItem(Record):
    category: str
    estimated: int = Field(ge=0)
    allocated: int = Field(ge=0)
    description: str


class ExecutionMetric(Record):
    metric: str
    target: str
    measurement: str
    frequency: str


class ExecutionPlan(Record):
    plan_id: str
    plan_name: str
    total_duration: str
    phases: List[ExecutionPhase]
    critical_path: List[str]
    risk_mitigation: List[RiskMitigationPlan]
    quality_gates: List[QualityGate]
    budget_breakdown: List[BudgetItem]
    success_metrics: List[ExecutionMetric]

    @property
    def total_budget(self) -> int:
        return sum(item.estimated for item in self.budget_breakdown)


class ExecutionResult(Record):
    recommended_plan: ExecutionPlan
    alternative_plans: List[ExecutionPlan]
    implementation_strategy: str
    next_steps: List[str]
    model_used: str
    confidence: float = Field(ge=0.0, le=1.0)
    readiness_score: int = Field(ge=0, le=100)


# ---------------------------------------------------------------------------
# Pipeline and service payloads
# ---------------------------------------------------------------------------


class PipelineResult(Record):
    """All five stage outputs plus the rendered final summary."""

    planning: PlanningResult
    research: ResearchResult
    recommendation: RecommendationResult
    judgment: JudgmentResult
    execution: ExecutionResult
    summary: str


class PipelineRequest(BaseModel):
    """Payload for running the full pipeline."""

    description: str = Field(
        ...,
        min_length=10,
        description="Natural-language description of the project.",
    )
    requirements: str = Field(
        default="",
        description="Free-text requirements that sharpen the complexity and feature analysis.",
    )
    industry: str = Field(
        default="",
        description="Industry hint used to pick the competitor panel.",
    )
    session_id: Optional[str] = Field(
        default=None,
        description="Optional session identifier used to store the run for later retrieval.",
    )
    start_date: Optional[date] = Field(
        default=None,
        description="Execution schedule start date; defaults to today.",
    )


class PlanningRequest(BaseModel):
    description: str = Field(..., min_length=1)
    requirements: str = ""


class ResearchRequest(BaseModel):
    project_type: str = Field(..., min_length=1)
    industry: str = ""


class StageDefinition(BaseModel):
    """Expose metadata that describes a stage to callers."""

    id: PipelineStage
    label: str
    description: str
    depends_on: List[PipelineStage]


class PipelineRunResponse(BaseModel):
    session_id: Optional[str]
    result: PipelineResult
    markdown: str


class SessionResponse(BaseModel):
    """Stored pipeline runs for a session, most recent last."""

    session_id: str
    runs: List[PipelineResult]
    combined_markdown: str

