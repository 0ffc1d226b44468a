"""Execution stage: turn ranked plan evaluations into dated, resourced schedules.

The phase catalogue is table driven. Phase windows are computed from the
dependency graph (a phase starts when its latest dependency ends), and every
deliverable and milestone date is an offset inside its phase window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from .exceptions import CatalogueConfigurationError
from .judge import SCALABILITY_RISK, round_half_up, scalability_severity, validate_weights
from .logging import get_logger
from .schemas import (
    BudgetItem,
    Deliverable,
    DeliverableType,
    ExecutionMetric,
    ExecutionPhase,
    ExecutionPlan,
    ExecutionResult,
    JudgmentResult,
    Milestone,
    MitigationStatus,
    PlanEvaluation,
    PlanningResult,
    Priority,
    QualityGate,
    ResearchResult,
    ResourceAllocation,
    RiskMitigationPlan,
    Severity,
)

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Phase catalogue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeliverableTemplate:
    name: str
    description: str
    type: DeliverableType
    priority: Priority
    estimated_hours: int
    assigned_to: str
    due_week: int  # weeks after the phase starts


@dataclass(frozen=True)
class MilestoneTemplate:
    name: str
    week: int
    criteria: Tuple[str, ...]
    review_process: str


@dataclass(frozen=True)
class StaffingTemplate:
    role: str
    allocation: int
    responsibilities: Tuple[str, ...]


@dataclass(frozen=True)
class QualityGateTemplate:
    criteria: Tuple[str, ...]
    approvers: Tuple[str, ...]
    tools: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PhaseTemplate:
    """One catalogue entry. ``objectives`` may reference ``{features}`` and ``{project_type}``."""

    phase_id: str
    name: str
    duration_weeks: int
    objectives: Tuple[str, ...]
    deliverables: Tuple[DeliverableTemplate, ...]
    milestones: Tuple[MilestoneTemplate, ...]
    staffing: Tuple[StaffingTemplate, ...]
    risks: Tuple[str, ...]
    success_criteria: Tuple[str, ...]
    depends_on: Tuple[str, ...] = ()
    quality_gate: QualityGateTemplate | None = None


DEFAULT_CATALOGUE: Tuple[PhaseTemplate, ...] = (
    PhaseTemplate(
        phase_id="foundation",
        name="Foundation & Architecture",
        duration_weeks=4,
        objectives=(
            "Establish development infrastructure and CI/CD pipeline",
            "Implement the core {project_type} architecture",
            "Set up the AI model integration framework",
            "Create basic user authentication and authorization",
        ),
        deliverables=(
            DeliverableTemplate(
                "Development Environment Setup",
                "Complete development infrastructure with containers, CI/CD and monitoring",
                DeliverableType.CODE, Priority.CRITICAL, 40, "DevOps Engineer", 1,
            ),
            DeliverableTemplate(
                "Core Architecture Implementation",
                "Backend API structure, database schema and frontend scaffolding",
                DeliverableType.CODE, Priority.CRITICAL, 80, "Senior Full-stack Developer", 3,
            ),
            DeliverableTemplate(
                "AI Integration Framework",
                "Multi-model routing and service communication protocols",
                DeliverableType.CODE, Priority.CRITICAL, 60, "AI Integration Specialist", 4,
            ),
        ),
        milestones=(
            MilestoneTemplate(
                "Infrastructure Ready", 1,
                ("CI/CD pipeline functional", "Monitoring systems active", "Security scans passing"),
                "Technical lead approval + automated tests",
            ),
            MilestoneTemplate(
                "Architecture Complete", 4,
                ("Core APIs functional", "Database schema deployed", "Authentication working"),
                "Architecture review + integration testing",
            ),
        ),
        staffing=(
            StaffingTemplate("DevOps Engineer", 80, ("Infrastructure", "CI/CD", "Monitoring")),
            StaffingTemplate("Senior Full-stack Developer", 100, ("Core architecture", "API development")),
            StaffingTemplate("AI Integration Specialist", 60, ("AI framework", "Model integration")),
        ),
        risks=("Technology integration complexity", "AI model API limitations"),
        success_criteria=("All services deployable", "Basic AI integration working", "Foundation tests passing"),
        quality_gate=QualityGateTemplate(
            criteria=("Code coverage >80%", "Security scan passing", "Architecture review approved"),
            approvers=("Technical Lead", "Security Officer"),
            tools=("Jest", "SonarQube", "OWASP ZAP"),
        ),
    ),
    PhaseTemplate(
        phase_id="core-features",
        name="Core Feature Development",
        duration_weeks=6,
        objectives=(
            "Deliver the headline features: {features}",
            "Build AI-assisted workflows on top of the core architecture",
            "Develop real-time competitive intelligence capabilities",
            "Integrate feature services with the shared data layer",
        ),
        deliverables=(
            DeliverableTemplate(
                "Primary Feature Set",
                "The features customers evaluate first, production quality",
                DeliverableType.CODE, Priority.CRITICAL, 60, "AI Developer", 2,
            ),
            DeliverableTemplate(
                "Competitive Intelligence Module",
                "Automated competitor monitoring and market research feeds",
                DeliverableType.CODE, Priority.CRITICAL, 80, "AI Research Specialist", 4,
            ),
            DeliverableTemplate(
                "Feature Orchestration Layer",
                "Coordination between feature services and background jobs",
                DeliverableType.CODE, Priority.HIGH, 70, "AI Architecture Lead", 6,
            ),
        ),
        milestones=(
            MilestoneTemplate(
                "Core Features Functional", 4,
                ("Primary features operational", "Service coordination working", "Feature tests passing"),
                "Functionality review + performance testing",
            ),
        ),
        staffing=(
            StaffingTemplate("AI Developer", 100, ("Feature development", "Model integration")),
            StaffingTemplate("AI Research Specialist", 80, ("Research capabilities", "Data processing")),
            StaffingTemplate("AI Architecture Lead", 60, ("System coordination", "Performance optimization")),
        ),
        risks=("AI model performance issues", "Feature coordination complexity"),
        success_criteria=("All features functional independently", "Cross-feature workflows working", "Performance benchmarks met"),
        depends_on=("foundation",),
        quality_gate=QualityGateTemplate(
            criteria=("Feature performance benchmarks met", "Integration tests passing", "AI model accuracy >85%"),
            approvers=("AI Architecture Lead", "Product Manager"),
            tools=("AI testing framework", "Performance monitors", "Model validation tools"),
        ),
    ),
    PhaseTemplate(
        phase_id="user-experience",
        name="User Interface & Experience",
        duration_weeks=4,
        objectives=(
            "Design and implement an intuitive user interface",
            "Create the planning dashboard and visualizations",
            "Develop real-time progress tracking and reporting",
            "Implement responsive design for all device types",
        ),
        deliverables=(
            DeliverableTemplate(
                "Planning Interface",
                "Dashboard for AI-assisted project planning",
                DeliverableType.DESIGN, Priority.CRITICAL, 100, "UI/UX Designer + Frontend Developer", 3,
            ),
            DeliverableTemplate(
                "Real-time Analytics Dashboard",
                "Live competitive intelligence and progress tracking",
                DeliverableType.CODE, Priority.HIGH, 80, "Frontend Developer", 4,
            ),
        ),
        milestones=(
            MilestoneTemplate(
                "UI/UX Complete", 4,
                ("Responsive design implemented", "User testing completed", "Accessibility standards met"),
                "User experience review + accessibility audit",
            ),
        ),
        staffing=(
            StaffingTemplate("UI/UX Designer", 90, ("Design system", "User experience")),
            StaffingTemplate("Frontend Developer", 100, ("UI implementation", "Interactive features")),
        ),
        risks=("User experience complexity", "Real-time data visualization challenges"),
        success_criteria=("Intuitive user interface", "Real-time data visualization", "Mobile responsiveness"),
        depends_on=("foundation",),
        quality_gate=QualityGateTemplate(
            criteria=("Accessibility standards met", "User testing satisfaction >4.0/5", "Mobile responsiveness verified"),
            approvers=("UX Lead", "Accessibility Specialist"),
            tools=("Lighthouse", "Wave", "User testing platform"),
        ),
    ),
    PhaseTemplate(
        phase_id="integration-testing",
        name="Integration & Testing",
        duration_weeks=3,
        objectives=(
            "Integrate all system components",
            "Comprehensive testing (unit, integration, performance)",
            "Security audit and vulnerability assessment",
            "Performance optimization and scalability testing",
        ),
        deliverables=(
            DeliverableTemplate(
                "Full System Integration",
                "Complete integration of all components with end-to-end functionality",
                DeliverableType.TESTING, Priority.CRITICAL, 80, "Integration Team", 2,
            ),
            DeliverableTemplate(
                "Security & Performance Audit",
                "Security assessment and performance optimization",
                DeliverableType.TESTING, Priority.CRITICAL, 60, "Security Specialist + Performance Engineer", 3,
            ),
        ),
        milestones=(
            MilestoneTemplate(
                "Integration Complete", 3,
                ("All tests passing", "Security scan clear", "Performance benchmarks met"),
                "Final integration review + stakeholder approval",
            ),
        ),
        staffing=(
            StaffingTemplate("QA Engineer", 100, ("Testing", "Quality assurance")),
            StaffingTemplate("Security Specialist", 50, ("Security audit", "Vulnerability assessment")),
            StaffingTemplate("Performance Engineer", 60, ("Performance testing", "Optimization")),
        ),
        risks=("Integration complexity", "Performance bottlenecks"),
        success_criteria=("Full system functionality", "Security compliance", "Performance standards met"),
        depends_on=("core-features", "user-experience"),
        quality_gate=QualityGateTemplate(
            criteria=("All tests passing", "Performance benchmarks achieved", "Security audit clean"),
            approvers=("QA Lead", "Security Officer", "Performance Engineer"),
            tools=("Test automation suite", "Load testing tools", "Security scanners"),
        ),
    ),
    PhaseTemplate(
        phase_id="deployment",
        name="Deployment & Launch",
        duration_weeks=3,
        objectives=(
            "Production deployment and monitoring setup",
            "User onboarding and documentation",
            "Marketing launch and user acquisition",
            "Post-launch monitoring and optimization",
        ),
        deliverables=(
            DeliverableTemplate(
                "Production Deployment",
                "Live deployment with monitoring, logging and alerting",
                DeliverableType.DEPLOYMENT, Priority.CRITICAL, 40, "DevOps Team", 1,
            ),
            DeliverableTemplate(
                "Launch Campaign",
                "Marketing materials, user onboarding and acquisition strategy",
                DeliverableType.DOCUMENTATION, Priority.HIGH, 60, "Marketing Team", 3,
            ),
        ),
        milestones=(
            MilestoneTemplate(
                "Public Launch", 3,
                ("System live and stable", "User onboarding functional", "Marketing campaign active"),
                "Launch readiness review + go/no-go decision",
            ),
        ),
        staffing=(
            StaffingTemplate("DevOps Engineer", 80, ("Deployment", "Monitoring")),
            StaffingTemplate("Marketing Manager", 70, ("Launch campaign", "User acquisition")),
            StaffingTemplate("Technical Writer", 60, ("Documentation", "User guides")),
        ),
        risks=("Deployment issues", "User adoption challenges"),
        success_criteria=("Stable production system", "User onboarding complete", "Initial user acquisition"),
        depends_on=("integration-testing",),
    ),
)


def validate_catalogue(catalogue: Sequence[PhaseTemplate]) -> None:
    """Dependencies may only name phases listed earlier in the catalogue."""

    if not catalogue:
        raise CatalogueConfigurationError("Phase catalogue must contain at least one phase")
    seen: List[str] = []
    for template in catalogue:
        if template.phase_id in seen:
            raise CatalogueConfigurationError(f"Duplicate phase id '{template.phase_id}'", phase_id=template.phase_id)
        if template.duration_weeks < 1:
            raise CatalogueConfigurationError(
                f"Phase '{template.phase_id}' must last at least one week", phase_id=template.phase_id
            )
        for dependency in template.depends_on:
            if dependency not in seen:
                raise CatalogueConfigurationError(
                    f"Phase '{template.phase_id}' depends on '{dependency}', which is not an earlier phase",
                    phase_id=template.phase_id,
                )
        seen.append(template.phase_id)


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PhaseWindow:
    start_week: int
    end_week: int


def schedule_windows(catalogue: Sequence[PhaseTemplate]) -> Dict[str, PhaseWindow]:
    """Week offsets for each phase; a phase starts when its latest dependency ends."""

    windows: Dict[str, PhaseWindow] = {}
    for template in catalogue:
        start = max((windows[dependency].end_week for dependency in template.depends_on), default=0)
        windows[template.phase_id] = PhaseWindow(start, start + template.duration_weeks)
    return windows


def critical_path(catalogue: Sequence[PhaseTemplate], windows: Mapping[str, PhaseWindow]) -> List[str]:
    """Trace the chain that determines the finish date, back from the last phase to end."""

    by_id = {template.phase_id: template for template in catalogue}
    current = max(catalogue, key=lambda template: windows[template.phase_id].end_week).phase_id
    path = [current]
    while by_id[current].depends_on:
        current = max(by_id[current].depends_on, key=lambda dependency: windows[dependency].end_week)
        path.append(current)
    path.reverse()
    return path


def _week_label(weeks: int) -> str:
    return f"{weeks} week" if weeks == 1 else f"{weeks} weeks"


def _offset(start: date, weeks: int) -> date:
    return start + timedelta(weeks=weeks)


def _clamped_week(week: int, duration_weeks: int) -> int:
    return min(max(week, 0), duration_weeks)


def build_phase(
    index: int,
    template: PhaseTemplate,
    window: PhaseWindow,
    start_date: date,
    context: Mapping[str, str],
) -> ExecutionPhase:
    phase_start = _offset(start_date, window.start_week)
    phase_end = _offset(start_date, window.end_week)
    duration = _week_label(template.duration_weeks)

    deliverables = [
        Deliverable(
            id=f"del-{index}-{number}",
            name=item.name,
            description=item.description,
            type=item.type,
            priority=item.priority,
            estimated_hours=item.estimated_hours,
            assigned_to=item.assigned_to,
            due_date=_offset(phase_start, _clamped_week(item.due_week, template.duration_weeks)),
        )
        for number, item in enumerate(template.deliverables, start=1)
    ]
    milestones = [
        Milestone(
            id=f"ms-{index}-{number}",
            name=item.name,
            date=_offset(phase_start, _clamped_week(item.week, template.duration_weeks)),
            criteria=list(item.criteria),
            review_process=item.review_process,
        )
        for number, item in enumerate(template.milestones, start=1)
    ]
    resources = [
        ResourceAllocation(
            role=staff.role,
            allocation=staff.allocation,
            duration=duration,
            responsibilities=list(staff.responsibilities),
        )
        for staff in template.staffing
    ]
    return ExecutionPhase(
        phase_id=template.phase_id,
        name=template.name,
        duration=duration,
        duration_weeks=template.duration_weeks,
        start_date=phase_start,
        end_date=phase_end,
        objectives=[objective.format(**context) for objective in template.objectives],
        deliverables=deliverables,
        milestones=milestones,
        resources=resources,
        dependencies=list(template.depends_on),
        risks=list(template.risks),
        success_criteria=list(template.success_criteria),
    )


# ---------------------------------------------------------------------------
# Risk register, quality gates, budget, metrics
# ---------------------------------------------------------------------------

RISK_RESPONSES: Dict[str, Tuple[str, str]] = {
    "AI Model Integration Complexity": (
        "Implement robust error handling, fallback mechanisms and extensive testing for each AI model integration",
        "AI Integration Specialist",
    ),
    "Market Competition Response": (
        "Accelerate time-to-market, file provisional patents and maintain competitive intelligence monitoring",
        "Product Manager",
    ),
    SCALABILITY_RISK: (
        "Load test early, design for horizontal scaling and budget for infrastructure optimization",
        "Infrastructure Architect",
    ),
}
DEFAULT_RISK_RESPONSE = ("Track in weekly risk review and escalate when triggered", "Project Manager")

OPERATIONAL_RISKS: Tuple[Tuple[str, float, Severity, str, str], ...] = (
    (
        "Performance Issues Under Load",
        0.3,
        Severity.HIGH,
        "Conduct load testing early, implement caching strategies and prepare auto-scaling infrastructure",
        "Performance Engineer",
    ),
    (
        "Team Resource Constraints",
        0.2,
        Severity.HIGH,
        "Maintain backup contractor relationships, cross-train team members and implement knowledge sharing",
        "Project Manager",
    ),
)

ACTIVE_PROBABILITY = 0.5


def risk_register(evaluation: PlanEvaluation) -> List[RiskMitigationPlan]:
    """Carry the judged risk factors forward and add delivery risks."""

    entries = []
    for factor in evaluation.risk_assessment.risk_factors:
        impact = factor.severity
        if factor.factor == SCALABILITY_RISK:
            impact = scalability_severity(evaluation.investment)
        mitigation, owner = RISK_RESPONSES.get(factor.factor, DEFAULT_RISK_RESPONSE)
        entries.append((factor.factor, factor.probability, impact, mitigation, owner))
    entries.extend(OPERATIONAL_RISKS)

    return [
        RiskMitigationPlan(
            risk_id=f"risk-{number}",
            risk=risk,
            probability=probability,
            impact=impact,
            mitigation=mitigation,
            owner=owner,
            status=MitigationStatus.ACTIVE if probability >= ACTIVE_PROBABILITY else MitigationStatus.PLANNED,
        )
        for number, (risk, probability, impact, mitigation, owner) in enumerate(entries, start=1)
    ]


def quality_gates(catalogue: Sequence[PhaseTemplate]) -> List[QualityGate]:
    gated = [template for template in catalogue if template.quality_gate is not None]
    return [
        QualityGate(
            gate_id=f"qg-{number}",
            phase=template.name,
            criteria=list(template.quality_gate.criteria),
            approvers=list(template.quality_gate.approvers),
            tools=list(template.quality_gate.tools),
        )
        for number, template in enumerate(gated, start=1)
    ]


# Reference amounts for a High-tier plan; other tiers scale them.
BASE_BUDGET: Tuple[Tuple[str, int, str], ...] = (
    ("Development Team", 180_000, "Salaries and contractor fees for the {weeks}-week development period"),
    ("AI Model APIs", 15_000, "API costs for the hosted language and research models"),
    ("Infrastructure", 8_000, "Cloud hosting, CI/CD tools, monitoring and development infrastructure"),
    ("Third-party Services", 5_000, "Design tools, testing services, security audits and productivity tools"),
    ("Marketing & Launch", 12_000, "Launch campaign, content creation and initial user acquisition"),
)
CONTINGENCY_CATEGORY = "Contingency (10%)"
CONTINGENCY_RATE = 0.10


def budget_breakdown(evaluation: PlanEvaluation, total_weeks: int) -> List[BudgetItem]:
    multiplier = evaluation.investment.budget_multiplier
    items = []
    for category, amount, description in BASE_BUDGET:
        scaled = round_half_up(amount * multiplier)
        items.append(
            BudgetItem(category=category, estimated=scaled, allocated=scaled, description=description.format(weeks=total_weeks))
        )
    contingency = round_half_up(sum(item.estimated for item in items) * CONTINGENCY_RATE)
    items.append(
        BudgetItem(
            category=CONTINGENCY_CATEGORY,
            estimated=contingency,
            allocated=contingency,
            description="Risk mitigation and unexpected costs buffer",
        )
    )
    return items


SUCCESS_METRICS: Tuple[ExecutionMetric, ...] = (
    ExecutionMetric(
        metric="Development Velocity",
        target=">85% story points completed on time",
        measurement="Sprint completion rate",
        frequency="Weekly",
    ),
    ExecutionMetric(
        metric="AI Feature Performance",
        target=">90% successful AI-assisted interactions",
        measurement="Success rate and response accuracy",
        frequency="Daily",
    ),
    ExecutionMetric(
        metric="System Performance",
        target="<2 second response time, >99.5% uptime",
        measurement="Response time and availability monitoring",
        frequency="Real-time",
    ),
    ExecutionMetric(
        metric="User Satisfaction",
        target=">4.2/5 user satisfaction score",
        measurement="User feedback and Net Promoter Score",
        frequency="Bi-weekly",
    ),
    ExecutionMetric(
        metric="Competitive Position",
        target="Feature parity + 3 unique AI advantages",
        measurement="Feature comparison and market analysis",
        frequency="Monthly",
    ),
)


# ---------------------------------------------------------------------------
# Readiness
# ---------------------------------------------------------------------------

READINESS_FACTORS: Dict[str, float] = {
    "technical_feasibility": 0.90,
    "resource_availability": 0.85,
    "market_timing": 0.95,
    "risk_management": 0.88,
    "budget_realism": 0.90,
}

READINESS_WEIGHTS: Dict[str, float] = {
    "technical_feasibility": 0.25,
    "resource_availability": 0.20,
    "market_timing": 0.25,
    "risk_management": 0.15,
    "budget_realism": 0.15,
}


def readiness_score(factors: Mapping[str, float], weights: Mapping[str, float]) -> int:
    return round_half_up(sum(value * weights.get(name, 0.0) for name, value in factors.items()) * 100)


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------

CONFIDENCE = 0.91
MAX_ALTERNATIVES = 2


class Executioner:
    """Fifth pipeline stage."""

    def __init__(
        self,
        catalogue: Sequence[PhaseTemplate] = DEFAULT_CATALOGUE,
        readiness_weights: Mapping[str, float] = READINESS_WEIGHTS,
        models: Sequence[str] = (),
        clock: Callable[[], date] = date.today,
    ) -> None:
        validate_catalogue(catalogue)
        validate_weights(readiness_weights, stage="execution")
        self.catalogue: Tuple[PhaseTemplate, ...] = tuple(catalogue)
        self.readiness_weights = dict(readiness_weights)
        self.model_used = models[0] if models else "phase-catalogue"
        self._clock = clock
        self._windows = schedule_windows(self.catalogue)
        self._critical_path = critical_path(self.catalogue, self._windows)
        self._total_weeks = max(window.end_week for window in self._windows.values())

    def build_plan(self, evaluation: PlanEvaluation, planning: PlanningResult, start_date: date) -> ExecutionPlan:
        context = {
            "features": ", ".join(planning.analysis.required_features[:3]),
            "project_type": planning.analysis.project_type.lower(),
        }
        phases = [
            build_phase(index, template, self._windows[template.phase_id], start_date, context)
            for index, template in enumerate(self.catalogue, start=1)
        ]
        return ExecutionPlan(
            plan_id=evaluation.plan_id,
            plan_name=evaluation.plan_title,
            total_duration=_week_label(self._total_weeks),
            phases=phases,
            critical_path=list(self._critical_path),
            risk_mitigation=risk_register(evaluation),
            quality_gates=quality_gates(self.catalogue),
            budget_breakdown=budget_breakdown(evaluation, self._total_weeks),
            success_metrics=list(SUCCESS_METRICS),
        )

    def plan(
        self,
        best: PlanEvaluation,
        runners_up: Sequence[PlanEvaluation],
        planning: PlanningResult,
        research: ResearchResult,
        judgment: JudgmentResult,
        start_date: date | None = None,
    ) -> ExecutionResult:
        start = start_date or self._clock()
        recommended = self.build_plan(best, planning, start)
        alternatives = [self.build_plan(evaluation, planning, start) for evaluation in runners_up[:MAX_ALTERNATIVES]]
        logger.debug(
            "execution_planned",
            plan_id=best.plan_id,
            alternatives=len(alternatives),
            total_weeks=self._total_weeks,
            judge_confidence=judgment.confidence,
        )
        return ExecutionResult(
            recommended_plan=recommended,
            alternative_plans=alternatives,
            implementation_strategy=implementation_strategy(recommended, best, research),
            next_steps=next_steps(recommended, start),
            model_used=self.model_used,
            confidence=CONFIDENCE,
            readiness_score=readiness_score(READINESS_FACTORS, self.readiness_weights),
        )


def implementation_strategy(plan: ExecutionPlan, evaluation: PlanEvaluation, research: ResearchResult) -> str:
    """Narrative strategy derived from the schedule and the winning evaluation."""

    phase_names = {phase.phase_id: phase.name for phase in plan.phases}
    chain = " → ".join(phase_names[phase_id] for phase_id in plan.critical_path)
    parallel = [phase.name for phase in plan.phases if phase.phase_id not in plan.critical_path]
    top_gap = research.competitive_gaps[0] if research.competitive_gaps else "unserved customer needs"

    lines = [
        f"**{plan.plan_name} Execution Strategy**",
        "",
        f"1. **Speed-to-Market Focus**: Use the {plan.total_duration} timeline to reach the market ahead of competitors",
        f"2. **Critical Path Discipline**: Protect the chain {chain}; any slip there moves the launch date",
    ]
    if parallel:
        lines.append(f"3. **Parallel Workstreams**: Run {', '.join(parallel)} alongside the critical path")
    else:
        lines.append("3. **Single Workstream**: Every phase sits on the critical path, so staff it without gaps")
    lines.extend(
        [
            f"4. **Competitive Differentiation**: Lead with the gap competitors leave open: {top_gap}",
            f"5. **Investment Discipline**: Hold spend within the {evaluation.investment.label} envelope "
            f"({plan.total_budget:,} planned)",
            "6. **Continuous Iteration**: Weekly releases and feedback loops once the product is live",
            "",
            "**Key Success Factors:**",
            "- Weekly progress reviews with stakeholder alignment",
            "- Automated testing and deployment from day one",
            "- Competitive intelligence feeding roadmap decisions",
        ]
    )
    return "\n".join(lines)


def next_steps(plan: ExecutionPlan, start_date: date) -> List[str]:
    """One step per phase kickoff, in start order, plus launch follow-up."""

    steps = []
    for phase in sorted(plan.phases, key=lambda phase: phase.start_date):
        week = (phase.start_date - start_date).days // 7 + 1
        openers = [deliverable.name for deliverable in phase.deliverables] + list(phase.objectives)
        first = openers[0] if openers else "the phase kickoff"
        steps.append(f"**Week {week}**: Start {phase.name} ({phase.start_date.isoformat()}), beginning with {first}")
    last_phase = max(plan.phases, key=lambda phase: phase.end_date)
    steps.append(f"**{last_phase.end_date.isoformat()}**: Complete {last_phase.name} and review launch readiness")
    steps.append("**Post-Launch**: Continuous improvement based on user feedback and competitive analysis")
    return steps
