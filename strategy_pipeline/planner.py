"""Planning stage: classify the project and draft a coarse roadmap."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .logging import get_logger
from .schemas import (
    Complexity,
    PlanningResult,
    ProjectAnalysis,
    ResourceRequirement,
    ResourceType,
    RoadmapPhase,
)
from .text import mentions_any, normalize_text

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Vocabulary tables
# ---------------------------------------------------------------------------

DEFAULT_PROJECT_TYPE = "Web Application"

PROJECT_TYPES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("ide", "editor"), "Development Environment"),
    (("ecommerce", "e-commerce", "shop"), "E-commerce Platform"),
    (("social", "network"), "Social Network"),
    (("dashboard", "analytics"), "Analytics Dashboard"),
)

# Scanned in this order; the first tier with a hit wins.
COMPLEXITY_INDICATORS: Tuple[Tuple[Complexity, Tuple[str, ...]], ...] = (
    (Complexity.HIGH, ("ai", "machine learning", "real-time", "realtime", "scalable", "enterprise", "microservices")),
    (Complexity.MEDIUM, ("database", "authentication", "auth", "api", "responsive", "integration")),
    (Complexity.LOW, ("simple", "basic", "static", "landing", "portfolio")),
)

FEATURE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "User Authentication": ("login", "auth", "authentication", "sign up", "signup", "register", "registration"),
    "Real-time Updates": ("real-time", "realtime", "live", "websocket"),
    "Database Integration": ("database", "data", "storage", "persistence"),
    "API Development": ("api", "endpoint", "rest", "graphql"),
    "Responsive Design": ("responsive", "mobile", "tablet", "device"),
    "Payment Processing": ("payment", "checkout", "stripe", "billing"),
    "File Management": ("upload", "file", "document", "media"),
    "Search Functionality": ("search", "filter", "find", "query"),
}

DEFAULT_FEATURES: Tuple[str, ...] = ("Core Functionality", "User Interface", "Data Management")

BASE_STACK: Tuple[str, ...] = ("React", "TypeScript", "Node.js", "Express")

STACK_ADDITIONS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("database", "data"), ("PostgreSQL", "Drizzle ORM")),
    (("real-time", "realtime", "chat"), ("WebSocket", "Socket.io")),
    (("ai", "machine learning"), ("OpenAI API", "TensorFlow")),
)

TIMELINES: Dict[Complexity, str] = {
    Complexity.LOW: "2-4 weeks",
    Complexity.MEDIUM: "6-12 weeks",
    Complexity.HIGH: "3-6 months",
    Complexity.ENTERPRISE: "6-12 months",
}

BASE_RISKS: Tuple[str, ...] = ("Technical complexity scaling", "Integration challenges")

CONDITIONAL_RISKS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("ai", "machine learning"), "AI model accuracy and reliability"),
    (("real-time", "realtime"), "Performance under high concurrent load"),
    (("payment",), "Security compliance requirements"),
)

SUCCESS_METRICS: Tuple[str, ...] = (
    "User engagement rate > 80%",
    "Page load time < 2 seconds",
    "Feature completion rate > 95%",
    "User satisfaction score > 4.5/5",
)

ROADMAP: Tuple[RoadmapPhase, ...] = (
    RoadmapPhase(
        phase="Foundation",
        duration="1-2 weeks",
        objectives=["Set up development environment", "Implement core architecture"],
        deliverables=["Project setup", "Basic routing", "Database schema"],
        dependencies=["Technology stack selection"],
    ),
    RoadmapPhase(
        phase="Core Development",
        duration="3-6 weeks",
        objectives=["Implement primary features", "Build user interface"],
        deliverables=["Main functionality", "User authentication", "Core UI components"],
        dependencies=["Foundation phase completion"],
    ),
    RoadmapPhase(
        phase="Integration & Testing",
        duration="1-2 weeks",
        objectives=["Integrate all components", "Comprehensive testing"],
        deliverables=["Integrated system", "Test suite", "Bug fixes"],
        dependencies=["Core development completion"],
    ),
    RoadmapPhase(
        phase="Deployment & Launch",
        duration="1 week",
        objectives=["Deploy to production", "Monitor performance"],
        deliverables=["Live application", "Monitoring setup", "Documentation"],
        dependencies=["Testing completion"],
    ),
)

BASE_CONFIDENCE = 0.92
REASONING = "Keyword classification of the project brief combined with complexity-tiered timeline and resource tables."


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def classify_project_type(description: object) -> str:
    """Map the project description onto the fixed project-type vocabulary."""

    text = normalize_text(description)
    for keywords, project_type in PROJECT_TYPES:
        if mentions_any(text, keywords):
            return project_type
    return DEFAULT_PROJECT_TYPE


def _match_complexity(text: str) -> Complexity | None:
    for level, indicators in COMPLEXITY_INDICATORS:
        if mentions_any(text, indicators):
            return level
    return None


def assess_complexity(description: object, requirements: object) -> Complexity:
    """Return the first complexity tier (high, medium, low) with a keyword hit."""

    return _match_complexity(normalize_text(description, requirements)) or Complexity.MEDIUM


def extract_features(description: object, requirements: object) -> List[str]:
    """Return canonical features mentioned in the brief, never an empty list."""

    text = normalize_text(description, requirements)
    features = [feature for feature, keywords in FEATURE_KEYWORDS.items() if mentions_any(text, keywords)]
    return features or list(DEFAULT_FEATURES)


def recommend_stack(text: str) -> List[str]:
    stack = list(BASE_STACK)
    for keywords, additions in STACK_ADDITIONS:
        if mentions_any(text, keywords):
            stack.extend(additions)
    return stack


def identify_risks(text: str) -> List[str]:
    risks = list(BASE_RISKS)
    risks.extend(risk for keywords, risk in CONDITIONAL_RISKS if mentions_any(text, keywords))
    return risks


def resource_requirements(complexity: Complexity) -> List[ResourceRequirement]:
    heavy = complexity in (Complexity.HIGH, Complexity.ENTERPRISE)
    return [
        ResourceRequirement(
            type=ResourceType.HUMAN,
            resource="Full-stack Developer",
            quantity="2-3" if heavy else "1-2",
            justification="Core development and implementation",
        ),
        ResourceRequirement(
            type=ResourceType.HUMAN,
            resource="UI/UX Designer",
            quantity="1",
            justification="User interface and experience design",
        ),
        ResourceRequirement(
            type=ResourceType.TECHNICAL,
            resource="Cloud Infrastructure",
            quantity="Scalable tier" if heavy else "Standard tier",
            justification="Hosting and deployment requirements",
        ),
        ResourceRequirement(
            type=ResourceType.FINANCIAL,
            resource="Development Budget",
            quantity="$15,000-$30,000" if heavy else "$5,000-$15,000",
            justification="Development costs and third-party services",
        ),
    ]


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------


class Planner:
    """First pipeline stage. Never raises; malformed input degrades to defaults."""

    def __init__(self, models: Sequence[str] = ()) -> None:
        self.model_used = models[0] if models else "keyword-heuristics"

    def analyze(self, description: object, requirements: object = "") -> PlanningResult:
        text = normalize_text(description, requirements)
        project_type = classify_project_type(description)
        matched_complexity = _match_complexity(text)
        complexity = matched_complexity or Complexity.MEDIUM
        features = extract_features(description, requirements)

        confidence = BASE_CONFIDENCE
        if project_type == DEFAULT_PROJECT_TYPE:
            confidence -= 0.1
        if matched_complexity is None:
            confidence -= 0.1
        if features == list(DEFAULT_FEATURES):
            confidence -= 0.05

        analysis = ProjectAnalysis(
            project_type=project_type,
            complexity=complexity,
            required_features=features,
            technical_stack=recommend_stack(text),
            estimated_timeline=TIMELINES[complexity],
            risk_factors=identify_risks(text),
            success_metrics=list(SUCCESS_METRICS),
        )
        logger.debug(
            "project_classified",
            project_type=project_type,
            complexity=complexity.value,
            features=len(features),
        )
        return PlanningResult(
            analysis=analysis,
            development_roadmap=[phase.model_copy(deep=True) for phase in ROADMAP],
            resource_requirements=resource_requirements(complexity),
            model_used=self.model_used,
            confidence=round(confidence, 2),
            reasoning=REASONING,
        )
