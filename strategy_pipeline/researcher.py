"""Research stage: competitor panel, market analysis, gaps and recommendations.

The competitor data comes from a ``ResearchProvider``. The shipped provider is
static and in-memory; a live provider (see ``llm.OpenAIResearchProvider``) can
be swapped in, and when it fails the static panel is used instead.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from .logging import get_logger
from .schemas import (
    CompetitorProfile,
    MarketAnalysis,
    MarketPanel,
    MarketPosition,
    ResearchResult,
)
from .text import mentions_any, normalize_text

logger = get_logger(__name__)


class ResearchProvider(Protocol):
    """Anything able to produce a competitor panel for a project domain."""

    name: str

    def fetch_panel(self, project_type: str, industry: str) -> MarketPanel:
        ...


class ResearchSource(Protocol):
    """The stage contract; a full replacement for ``Researcher``."""

    def research(self, project_type: str, industry: str) -> ResearchResult:
        ...


# ---------------------------------------------------------------------------
# Static panel
# ---------------------------------------------------------------------------

DEVELOPMENT_KEYWORDS: Tuple[str, ...] = (
    "ide",
    "development",
    "developer",
    "development environment",
    "devtools",
    "editor",
    "coding",
)

DEVELOPMENT_PANEL = MarketPanel(
    competitors=[
        CompetitorProfile(
            name="Replit",
            domain="replit.com",
            market_position=MarketPosition.LEADER,
            strengths=["Instant setup", "Collaboration features", "Educational focus", "Cloud hosting"],
            weaknesses=["Performance limitations", "Limited enterprise features", "Pricing concerns"],
            pricing="Free tier + $7/month Hacker + $20/month Pro",
            user_base="20+ million developers",
            key_features=["Browser-based IDE", "Real-time collaboration", "Instant deployment", "Template library"],
            technology_stack=["Node.js", "WebContainers", "Docker", "PostgreSQL"],
            market_share=35,
            recent_news=["New AI features launched", "Series B funding raised", "Enterprise tier expansion"],
        ),
        CompetitorProfile(
            name="CodeSandbox",
            domain="codesandbox.io",
            market_position=MarketPosition.CHALLENGER,
            strengths=["React/Vue focus", "NPM integration", "Prototype speed", "GitHub integration"],
            weaknesses=["Limited language support", "Complex projects struggle", "Team features lacking"],
            pricing="Free tier + $9/month Pro + $24/month Team",
            user_base="15+ million developers",
            key_features=["Live prototyping", "NPM support", "Template sharing", "Git integration"],
            technology_stack=["React", "Node.js", "Kubernetes", "MongoDB"],
            market_share=25,
            recent_news=["iOS app launched", "New framework templates", "DevTool integrations"],
        ),
        CompetitorProfile(
            name="Gitpod",
            domain="gitpod.io",
            market_position=MarketPosition.NICHE,
            strengths=["VS Code integration", "Docker support", "Self-hosted option", "Enterprise focus"],
            weaknesses=["Complex setup", "Resource intensive", "Higher learning curve"],
            pricing="Free tier + $9/month Personal + $39/month Team",
            user_base="8+ million developers",
            key_features=["Pre-configured environments", "VS Code in browser", "Docker support", "Self-hosting"],
            technology_stack=["Kubernetes", "Docker", "VS Code", "Theia"],
            market_share=15,
            recent_news=["Enterprise partnerships", "Self-hosted improvements", "IDE performance boost"],
        ),
        CompetitorProfile(
            name="StackBlitz",
            domain="stackblitz.com",
            market_position=MarketPosition.NICHE,
            strengths=["WebContainer technology", "Angular focus", "Local-like performance", "Instant startup"],
            weaknesses=["Limited backend support", "Newer platform", "Smaller community"],
            pricing="Free tier + $10/month Pro + Custom Enterprise",
            user_base="5+ million developers",
            key_features=["WebContainers", "Instant environments", "Angular templates", "Fast performance"],
            technology_stack=["WebContainers", "Angular", "Node.js", "Firebase"],
            market_share=12,
            recent_news=["WebContainer 2.0 released", "Google partnership", "New framework support"],
        ),
        CompetitorProfile(
            name="GitHub Codespaces",
            domain="github.com/codespaces",
            market_position=MarketPosition.CHALLENGER,
            strengths=["GitHub integration", "VS Code support", "Enterprise grade", "Powerful compute"],
            weaknesses=["Expensive pricing", "Complex for beginners", "Limited free tier"],
            pricing="$0.18/hour for 2-core + storage fees",
            user_base="12+ million developers",
            key_features=["VS Code integration", "Dev containers", "GitHub sync", "Powerful compute"],
            technology_stack=["VS Code", "Docker", "Azure", "GitHub"],
            market_share=13,
            recent_news=["Pricing updates", "New machine types", "Mobile support expansion"],
        ),
    ],
    market_analysis=MarketAnalysis(
        market_size="$2.3 billion (Cloud IDE market)",
        growth_rate="22.7% CAGR (2024-2030)",
        key_trends=[
            "Remote development adoption accelerating",
            "AI-assisted coding becoming standard",
            "Low-code/no-code platform integration",
            "Enhanced collaboration features demand",
            "Mobile development environment growth",
        ],
        opportunities=[
            "Enterprise remote development solutions",
            "Educational institution partnerships",
            "AI-powered development assistance",
            "Industry-specific development environments",
            "Integration with emerging technologies (Web3, IoT)",
        ],
        threats=[
            "Big tech platform dominance (Microsoft, Google)",
            "Local development tool improvements",
            "Security concerns with cloud-based development",
            "Economic downturn affecting developer tool spending",
        ],
        target_segments=[
            "Individual developers and freelancers",
            "Small to medium development teams",
            "Educational institutions",
            "Enterprise development departments",
            "Open source project contributors",
        ],
    ),
)

GENERIC_PANEL = MarketPanel(
    competitors=[
        CompetitorProfile(
            name="Generic Competitor 1",
            domain="competitor1.com",
            market_position=MarketPosition.LEADER,
            strengths=["Market presence", "Feature completeness"],
            weaknesses=["High pricing", "Complex interface"],
            pricing="Various tiers",
            user_base="Large enterprise focus",
            key_features=["Core functionality"],
            technology_stack=["Modern web stack"],
            market_share=30,
            recent_news=["Recent updates"],
        ),
    ],
    market_analysis=MarketAnalysis(
        market_size="Industry-specific market size data",
        growth_rate="Growth rate varies by industry",
        key_trends=["Digital transformation", "Cloud adoption"],
        opportunities=["Market gaps", "Emerging technologies"],
        threats=["Competition", "Economic factors"],
        target_segments=["Target audience segments"],
    ),
)

# (domain keywords, panel); extend to whitelist further domains.
KNOWN_DOMAINS: Tuple[Tuple[Tuple[str, ...], MarketPanel], ...] = ((DEVELOPMENT_KEYWORDS, DEVELOPMENT_PANEL),)


class StaticResearchProvider:
    """In-memory curated panels keyed by domain keywords."""

    name = "static-panel"

    def __init__(
        self,
        domains: Sequence[Tuple[Tuple[str, ...], MarketPanel]] = KNOWN_DOMAINS,
        fallback: MarketPanel = GENERIC_PANEL,
    ) -> None:
        self._domains = tuple(domains)
        self._fallback = fallback

    def match(self, project_type: str, industry: str) -> Optional[MarketPanel]:
        """Return the curated panel for a whitelisted domain, if any."""

        text = normalize_text(project_type, industry)
        for keywords, panel in self._domains:
            if mentions_any(text, keywords):
                return panel
        return None

    def fetch_panel(self, project_type: str, industry: str) -> MarketPanel:
        return self.match(project_type, industry) or self._fallback


# ---------------------------------------------------------------------------
# Derived research
# ---------------------------------------------------------------------------

UNMET_NEEDS: Tuple[str, ...] = (
    "Advanced AI integration across all development phases",
    "True real-time multi-user collaboration with voice/video",
    "Integrated project management and client communication",
    "Advanced security features for enterprise compliance",
    "Seamless mobile development environment",
    "Built-in competitive intelligence tools",
    "Automated code review and optimization suggestions",
    "Custom branding and white-label solutions",
)

SHARED_WEAKNESS_THRESHOLD = 2
MAX_SHARED_WEAKNESSES = 3


def common_weaknesses(competitors: Sequence[CompetitorProfile]) -> List[str]:
    """Weaknesses shared by at least two competitors, most frequent first."""

    counts: Counter[str] = Counter(
        weakness for competitor in competitors for weakness in competitor.weaknesses
    )
    shared = [(weakness, count) for weakness, count in counts.most_common() if count >= SHARED_WEAKNESS_THRESHOLD]
    return [f"Industry-wide issue: {weakness}" for weakness, _ in shared[:MAX_SHARED_WEAKNESSES]]


def identify_competitive_gaps(competitors: Sequence[CompetitorProfile]) -> List[str]:
    return [*UNMET_NEEDS, *common_weaknesses(competitors)]


def _names_by_position(competitors: Sequence[CompetitorProfile], position: MarketPosition) -> List[str]:
    return [competitor.name for competitor in competitors if competitor.market_position is position]


def generate_recommendations(competitors: Sequence[CompetitorProfile]) -> List[str]:
    """Static ranked recommendations, contextualised with the panel's names."""

    ranked = sorted(competitors, key=lambda competitor: competitor.market_share, reverse=True)
    leader = (_names_by_position(competitors, MarketPosition.LEADER) or [ranked[0].name])[0]
    challengers = _names_by_position(competitors, MarketPosition.CHALLENGER)
    runner_up = challengers[0] if challengers else (ranked[1].name if len(ranked) > 1 else "the rest of the market")
    every_name = ", ".join(competitor.name for competitor in ranked)

    return [
        f"Focus on superior AI integration - none of {every_name} covers every development phase with AI",
        f"Develop advanced real-time collaboration that includes voice/video - {leader} stops at shared editing",
        "Create integrated project management dashboard - competitors force users to switch between tools",
        "Build enterprise-grade security from day one - major gap in current market offerings",
        f"Implement competitive pricing strategy - undercut {leader} and {runner_up} while offering more features",
        "Target educational institutions with specialized features - underserved market segment",
        "Develop mobile-first development experience - significant opportunity as remote work increases",
        "Create marketplace for custom environments and templates - monetization opportunity",
        "Build comprehensive analytics and insights dashboard - help developers optimize their workflow",
        "Implement white-label solutions for enterprises - untapped revenue stream",
    ]


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------

CURATED_CONFIDENCE = 0.89
GENERIC_CONFIDENCE = 0.6
DEGRADED_CONFIDENCE = 0.5


class Researcher:
    """Second pipeline stage. Never raises; provider failures degrade to the static panel."""

    def __init__(
        self,
        provider: ResearchProvider | None = None,
        models: Sequence[str] = (),
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._static = StaticResearchProvider()
        self.provider: ResearchProvider = provider or self._static
        self.model_used = models[0] if models else self.provider.name
        self._clock = clock

    def _panel(self, project_type: str, industry: str) -> Tuple[MarketPanel, float, bool]:
        if self.provider is not self._static:
            try:
                return self.provider.fetch_panel(project_type, industry), CURATED_CONFIDENCE, False
            except Exception:
                logger.exception(
                    "research_provider_failed",
                    provider=self.provider.name,
                    fallback=self._static.name,
                )
                return self._static.fetch_panel(project_type, industry), DEGRADED_CONFIDENCE, True

        curated = self._static.match(project_type, industry)
        if curated is None:
            logger.info("research_domain_unrecognized", project_type=project_type, industry=industry)
            return self._static.fetch_panel(project_type, industry), GENERIC_CONFIDENCE, False
        return curated, CURATED_CONFIDENCE, False

    def research(self, project_type: object, industry: object = "") -> ResearchResult:
        project_type = project_type if isinstance(project_type, str) else ""
        industry = industry if isinstance(industry, str) else ""
        panel, confidence, degraded = self._panel(project_type, industry)
        # Panels are shared module data; results get their own copies.
        competitors = [competitor.model_copy(deep=True) for competitor in panel.competitors]
        return ResearchResult(
            top_competitors=competitors,
            market_analysis=panel.market_analysis.model_copy(deep=True),
            competitive_gaps=identify_competitive_gaps(competitors),
            recommendations=generate_recommendations(competitors),
            model_used=self.model_used,
            confidence=confidence,
            last_updated=self._clock(),
            degraded=degraded,
        )
