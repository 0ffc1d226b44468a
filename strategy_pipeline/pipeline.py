"""Orchestration of the five analysis stages.

Planning and research have no data dependency on each other, so they run
concurrently; recommendation, judgment and execution follow in order. Every
stage is built once, at pipeline construction, which is also where rubric and
catalogue configuration errors surface.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple, TypeVar

from .config import DEFAULT_MODEL_ROUTING, PipelineSettings, get_settings
from .executioner import Executioner
from .judge import Judge
from .llm import OpenAIResearchProvider
from .logging import get_logger
from .planner import Planner, classify_project_type
from .recommender import Recommender
from .report import final_summary
from .researcher import Researcher, ResearchSource
from .schemas import PipelineResult, PipelineStage, StageDefinition

logger = get_logger(__name__)

T = TypeVar("T")

STARTED = "started"
COMPLETED = "completed"


@dataclass(frozen=True)
class StageEvent:
    """Progress notification sent to listeners as each stage starts and finishes."""

    stage: PipelineStage
    status: str
    duration_ms: float | None = None


StageListener = Callable[[StageEvent], None]


STAGE_DEFINITIONS: Tuple[StageDefinition, ...] = (
    StageDefinition(
        id=PipelineStage.PLANNING,
        label="Planning",
        description="Classify the project, estimate complexity and draft a roadmap.",
        depends_on=[],
    ),
    StageDefinition(
        id=PipelineStage.RESEARCH,
        label="Research",
        description="Profile competitors and the market for the project domain.",
        depends_on=[],
    ),
    StageDefinition(
        id=PipelineStage.RECOMMENDATION,
        label="Recommendation",
        description="Synthesize strategic moves, innovation ideas and positioning.",
        depends_on=[PipelineStage.PLANNING, PipelineStage.RESEARCH],
    ),
    StageDefinition(
        id=PipelineStage.JUDGMENT,
        label="Judgment",
        description="Score plan variants on the weighted rubric and rank them.",
        depends_on=[PipelineStage.RECOMMENDATION],
    ),
    StageDefinition(
        id=PipelineStage.EXECUTION,
        label="Execution",
        description="Schedule, staff and budget the winning plan and two runners-up.",
        depends_on=[PipelineStage.JUDGMENT],
    ),
)


def list_stage_definitions() -> List[StageDefinition]:
    """Return UI-friendly descriptors for all stages."""

    return sorted(STAGE_DEFINITIONS, key=lambda definition: definition.id.order)


class StrategyPipeline:
    """Planner ∥ Researcher → Recommender → Judge → Executioner.

    Any stage may be injected; the rest are built from ``model_routing`` and
    ``clock``. The clock feeds research ``last_updated`` and the default
    execution start date, so a fixed clock makes runs reproducible.
    """

    def __init__(
        self,
        planner: Planner | None = None,
        researcher: ResearchSource | None = None,
        recommender: Recommender | None = None,
        judge: Judge | None = None,
        executioner: Executioner | None = None,
        model_routing: Mapping[str, Sequence[str]] = DEFAULT_MODEL_ROUTING,
        clock: Callable[[], date] = date.today,
        listeners: Sequence[StageListener] = (),
    ) -> None:
        def models(task: str) -> Sequence[str]:
            return tuple(model_routing.get(task, ()))

        self.planner = planner or Planner(models=models("planning"))
        self.researcher = researcher or Researcher(models=models("research"), clock=clock)
        self.recommender = recommender or Recommender(models=models("recommendation"))
        self.judge = judge or Judge(models=models("judgment"))
        self.executioner = executioner or Executioner(models=models("execution"), clock=clock)
        self.listeners: Tuple[StageListener, ...] = tuple(listeners)

    def _emit(self, event: StageEvent) -> None:
        for listener in self.listeners:
            listener(event)

    def _started(self, stage: PipelineStage) -> float:
        logger.info("stage_started", stage=stage.value)
        self._emit(StageEvent(stage, STARTED))
        return time.perf_counter()

    def _completed(self, stage: PipelineStage, started_at: float, result: Any) -> None:
        duration_ms = round((time.perf_counter() - started_at) * 1000, 2)
        logger.info(
            "stage_completed",
            stage=stage.value,
            duration_ms=duration_ms,
            confidence=getattr(result, "confidence", None),
        )
        self._emit(StageEvent(stage, COMPLETED, duration_ms))

    def _run_stage(self, stage: PipelineStage, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        started_at = self._started(stage)
        result = func(*args, **kwargs)
        self._completed(stage, started_at, result)
        return result

    async def _run_stage_in_thread(self, stage: PipelineStage, func: Callable[..., T], *args: Any) -> T:
        started_at = self._started(stage)
        result = await asyncio.to_thread(func, *args)
        self._completed(stage, started_at, result)
        return result

    async def arun(
        self,
        description: object,
        requirements: object = "",
        industry: object = "",
        start_date: date | None = None,
    ) -> PipelineResult:
        """Run every stage and return all five outputs plus the summary."""

        # Research only needs the project type, which is a pure function of the description.
        project_type = classify_project_type(description)
        planning, research = await asyncio.gather(
            self._run_stage_in_thread(PipelineStage.PLANNING, self.planner.analyze, description, requirements),
            self._run_stage_in_thread(PipelineStage.RESEARCH, self.researcher.research, project_type, industry),
        )
        recommendation = self._run_stage(PipelineStage.RECOMMENDATION, self.recommender.recommend, planning, research)
        judgment = self._run_stage(PipelineStage.JUDGMENT, self.judge.evaluate, planning, research, recommendation)
        execution = self._run_stage(
            PipelineStage.EXECUTION,
            self.executioner.plan,
            judgment.best_plan,
            judgment.ranked_recommendations[1:],
            planning,
            research,
            judgment,
            start_date=start_date,
        )
        return PipelineResult(
            planning=planning,
            research=research,
            recommendation=recommendation,
            judgment=judgment,
            execution=execution,
            summary=final_summary(planning, research, recommendation, judgment, execution),
        )

    def run(
        self,
        description: object,
        requirements: object = "",
        industry: object = "",
        start_date: date | None = None,
    ) -> PipelineResult:
        """Blocking wrapper around :meth:`arun` for callers without an event loop."""

        return asyncio.run(self.arun(description, requirements, industry, start_date))


def build_pipeline(settings: PipelineSettings | None = None, **overrides: Any) -> StrategyPipeline:
    """Assemble a pipeline from settings, using live research when it is enabled."""

    settings = settings or get_settings()
    options: Dict[str, Any] = {"model_routing": settings.model_routing}
    if settings.live_research_enabled and "researcher" not in overrides:
        provider = OpenAIResearchProvider.from_settings(settings)
        options["researcher"] = Researcher(
            provider=provider,
            models=settings.models_for("research"),
            clock=overrides.get("clock", date.today),
        )
        logger.info("live_research_enabled", provider=provider.name, model=provider.model)
    options.update(overrides)
    return StrategyPipeline(**options)


def run_pipeline(description: object, requirements: object = "", industry: object = "") -> PipelineResult:
    """Run the full pipeline once with the default static stages."""

    return StrategyPipeline().run(description, requirements, industry)
