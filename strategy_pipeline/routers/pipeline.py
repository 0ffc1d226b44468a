"""Pipeline endpoints for the strategy pipeline FastAPI service."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Request

from ..memory import session_memory
from ..pipeline import StrategyPipeline, list_stage_definitions
from ..report import render_markdown
from ..schemas import (
    JudgmentCriterion,
    PipelineRequest,
    PipelineRunResponse,
    PlanningRequest,
    PlanningResult,
    ResearchRequest,
    ResearchResult,
    SessionResponse,
    StageDefinition,
)


router = APIRouter(prefix="/pipeline", tags=["pipeline"])


def _pipeline(request: Request) -> StrategyPipeline:
    return request.app.state.pipeline


@router.get("/health")
async def healthcheck() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}


@router.get("/stages", response_model=list[StageDefinition])
async def list_stages() -> list[StageDefinition]:
    """Expose stage metadata and dependencies."""

    return list_stage_definitions()


@router.get("/rubric", response_model=list[JudgmentCriterion])
async def list_rubric(request: Request) -> list[JudgmentCriterion]:
    """Expose the weighted rubric the judge scores with."""

    return list(_pipeline(request).judge.rubric)


@router.post("/run", response_model=PipelineRunResponse)
async def run_pipeline_endpoint(payload: PipelineRequest, request: Request) -> PipelineRunResponse:
    """Run all five stages and return the results with a markdown report."""

    result = await _pipeline(request).arun(
        payload.description,
        payload.requirements,
        payload.industry,
        start_date=payload.start_date,
    )
    markdown = render_markdown(
        result.planning, result.research, result.recommendation, result.judgment, result.execution
    )
    session_id = payload.session_id
    if session_id:
        session_memory.append_run(session_id, result, markdown)
    return PipelineRunResponse(session_id=session_id, result=result, markdown=markdown)


@router.post("/planning", response_model=PlanningResult)
async def run_planning(payload: PlanningRequest, request: Request) -> PlanningResult:
    """Run the planning stage on its own."""

    return await asyncio.to_thread(_pipeline(request).planner.analyze, payload.description, payload.requirements)


@router.post("/research", response_model=ResearchResult)
async def run_research(payload: ResearchRequest, request: Request) -> ResearchResult:
    """Run the research stage on its own; a live provider call runs off the event loop."""

    return await asyncio.to_thread(_pipeline(request).researcher.research, payload.project_type, payload.industry)


@router.get("/session/{session_id}", response_model=SessionResponse)
async def fetch_session(session_id: str) -> SessionResponse:
    """Return all stored pipeline runs for the given session."""

    runs = session_memory.get_runs(session_id)
    if not runs:
        raise HTTPException(status_code=404, detail=f"No pipeline runs found for session '{session_id}'.")

    combined = session_memory.combined_markdown(session_id) or ""
    return SessionResponse(session_id=session_id, runs=runs, combined_markdown=combined)
