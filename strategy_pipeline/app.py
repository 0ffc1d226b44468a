"""Application factory for the strategy pipeline FastAPI service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import PipelineSettings, get_settings
from .logging import configure_logging, get_logger
from .pipeline import StrategyPipeline, build_pipeline
from .routers import pipeline

logger = get_logger(__name__)


def create_app(settings: PipelineSettings | None = None, strategy_pipeline: StrategyPipeline | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = settings or get_settings()
    configure_logging()

    app = FastAPI(
        title="Strategy Pipeline",
        version="0.1.0",
        description="Planning, research, recommendation, judgment and execution planning for new products.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_origin_regex=r"http://localhost:\d+$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.pipeline = strategy_pipeline or build_pipeline(settings)
    app.include_router(pipeline.router)
    logger.info(
        "app_created",
        live_research=settings.live_research_enabled,
        allowed_origins=len(settings.allowed_origins),
    )
    return app
