"""Strategic decision pipeline package."""

from .app import create_app
from .config import get_settings
from .pipeline import StrategyPipeline, build_pipeline, run_pipeline

__all__ = ["StrategyPipeline", "build_pipeline", "create_app", "get_settings", "run_pipeline"]
