"""Configuration helpers for the strategy pipeline service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Mapping, Tuple

from dotenv import load_dotenv

ENV_PREFIX = "STRATEGY_PIPELINE_"

DEFAULT_ALLOWED_ORIGINS: Tuple[str, ...] = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)

# Ordered model preference per stage; the first entry is reported as ``model_used``.
DEFAULT_MODEL_ROUTING: Mapping[str, Tuple[str, ...]] = {
    "planning": ("GPT-5", "Claude Sonnet 4"),
    "research": ("Perplexity Pro", "GPT-5"),
    "recommendation": ("Gemini 2.5 Pro", "GPT-5"),
    "judgment": ("Claude Sonnet 4", "GPT-5"),
    "execution": ("Grok-2", "GPT-5"),
}

load_dotenv(override=False)


@dataclass(frozen=True)
class PipelineSettings:
    """Settings container for the pipeline service.

    Live research is opt-in: it needs both the feature flag and an OpenAI key,
    otherwise the static competitor panel is used.
    """

    openai_api_key: str | None = None
    live_research: bool = False
    research_model: str = "gpt-4o-mini"
    research_timeout_seconds: float = 20.0
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    model_routing: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_MODEL_ROUTING))

    @property
    def live_research_enabled(self) -> bool:
        """True when the live research provider can actually be used."""

        return self.live_research and bool(self.openai_api_key)

    def models_for(self, task: str) -> Tuple[str, ...]:
        """Return the ordered model preference for a stage task."""

        return tuple(self.model_routing.get(task, ()))


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def _parse_origins(raw: str | None) -> Tuple[str, ...]:
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _read(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(f"{ENV_PREFIX}{name}")
    return value if value else None


def settings_from_env(environ: Mapping[str, str]) -> PipelineSettings:
    """Build settings from an environment mapping, falling back to defaults."""

    live = _read(environ, "LIVE_RESEARCH")
    timeout = _read(environ, "RESEARCH_TIMEOUT")
    overrides: Dict[str, object] = {}
    if live is not None:
        overrides["live_research"] = _parse_bool(live)
    if timeout is not None:
        overrides["research_timeout_seconds"] = float(timeout)
    for attr, name in (
        ("research_model", "RESEARCH_MODEL"),
        ("environment", "ENVIRONMENT"),
        ("log_level", "LOG_LEVEL"),
    ):
        value = _read(environ, name)
        if value is not None:
            overrides[attr] = value

    return PipelineSettings(
        openai_api_key=environ.get("OPENAI_API_KEY") or None,
        allowed_origins=_parse_origins(_read(environ, "ALLOWED_ORIGINS")),
        **overrides,
    )


@lru_cache(maxsize=1)
def get_settings() -> PipelineSettings:
    """Read environment variables and return cached pipeline settings."""

    return settings_from_env(os.environ)
