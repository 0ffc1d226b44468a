"""OpenAI-backed live research provider.

Produces the same ``MarketPanel`` the static provider returns, so the research
stage can switch between them without downstream changes. Every failure mode
(API error, timeout, empty or malformed output) surfaces as
``ResearchProviderError`` for the researcher to absorb.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from textwrap import dedent
from typing import Any, Dict

from openai import APIError, OpenAI
from pydantic import ValidationError

from .config import PipelineSettings
from .exceptions import ResearchProviderError
from .logging import get_logger
from .schemas import MarketPanel, MarketPosition

logger = get_logger(__name__)


@dataclass(frozen=True)
class PromptSpec:
    """Container describing how to call the LLM."""

    system_prompt: str
    user_prompt: str
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 1800


def _parse_structured_response(raw_text: str) -> Dict[str, Any] | None:
    """Attempt to coerce the model output into JSON."""

    text = raw_text.strip()
    if text.startswith("```"):
        lines = [line.rstrip() for line in text.splitlines()]
        if len(lines) >= 2:
            lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines).strip()
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _research_prompt(project_type: str, industry: str, model: str) -> PromptSpec:
    positions = " | ".join(f'"{position.value}"' for position in MarketPosition)
    user_prompt = dedent(
        f"""
        Research the competitive landscape for a "{project_type}" product in the
        "{industry or 'general software'}" industry.

        Return JSON only, with this structure:
        {{
          "competitors": [
            {{
              "name": string,
              "domain": string,
              "market_position": {positions},
              "strengths": [string],
              "weaknesses": [string],
              "pricing": string,
              "user_base": string,
              "key_features": [string],
              "technology_stack": [string],
              "market_share": number between 0 and 100,
              "recent_news": [string]
            }}
          ],
          "market_analysis": {{
            "market_size": string,
            "growth_rate": string,
            "key_trends": [string],
            "opportunities": [string],
            "threats": [string],
            "target_segments": [string]
          }}
        }}

        List the five most relevant competitors, largest first. Use short, factual phrases.
        """
    )
    return PromptSpec(
        system_prompt="You are a market research analyst who reports competitor intelligence as strict JSON.",
        user_prompt=user_prompt,
        model=model,
    )


class OpenAIResearchProvider:
    """Live competitor research through the OpenAI chat completions API."""

    name = "openai-research"

    def __init__(self, client: OpenAI, model: str = "gpt-4o-mini") -> None:
        self._client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: PipelineSettings) -> "OpenAIResearchProvider":
        """Build a provider whose client carries the configured timeout and no retries."""

        client = OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.research_timeout_seconds,
            max_retries=0,
        )
        return cls(client, model=settings.research_model)

    def _invoke(self, spec: PromptSpec) -> str:
        try:
            response = self._client.chat.completions.create(
                model=spec.model,
                messages=[
                    {"role": "system", "content": spec.system_prompt.strip()},
                    {"role": "user", "content": spec.user_prompt.strip()},
                ],
                temperature=spec.temperature,
                max_tokens=spec.max_tokens,
            )
        except APIError as exc:
            raise ResearchProviderError(f"OpenAI request failed: {exc}", provider=self.name, cause=exc) from exc

        message = response.choices[0].message.content if response.choices else None
        if not message:
            raise ResearchProviderError("OpenAI returned an empty response", provider=self.name)
        return message

    def fetch_panel(self, project_type: str, industry: str) -> MarketPanel:
        spec = _research_prompt(project_type, industry, self.model)
        logger.info("live_research_requested", provider=self.name, model=self.model, project_type=project_type)
        payload = _parse_structured_response(self._invoke(spec))
        if payload is None:
            raise ResearchProviderError("OpenAI response was not a JSON object", provider=self.name)
        try:
            return MarketPanel.model_validate(payload)
        except ValidationError as exc:
            raise ResearchProviderError("OpenAI response did not match the panel schema", provider=self.name, cause=exc) from exc
