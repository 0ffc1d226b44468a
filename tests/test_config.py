import pytest

from strategy_pipeline.config import DEFAULT_ALLOWED_ORIGINS, PipelineSettings, get_settings, settings_from_env


def test_defaults_keep_live_research_off(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("STRATEGY_PIPELINE_LIVE_RESEARCH", raising=False)

    settings = get_settings()

    assert settings.live_research is False
    assert settings.live_research_enabled is False
    assert settings.research_model == "gpt-4o-mini"


def test_live_research_needs_flag_and_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRATEGY_PIPELINE_LIVE_RESEARCH", "true")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert get_settings().live_research_enabled is False

    get_settings.cache_clear()
    monkeypatch.setenv("OPENAI_API_KEY", "test-openai")
    settings = get_settings()

    assert settings.live_research_enabled is True
    assert settings.openai_api_key == "test-openai"


def test_settings_from_env_parses_overrides() -> None:
    settings = settings_from_env(
        {
            "STRATEGY_PIPELINE_RESEARCH_TIMEOUT": "7.5",
            "STRATEGY_PIPELINE_RESEARCH_MODEL": "gpt-4o",
            "STRATEGY_PIPELINE_ENVIRONMENT": "production",
            "STRATEGY_PIPELINE_ALLOWED_ORIGINS": "https://a.example, https://b.example,",
        }
    )

    assert settings.research_timeout_seconds == 7.5
    assert settings.research_model == "gpt-4o"
    assert settings.environment == "production"
    assert settings.allowed_origins == ("https://a.example", "https://b.example")


def test_empty_origins_fall_back_to_defaults() -> None:
    assert settings_from_env({}).allowed_origins == DEFAULT_ALLOWED_ORIGINS


def test_models_for_returns_routing_order() -> None:
    settings = PipelineSettings()

    assert settings.models_for("execution")[0] == "Grok-2"
    assert settings.models_for("unknown-task") == ()
