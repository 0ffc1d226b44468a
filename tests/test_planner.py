import pytest

from strategy_pipeline.planner import (
    DEFAULT_FEATURES,
    Planner,
    assess_complexity,
    classify_project_type,
    extract_features,
)
from strategy_pipeline.schemas import Complexity, ResourceType


def test_collaborative_ide_is_high_complexity_with_core_features() -> None:
    result = Planner().analyze("Build a real-time collaborative IDE", "needs auth, database, AI features")

    analysis = result.analysis
    assert analysis.project_type == "Development Environment"
    assert analysis.complexity is Complexity.HIGH
    assert {"User Authentication", "Real-time Updates", "Database Integration"} <= set(analysis.required_features)
    assert analysis.estimated_timeline == "3-6 months"
    assert "OpenAI API" in analysis.technical_stack
    assert "AI model accuracy and reliability" in analysis.risk_factors


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("An online shop for handmade goods", "E-commerce Platform"),
        ("A social app for climbers", "Social Network"),
        ("Sales analytics for small teams", "Analytics Dashboard"),
        ("A code editor in the browser", "Development Environment"),
        ("Something entirely different", "Web Application"),
    ],
)
def test_classify_project_type(description: str, expected: str) -> None:
    assert classify_project_type(description) == expected


def test_short_keywords_must_stand_alone() -> None:
    # "email" must not read as "ai", "provide" must not read as "ide".
    assert classify_project_type("We provide email reminders") == "Web Application"
    assert assess_complexity("We provide email reminders", "") is Complexity.MEDIUM


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("An online shopping platform", "E-commerce Platform"),
        ("A professional networking site", "Social Network"),
        ("Editors for technical writers", "Development Environment"),
    ],
)
def test_project_type_matches_inflected_keywords(description: str, expected: str) -> None:
    assert classify_project_type(description) == expected


def test_features_match_inflected_keywords() -> None:
    features = extract_features("A catalogue app", "authenticated users, searchable catalogue, uploading files")

    assert features == ["User Authentication", "File Management", "Search Functionality"]


def test_complexity_tiers_scan_high_before_low() -> None:
    assert assess_complexity("a simple landing page", "") is Complexity.LOW
    assert assess_complexity("a simple landing page", "enterprise rollout") is Complexity.HIGH
    assert assess_complexity("a portal", "with a database") is Complexity.MEDIUM


def test_features_never_empty() -> None:
    assert extract_features("a thing", "") == list(DEFAULT_FEATURES)


@pytest.mark.parametrize("bad_input", [None, 42, {"description": "ide"}])
def test_malformed_input_degrades_to_defaults(bad_input: object) -> None:
    result = Planner().analyze(bad_input, None)

    assert result.analysis.project_type == "Web Application"
    assert result.analysis.complexity is Complexity.MEDIUM
    assert result.analysis.required_features == list(DEFAULT_FEATURES)
    assert result.confidence < 0.92


def test_resource_requirements_scale_with_complexity() -> None:
    heavy = Planner().analyze("an enterprise dashboard").resource_requirements
    light = Planner().analyze("a simple portfolio").resource_requirements

    assert {item.type for item in heavy} == set(ResourceType)
    assert heavy[0].quantity == "2-3"
    assert light[0].quantity == "1-2"


def test_model_used_comes_from_routing() -> None:
    assert Planner(models=("GPT-5", "Claude Sonnet 4")).analyze("an ide").model_used == "GPT-5"
    assert Planner().analyze("an ide").model_used == "keyword-heuristics"
