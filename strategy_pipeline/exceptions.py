"""Exception hierarchy for the strategy pipeline.

Only configuration problems are allowed to halt the pipeline, and they are
raised while the stages are being constructed, never mid-request. Everything
else (ambiguous input, thin upstream data, a failing live research backend) is
absorbed by the stages and reported through their ``confidence`` fields.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description.
        stage: Name of the stage that raised the error, when known.
    """

    def __init__(self, message: str, stage: str | None = None, cause: Exception | None = None) -> None:
        self.message = message
        self.stage = stage
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class RubricConfigurationError(PipelineError):
    """Raised when a weighted rubric is malformed.

    A rubric whose weights do not sum to 1.0 silently skews every score, so it
    is rejected when the owning stage is built.
    """

    def __init__(self, message: str, total_weight: float | None = None, stage: str | None = "judgment") -> None:
        self.total_weight = total_weight
        super().__init__(message, stage=stage)


class CatalogueConfigurationError(PipelineError):
    """Raised when the execution phase catalogue has invalid dependencies."""

    def __init__(self, message: str, phase_id: str | None = None) -> None:
        self.phase_id = phase_id
        super().__init__(message, stage="execution")


class ResearchProviderError(PipelineError):
    """Raised by a live research provider that could not produce a panel.

    The researcher catches this and falls back to the static panel.
    """

    def __init__(self, message: str, provider: str | None = None, cause: Exception | None = None) -> None:
        self.provider = provider
        super().__init__(message, stage="research", cause=cause)
