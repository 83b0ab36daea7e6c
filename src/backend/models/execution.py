"""
Execution and response models.

``QueryRequest`` and ``ResultEnvelope`` are the caller-facing shapes of
the translate-and-run entry point; ``ExecutionResult`` is what the
executor hands back to the orchestrator.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryRequest(BaseModel):
    """Input of the translate-and-run entry point."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    natural_language_query: str = Field(
        alias="naturalLanguageQuery", min_length=1, description="Free-text request"
    )


class ExecutionResult(BaseModel):
    """Engine output for one query: data on success, error messages otherwise."""

    data: dict[str, Any] | None = None
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the engine reported no errors."""
        return not self.errors


class ResultEnvelope(BaseModel):
    """The caller-visible answer for one natural-language request."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    query: str = Field(description="The original request text")
    interpretation: str = Field(description="Explanation of how the request was read")
    structured_query: str = Field(alias="structuredQuery", description="Final query text")
    results: dict[str, Any] | None = Field(default=None, description="Schema-shaped data")
    execution_time_ms: float = Field(
        alias="executionTimeMs", description="Wall-clock time of the whole pipeline"
    )
