"""
Structured query models.

A ``StructuredQuery`` is what a translator produces and what the
corrector, validator and executor consume.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TranslationSource = Literal["model", "fallback"]


def _drop_null_variables(value: dict[str, Any] | None) -> dict[str, Any] | None:
    """Remove null-valued variables; an empty mapping becomes ``None``."""
    if value is None:
        return None
    cleaned = {key: val for key, val in value.items() if key is not None and val is not None}
    return cleaned or None


class ModelTranslation(BaseModel):
    """The exact JSON object the language model must answer with.

    Any other key, or a missing ``query`` / ``explanation``, is a parse error.
    """

    model_config = ConfigDict(extra="forbid")

    query: str = Field(min_length=1, description="GraphQL query text")
    variables: dict[str, Any] | None = Field(default=None, description="Variable values")
    explanation: str = Field(description="What the query does, for the end user")

    @field_validator("variables")
    @classmethod
    def drop_null_variables(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        return _drop_null_variables(value)


class StructuredQuery(BaseModel):
    """A candidate machine query plus its human explanation."""

    model_config = ConfigDict(extra="forbid")

    query: str = Field(description="GraphQL query text")
    variables: dict[str, Any] | None = Field(
        default=None, description="Flat variable mapping; absent variables are omitted"
    )
    explanation: str = Field(description="Human-readable interpretation of the request")
    source: TranslationSource = Field(
        default="fallback", description="Which translator produced the query"
    )

    @field_validator("variables")
    @classmethod
    def drop_null_variables(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        return _drop_null_variables(value)


class ValidationResult(BaseModel):
    """Outcome of linting a structured query against the schema grammar."""

    model_config = ConfigDict(extra="forbid")

    errors: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True when no check reported a violation."""
        return not self.errors
