"""
Schema grammar models.

These models describe the root operations and field shapes of the
GraphQL schema the pipeline translates into.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

FieldShape = Literal["scalar", "object", "list"]


class ArgumentSpec(BaseModel):
    """An argument accepted by a root operation."""

    name: str = Field(description="Argument name as written in the query")
    type: str = Field(description="GraphQL type expression, e.g. 'String!'")
    required: bool = Field(
        default=False, description="Non-null argument without a default value"
    )
    default_value: Any = Field(default=None, description="Default applied by the engine")


class OperationSpec(BaseModel):
    """A root operation of the schema grammar."""

    name: str = Field(description="Root field name, e.g. 'searchArticles'")
    arguments: list[ArgumentSpec] = Field(default_factory=list)
    return_type: str = Field(description="GraphQL return type expression")

    def argument(self, name: str) -> ArgumentSpec | None:
        """Return the named argument, or ``None`` if the operation has none."""
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None

    @property
    def required_arguments(self) -> list[str]:
        """Names of the arguments that must always be supplied."""
        return [arg.name for arg in self.arguments if arg.required]
