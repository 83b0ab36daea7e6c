"""Schema grammar loaded from the bundled GraphQL SDL document.

The grammar is read once at process start and passed by reference to
the translator prompt, the validator, the corrector and the executor.
It never changes after loading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from graphql import (
    GraphQLError,
    GraphQLObjectType,
    GraphQLSchema,
    build_schema,
    get_named_type,
    is_leaf_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
)
from graphql.pyutils import Undefined
from models import ArgumentSpec, FieldShape, OperationSpec, SchemaGrammarError

logger = logging.getLogger(__name__)

_DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "config" / "schema.graphql"


def _unwrap_non_null(type_):
    """Strip a single non-null wrapper, if any."""
    return type_.of_type if is_non_null_type(type_) else type_


def _field_shape(type_) -> FieldShape:
    """Classify a field type as scalar, object or list.

    Lists of scalars count as scalars: they are selected without a
    sub-selection just like plain scalar fields.
    """
    inner = _unwrap_non_null(type_)
    if is_leaf_type(get_named_type(inner)):
        return "scalar"
    if is_list_type(inner):
        return "list"
    return "object"


@dataclass(frozen=True)
class SchemaGrammar:
    """The GraphQL SDL document plus the executable schema built from it.

    Attributes:
        sdl: The document text, verbatim.
        schema: The graphql-core schema (resolvers are bound by the executor).
    """

    sdl: str
    schema: GraphQLSchema
    _operations: tuple[OperationSpec, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        query_type = self.schema.query_type
        if query_type is None:
            raise SchemaGrammarError("Schema grammar defines no Query type")

        operations: list[OperationSpec] = []
        for name, gql_field in query_type.fields.items():
            arguments = [
                ArgumentSpec(
                    name=arg_name,
                    type=str(arg.type),
                    required=is_non_null_type(arg.type) and arg.default_value is Undefined,
                    default_value=None if arg.default_value is Undefined else arg.default_value,
                )
                for arg_name, arg in gql_field.args.items()
            ]
            operations.append(
                OperationSpec(name=name, arguments=arguments, return_type=str(gql_field.type))
            )
        object.__setattr__(self, "_operations", tuple(operations))

    def operations(self) -> list[OperationSpec]:
        """Return every root operation in document order."""
        return list(self._operations)

    def operation_names(self) -> list[str]:
        """Return the names of every root operation."""
        return [op.name for op in self._operations]

    def operation(self, name: str) -> OperationSpec | None:
        """Return the named root operation, or ``None`` if it is not allowed."""
        for op in self._operations:
            if op.name == name:
                return op
        return None

    def required_arguments(self, name: str) -> list[str]:
        """Return the mandatory argument names of a root operation."""
        op = self.operation(name)
        return op.required_arguments if op else []

    def object_type_names(self) -> list[str]:
        """Return the user-defined object type names."""
        return [
            type_name
            for type_name, gql_type in self.schema.type_map.items()
            if is_object_type(gql_type) and not type_name.startswith("__")
        ]

    def field_shapes(self, type_name: str) -> dict[str, FieldShape]:
        """Map each field of an object type to its selection shape.

        Args:
            type_name: Name of an object type, e.g. ``"Article"``.

        Returns:
            Field name → ``"scalar"``, ``"object"`` or ``"list"``.

        Raises:
            KeyError: If the grammar has no object type with that name.
        """
        gql_type = self.schema.type_map.get(type_name)
        if not isinstance(gql_type, GraphQLObjectType):
            raise KeyError(f"Unknown object type: {type_name}")
        return {name: _field_shape(f.type) for name, f in gql_type.fields.items()}

    def scalar_fields(self, type_name: str) -> list[str]:
        """Return the fields of a type that must be selected without braces."""
        return [name for name, shape in self.field_shapes(type_name).items() if shape == "scalar"]


def load_schema_grammar(path: str | Path | None = None) -> SchemaGrammar:
    """Load and build the schema grammar from an SDL file.

    Args:
        path: SDL file to read. Defaults to the bundled ``config/schema.graphql``.

    Returns:
        The immutable ``SchemaGrammar``.

    Raises:
        SchemaGrammarError: If the file is missing or the SDL is invalid.
    """
    schema_path = Path(path) if path else _DEFAULT_SCHEMA_PATH
    if not schema_path.exists():
        raise SchemaGrammarError(f"Schema grammar not found: {schema_path}")

    sdl = schema_path.read_text(encoding="utf-8")
    try:
        schema = build_schema(sdl)
    except (GraphQLError, TypeError) as exc:
        raise SchemaGrammarError(f"Invalid schema grammar {schema_path}: {exc}") from exc

    grammar = SchemaGrammar(sdl=sdl, schema=schema)
    logger.info(
        "Loaded schema grammar from %s (%d root operations)",
        schema_path,
        len(grammar.operation_names()),
    )
    return grammar
