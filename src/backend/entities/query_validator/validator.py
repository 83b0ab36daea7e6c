"""Pure structured-query validation logic.

Lints a query's text against the schema grammar's whitelist without
parsing it: root operation names, mandatory arguments, scalar fields
selected with a sub-selection, and deprecated filter keys. No I/O, no
framework dependencies, suitable for direct unit testing.
"""

from __future__ import annotations

import logging
import re

from entities.shared.query_text import RootField, find_root_fields, strip_strings
from entities.shared.schema_grammar import SchemaGrammar
from graphql import GraphQLObjectType
from models import StructuredQuery, ValidationResult

logger = logging.getLogger(__name__)

# Types whose scalar fields are most often mistaken for objects
SCALAR_CHECK_TYPES = ("Article", "AuthorStats")

# Deprecated filter key -> replacement key
DEPRECATED_FILTER_KEYS = {"category": "categoryId"}


def _check_operations(fields: list[RootField], grammar: SchemaGrammar) -> list[str]:
    """Check that at least one whitelisted root operation is selected.

    Args:
        fields: Root-level fields found in the query text.
        grammar: Loaded schema grammar.

    Returns:
        List of errors (empty when valid).
    """
    allowed = grammar.operation_names()
    if any(field.name in allowed for field in fields):
        return []
    return [f"No valid operation found. Expected one of: {', '.join(allowed)}"]


def _check_required_arguments(fields: list[RootField], grammar: SchemaGrammar) -> list[str]:
    """Check that each selected operation carries its mandatory arguments.

    Args:
        fields: Root-level fields found in the query text.
        grammar: Loaded schema grammar.

    Returns:
        One error per missing argument.
    """
    errors: list[str] = []
    for field in fields:
        for argument in grammar.required_arguments(field.name):
            if not re.search(rf"\b{re.escape(argument)}\s*:", field.arguments or ""):
                errors.append(f"{field.name} requires a '{argument}' parameter")
    return errors


def _check_scalar_selections(query: str, grammar: SchemaGrammar) -> list[str]:
    """Flag scalar fields followed by an opening brace.

    Args:
        query: Query text.
        grammar: Loaded schema grammar.

    Returns:
        One error per offending field name.
    """
    errors: list[str] = []
    seen: set[str] = set()
    for type_name in SCALAR_CHECK_TYPES:
        gql_type = grammar.schema.type_map.get(type_name)
        if not isinstance(gql_type, GraphQLObjectType):
            continue
        for field_name in grammar.scalar_fields(type_name):
            if field_name in seen:
                continue
            if re.search(rf"\b{re.escape(field_name)}\s*\{{", query):
                seen.add(field_name)
                field_type = gql_type.fields[field_name].type
                errors.append(
                    f"Field '{field_name}' is a scalar ({field_type}) and cannot have subfields"
                )
    return errors


def _check_deprecated_filter_keys(fields: list[RootField]) -> list[str]:
    """Flag deprecated filter keys used in operation arguments.

    Args:
        fields: Root-level fields found in the query text.

    Returns:
        One error per deprecated key found.
    """
    errors: list[str] = []
    arguments = " ".join(strip_strings(field.arguments or "") for field in fields)
    for deprecated, replacement in DEPRECATED_FILTER_KEYS.items():
        if re.search(rf"\b{re.escape(deprecated)}\s*:", arguments):
            errors.append(f"Use '{replacement}' instead of deprecated filter key '{deprecated}'")
    return errors


def validate_query(structured: StructuredQuery, grammar: SchemaGrammar) -> ValidationResult:
    """Validate a structured query against the schema grammar.

    Every check runs; errors accumulate in check order.

    Args:
        structured: Candidate query.
        grammar: Loaded schema grammar.

    Returns:
        A ``ValidationResult``; it is valid when no check reported an error.
    """
    query = structured.query
    logger.info("Validating query: %s", " ".join(query.split())[:200] or "(empty)")

    fields = find_root_fields(query)

    errors: list[str] = []
    errors.extend(_check_operations(fields, grammar))
    errors.extend(_check_required_arguments(fields, grammar))
    errors.extend(_check_scalar_selections(query, grammar))
    errors.extend(_check_deprecated_filter_keys(fields))

    logger.info("Validation complete: valid=%s, violations=%d", not errors, len(errors))
    return ValidationResult(errors=errors)
