"""Deterministic text-level repairs for model-generated queries.

Two patches, each idempotent:

* a root operation that declares a defaulted ``limit`` but is selected
  without any argument list gets ``(limit: <default>)`` inserted;
* ``searchArticles`` and ``articleStats`` selections missing
  ``totalCount`` get it inserted at the top of their selection set.

Only root-level fields are patched. Fields nested deeper are left as-is.
"""

from __future__ import annotations

import logging
import re

from entities.shared.query_text import find_root_fields
from entities.shared.schema_grammar import SchemaGrammar
from models import StructuredQuery

logger = logging.getLogger(__name__)

DEFAULTED_ARGUMENT = "limit"

# Operations whose result shape carries a computed total
TOTAL_COUNT_OPERATIONS = ("searchArticles", "articleStats")
TOTAL_COUNT_FIELD = "totalCount"


def _default_argument_text(operation_name: str, grammar: SchemaGrammar) -> str | None:
    op = grammar.operation(operation_name)
    if op is None:
        return None
    argument = op.argument(DEFAULTED_ARGUMENT)
    if argument is None or argument.default_value is None:
        return None
    return f"({DEFAULTED_ARGUMENT}: {argument.default_value})"


def correct_query(structured: StructuredQuery, grammar: SchemaGrammar) -> StructuredQuery:
    """Apply the known textual repairs to a structured query.

    Args:
        structured: Query produced by the model-backed translator.
        grammar: Loaded schema grammar (source of default values).

    Returns:
        The same query when nothing needed fixing, else a patched copy.
    """
    query = structured.query
    insertions: list[tuple[int, str]] = []

    for field in find_root_fields(query):
        if field.arguments is None:
            default_text = _default_argument_text(field.name, grammar)
            if default_text:
                insertions.append((field.name_end, default_text))
                logger.info("Corrector: adding default %s to %s", default_text, field.name)

        if (
            field.name in TOTAL_COUNT_OPERATIONS
            and field.selection_start is not None
            and not re.search(rf"\b{TOTAL_COUNT_FIELD}\b", field.selection or "")
        ):
            insertions.append((field.selection_start + 1, f"\n    {TOTAL_COUNT_FIELD}"))
            logger.info("Corrector: adding %s to %s selection", TOTAL_COUNT_FIELD, field.name)

    if not insertions:
        return structured

    for position, text in sorted(insertions, reverse=True):
        query = query[:position] + text + query[position:]
    return structured.model_copy(update={"query": query})
