"""Structured-query executor backed by graphql-core.

``GraphQLQueryExecutor`` runs a query against the schema grammar's
engine. Each call gets a brand-new ``ExecutionContext`` so loader
caches never outlive the execution that filled them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from entities.query_executor.loaders import ExecutionContext, create_execution_context
from entities.query_executor.resolvers import RESOLVERS, Resolver
from entities.shared.protocols import NewsStore
from entities.shared.schema_grammar import SchemaGrammar
from graphql import GraphQLResolveInfo, default_field_resolver, graphql
from models import ExecutionResult

logger = logging.getLogger(__name__)

ContextFactory = Callable[[NewsStore], ExecutionContext]


def _make_field_resolver(resolvers: dict[tuple[str, str], Resolver]) -> Resolver:
    """Dispatch each field to its bound resolver, else read it off the parent."""

    def resolve_field(source: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
        resolver = resolvers.get((info.parent_type.name, info.field_name))
        if resolver is None:
            return default_field_resolver(source, info, **kwargs)
        return resolver(source, info, **kwargs)

    return resolve_field


class GraphQLQueryExecutor:
    """``QueryExecutor`` over the schema grammar and a ``NewsStore``.

    Args:
        grammar: Loaded schema grammar; its schema object is not modified.
        store: Backing store handed to every execution context.
        context_factory: Builds the per-execution context.
    """

    def __init__(
        self,
        grammar: SchemaGrammar,
        store: NewsStore,
        context_factory: ContextFactory = create_execution_context,
    ) -> None:
        self._grammar = grammar
        self._store = store
        self._context_factory = context_factory
        self._field_resolver = _make_field_resolver(RESOLVERS)

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> ExecutionResult:
        """Execute a query with a fresh execution context.

        Args:
            query: GraphQL document text.
            variables: Variable values (or ``None``).

        Returns:
            ``ExecutionResult`` with data, or with the engine's error messages.
        """
        context = self._context_factory(self._store)
        result = await graphql(
            self._grammar.schema,
            query,
            variable_values=variables,
            context_value=context,
            field_resolver=self._field_resolver,
        )

        errors = [error.message for error in result.errors or []]
        if errors:
            logger.warning("Query execution reported %d error(s): %s", len(errors), errors[0])
        else:
            logger.info("Query executed successfully")
        return ExecutionResult(data=result.data, errors=errors)
