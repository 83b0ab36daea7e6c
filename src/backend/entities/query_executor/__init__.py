"""Structured-query execution with per-call batching loaders."""

from .executor import GraphQLQueryExecutor
from .loaders import ExecutionContext, create_execution_context

__all__ = ["ExecutionContext", "GraphQLQueryExecutor", "create_execution_context"]
