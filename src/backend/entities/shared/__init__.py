"""Shared utilities for the query pipeline.

The Azure SQL client and store live in ``entities.shared.clients`` and
``entities.shared.news_store`` and are imported from there directly.
"""

from .protocols import NewsStore, NoOpReporter, ProgressReporter, QueryExecutor
from .schema_grammar import SchemaGrammar, load_schema_grammar

__all__ = [
    "NewsStore",
    "NoOpReporter",
    "ProgressReporter",
    "QueryExecutor",
    "SchemaGrammar",
    "load_schema_grammar",
]
