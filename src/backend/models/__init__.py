"""
Shared models for entities.

These models are used across the translators, the validator, the
executor and the API layer. All models are re-exported here.
"""

from .errors import (
    NewsQueryError,
    QueryExecutionError,
    QueryProcessingError,
    QueryValidationError,
    SchemaGrammarError,
    ToolNotFoundError,
    TranslationError,
)
from .execution import ExecutionResult, QueryRequest, ResultEnvelope
from .query import ModelTranslation, StructuredQuery, TranslationSource, ValidationResult
from .schema import ArgumentSpec, FieldShape, OperationSpec
from .tools import (
    ArticleStatsToolInput,
    DateRange,
    NaturalLanguageToolInput,
    StatsFilterInput,
    ToolCallRequest,
    ToolCallResponse,
    ToolDefinition,
    ToolHandler,
)

__all__ = [
    # Errors
    "NewsQueryError",
    "QueryExecutionError",
    "QueryProcessingError",
    "QueryValidationError",
    "SchemaGrammarError",
    "ToolNotFoundError",
    "TranslationError",
    # Schema grammar
    "ArgumentSpec",
    "FieldShape",
    "OperationSpec",
    # Translation and validation
    "ModelTranslation",
    "StructuredQuery",
    "TranslationSource",
    "ValidationResult",
    # Execution (query results)
    "ExecutionResult",
    "QueryRequest",
    "ResultEnvelope",
    # Tools
    "ArticleStatsToolInput",
    "DateRange",
    "NaturalLanguageToolInput",
    "StatsFilterInput",
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolDefinition",
    "ToolHandler",
]
