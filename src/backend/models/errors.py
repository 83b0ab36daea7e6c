"""Exception hierarchy for the natural-language query pipeline."""


class NewsQueryError(Exception):
    """Base class for all pipeline errors."""


class SchemaGrammarError(NewsQueryError):
    """The schema grammar document is missing or does not parse."""


class TranslationError(NewsQueryError):
    """The model-backed translator produced no usable structured query.

    Always recovered by the keyword fallback; never surfaced to callers.
    """


class QueryValidationError(NewsQueryError):
    """A structured query failed the whitelist check."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Query validation failed: {'; '.join(self.errors)}")


class QueryExecutionError(NewsQueryError):
    """The execution engine reported errors. Only the first is kept."""

    def __init__(self, message: str) -> None:
        self.engine_message = message
        super().__init__(f"GraphQL execution error: {message}")


class QueryProcessingError(NewsQueryError):
    """Single uniform failure raised by ``process_query``."""


class ToolNotFoundError(NewsQueryError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool {name} not found")
