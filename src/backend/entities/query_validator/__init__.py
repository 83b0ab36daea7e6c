"""Query Validator package for linting structured queries before execution."""

from .validator import validate_query

__all__ = ["validate_query"]
