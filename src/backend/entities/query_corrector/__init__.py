"""Query Corrector package for patching known omissions in generated queries."""

from .corrector import correct_query

__all__ = ["correct_query"]
