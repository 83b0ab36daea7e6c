"""Fallback Translator package: keyword rules that always yield a query."""

from .translator import RULES, extract_search_term, translate_with_patterns

__all__ = ["RULES", "extract_search_term", "translate_with_patterns"]
