"""Unit tests for the keyword-driven fallback translator."""

from __future__ import annotations

import pytest
from entities.fallback_translator import RULES, extract_search_term, translate_with_patterns
from entities.fallback_translator.translator import (
    CATEGORIES_QUERY,
    DEFAULT_QUERY,
    RECENT_QUERY,
    SEARCH_QUERY,
    STATS_QUERY,
    TAGS_QUERY,
    TRENDING_QUERY,
)


# ── Rule selection ────────────────────────────────────────────────────


class TestRuleSelection:
    """The first matching rule decides the canned query."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Show me trending articles", TRENDING_QUERY),
            ("What is popular right now?", TRENDING_QUERY),
            ("article statistics", STATS_QUERY),
            ("analytics please", STATS_QUERY),
            ("Find articles about climate", SEARCH_QUERY),
            ("search elections", SEARCH_QUERY),
            ("latest articles", RECENT_QUERY),
            ("list categories", CATEGORIES_QUERY),
            ("show all tags", TAGS_QUERY),
            ("what topics exist", TAGS_QUERY),
            ("hello", DEFAULT_QUERY),
        ],
    )
    def test_keyword_to_query(self, text: str, expected: str) -> None:
        assert translate_with_patterns(text).query == expected

    def test_trending_wins_over_search(self) -> None:
        result = translate_with_patterns("most popular articles about climate")
        assert result.query == TRENDING_QUERY
        assert result.variables is None

    def test_stats_wins_over_search(self) -> None:
        assert translate_with_patterns("statistics on authors").query == STATS_QUERY

    def test_substring_match_for_new(self) -> None:
        assert translate_with_patterns("any news today").query == RECENT_QUERY

    def test_rule_order(self) -> None:
        assert [rule.name for rule in RULES] == [
            "trending",
            "stats",
            "search",
            "recent",
            "categories",
            "tags",
        ]


# ── Search term extraction ────────────────────────────────────────────


class TestSearchTerm:
    """Term picked for the search rule."""

    def test_word_after_about(self) -> None:
        result = translate_with_patterns("Find articles about climate")
        assert result.variables == {"searchTerm": "climate"}
        assert result.explanation == 'Searching for articles containing "climate"'

    def test_case_is_preserved(self) -> None:
        assert extract_search_term("Tell me about Climate") == "Climate"

    def test_article_after_topic_word_is_taken_as_is(self) -> None:
        assert extract_search_term("news regarding the Election") == "the"

    def test_search_variables_keep_leading_article(self) -> None:
        result = translate_with_patterns("Find articles about the election")
        assert result.variables == {"searchTerm": "the"}

    def test_first_non_stopword(self) -> None:
        assert extract_search_term("search elections") == "elections"

    def test_nothing_left_defaults_to_news(self) -> None:
        result = translate_with_patterns("search")
        assert result.variables == {"searchTerm": "news"}


# ── General properties ────────────────────────────────────────────────


class TestProperties:
    """Determinism and output metadata."""

    def test_source_is_fallback(self) -> None:
        assert translate_with_patterns("Show me trending articles").source == "fallback"

    def test_trending_explanation(self) -> None:
        result = translate_with_patterns("Show me trending articles")
        assert result.explanation == "Fetching trending articles based on view count"

    def test_default_explanation(self) -> None:
        result = translate_with_patterns("hello")
        assert result.explanation == "Fetching a general list of articles (default query)"

    def test_deterministic(self) -> None:
        first = translate_with_patterns("Find articles about climate")
        second = translate_with_patterns("Find articles about climate")
        assert first == second

    def test_empty_text_uses_default(self) -> None:
        assert translate_with_patterns("").query == DEFAULT_QUERY
