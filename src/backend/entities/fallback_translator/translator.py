"""Keyword-driven fallback translation.

Maps raw request text onto a fixed set of canned queries. Rules are
evaluated top to bottom against the lower-cased text and the first match
wins, so "most popular articles" resolves to trending rather than search.
Pure functions, no I/O, never raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from models import StructuredQuery

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_TERM = "news"
SEARCH_VARIABLE = "searchTerm"

SEARCH_STOPWORDS = frozenset({
    "find", "search", "show", "me", "for", "articles", "article",
    "about", "on", "regarding", "the", "a", "an",
})

_TOPIC_PATTERN = re.compile(r"\b(?:about|on|regarding)\s+(\w+)", re.IGNORECASE)


# ============================================================================
# Canned queries
# ============================================================================

TRENDING_QUERY = """query GetTrendingArticles {
  trendingArticles(limit: 5) {
    id
    title
    slug
    excerpt
    author
    publishedAt
    viewCount
    category {
      name
    }
  }
}"""

STATS_QUERY = """query GetArticleStats {
  articleStats {
    totalCount
    averageWordCount
    averageReadingTime
    topAuthors {
      author
      articleCount
      averageSentiment
    }
    categoryBreakdown {
      category {
        name
      }
      count
      percentage
    }
    sentimentDistribution {
      positive
      neutral
      negative
      average
    }
  }
}"""

SEARCH_QUERY = """query SearchArticles($searchTerm: String!) {
  searchArticles(query: $searchTerm, limit: 10) {
    articles {
      id
      title
      slug
      excerpt
      author
      publishedAt
      viewCount
      category {
        name
      }
      tags {
        name
      }
    }
    totalCount
  }
}"""

RECENT_QUERY = """query GetRecentArticles {
  articles(sort: { field: PUBLISHED_AT, order: DESC }, limit: 10) {
    id
    title
    slug
    excerpt
    author
    publishedAt
    viewCount
    category {
      name
    }
  }
}"""

CATEGORIES_QUERY = """query GetCategories {
  categories {
    id
    name
    slug
    description
    articleCount
  }
}"""

TAGS_QUERY = """query GetTags {
  tags(limit: 50) {
    id
    name
  }
}"""

DEFAULT_QUERY = """query GetDefaultArticles {
  articles(limit: 10) {
    id
    title
    slug
    excerpt
    author
    publishedAt
    viewCount
    category {
      name
    }
  }
}"""


# ============================================================================
# Rules
# ============================================================================


@dataclass(frozen=True)
class PatternRule:
    """One fallback rule.

    Attributes:
        name: Short label used in logs.
        matches: Predicate over the lower-cased request text.
        build: Produces the structured query from the original text.
    """

    name: str
    matches: Callable[[str], bool]
    build: Callable[[str], StructuredQuery]


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    def matches(lowered: str) -> bool:
        return any(keyword in lowered for keyword in keywords)

    return matches


def _canned(query: str, explanation: str) -> Callable[[str], StructuredQuery]:
    def build(_text: str) -> StructuredQuery:
        return StructuredQuery(query=query, explanation=explanation, source="fallback")

    return build


def extract_search_term(text: str) -> str:
    """Pick the search term of a request.

    The word after "about", "on" or "regarding" wins; otherwise the first
    word that is not a stopword. Case is kept as typed.

    Args:
        text: Original request text.

    Returns:
        The search term, or ``"news"`` when nothing is left.
    """
    topic = _TOPIC_PATTERN.search(text)
    if topic:
        return topic.group(1)
    for word in re.findall(r"\w+", text):
        if word.lower() not in SEARCH_STOPWORDS:
            return word
    return DEFAULT_SEARCH_TERM


def _is_search(lowered: str) -> bool:
    return bool(_TOPIC_PATTERN.search(lowered)) or "find" in lowered or "search" in lowered


def _build_search(text: str) -> StructuredQuery:
    term = extract_search_term(text)
    return StructuredQuery(
        query=SEARCH_QUERY,
        variables={SEARCH_VARIABLE: term},
        explanation=f'Searching for articles containing "{term}"',
        source="fallback",
    )


RULES: tuple[PatternRule, ...] = (
    PatternRule(
        name="trending",
        matches=_contains_any("trending", "popular"),
        build=_canned(TRENDING_QUERY, "Fetching trending articles based on view count"),
    ),
    PatternRule(
        name="stats",
        matches=_contains_any("stats", "statistics", "analytics"),
        build=_canned(STATS_QUERY, "Getting comprehensive statistics about articles"),
    ),
    PatternRule(name="search", matches=_is_search, build=_build_search),
    PatternRule(
        name="recent",
        matches=_contains_any("recent", "latest", "new"),
        build=_canned(RECENT_QUERY, "Fetching the most recently published articles"),
    ),
    PatternRule(
        name="categories",
        matches=_contains_any("categories", "category"),
        build=_canned(CATEGORIES_QUERY, "Listing all available article categories"),
    ),
    PatternRule(
        name="tags",
        matches=_contains_any("tags", "topics"),
        build=_canned(TAGS_QUERY, "Listing the most common article tags"),
    ),
)

DEFAULT_RULE = PatternRule(
    name="default",
    matches=lambda _lowered: True,
    build=_canned(DEFAULT_QUERY, "Fetching a general list of articles (default query)"),
)


def translate_with_patterns(text: str) -> StructuredQuery:
    """Translate request text with the first matching pattern rule.

    Args:
        text: Raw request text.

    Returns:
        A canned ``StructuredQuery``; the default recent-articles query when
        no rule matches.
    """
    lowered = text.lower()
    rule = next((candidate for candidate in RULES if candidate.matches(lowered)), DEFAULT_RULE)
    logger.info("Fallback translator matched rule '%s'", rule.name)
    return rule.build(text)

