"""Shared test fixtures for the news query pipeline."""

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure src/backend/ is on the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "backend"))

from config.settings import Settings
from entities.nl_query import PipelineClients
from entities.query_executor import GraphQLQueryExecutor
from entities.shared.protocols import NoOpReporter
from entities.shared.schema_grammar import SchemaGrammar, load_schema_grammar

# ---------------------------------------------------------------------------
# Canned corpus
# ---------------------------------------------------------------------------

CATEGORIES: list[dict[str, Any]] = [
    {"id": "cat-tech", "name": "Technology", "slug": "technology", "description": "Tech news"},
    {"id": "cat-sci", "name": "Science", "slug": "science", "description": None},
    {"id": "cat-pol", "name": "Politics", "slug": "politics", "description": "Elections"},
]

ARTICLES: list[dict[str, Any]] = [
    {
        "id": "a1",
        "title": "AI models get smaller",
        "slug": "ai-models-get-smaller",
        "content": "Small language models are catching up.",
        "excerpt": "Small models",
        "author": "Jane Doe",
        "publishedAt": "2025-06-01T09:00:00",
        "source": "Wire",
        "wordCount": 800,
        "readingTime": 4,
        "sentiment": 0.6,
        "viewCount": 1500,
        "categoryId": "cat-tech",
    },
    {
        "id": "a2",
        "title": "Climate report warns of heat",
        "slug": "climate-report-warns-of-heat",
        "content": "The climate panel published its report.",
        "excerpt": "Heat ahead",
        "author": "John Roe",
        "publishedAt": "2025-06-03T12:00:00",
        "source": "Daily",
        "wordCount": 1200,
        "readingTime": 6,
        "sentiment": -0.5,
        "viewCount": 3200,
        "categoryId": "cat-sci",
    },
    {
        "id": "a3",
        "title": "Climate policy splits voters",
        "slug": "climate-policy-splits-voters",
        "content": "Voters disagree on climate policy.",
        "excerpt": None,
        "author": "Jane Doe",
        "publishedAt": "2025-05-20T08:30:00",
        "source": None,
        "wordCount": 950,
        "readingTime": 5,
        "sentiment": 0.1,
        "viewCount": 900,
        "categoryId": "cat-pol",
    },
    {
        "id": "a4",
        "title": "Chip makers expand",
        "slug": "chip-makers-expand",
        "content": "New fabs are being built.",
        "excerpt": "New fabs",
        "author": "Ann Lee",
        "publishedAt": "2025-06-05T10:00:00",
        "source": "Wire",
        "wordCount": 600,
        "readingTime": 3,
        "sentiment": 0.4,
        "viewCount": 2100,
        "categoryId": "cat-tech",
    },
]

TAGS: list[dict[str, Any]] = [
    {"id": "t1", "name": "AI"},
    {"id": "t2", "name": "climate"},
    {"id": "t3", "name": "elections"},
]

ARTICLE_TAGS: dict[str, list[str]] = {"a1": ["t1"], "a2": ["t2"], "a3": ["t2", "t3"]}


# ---------------------------------------------------------------------------
# Protocol fakes
# ---------------------------------------------------------------------------


def _newest_first(rows: Any) -> list[dict[str, Any]]:
    return sorted((dict(a) for a in rows), key=lambda a: a["publishedAt"], reverse=True)


class FakeNewsStore:
    """In-memory fake satisfying the ``NewsStore`` protocol.

    Serves the canned corpus above and records the keys of every batched
    call so tests can count backing-store round trips.
    """

    def __init__(self) -> None:
        self.category_batches: list[list[str]] = []
        self.tag_batches: list[list[str]] = []
        self.count_batches: list[list[str]] = []
        self.category_article_batches: list[tuple[Any, ...]] = []
        self.tag_article_batches: list[tuple[Any, ...]] = []
        self.tag_count_batches: list[list[str]] = []
        self.related_batches: list[tuple[Any, ...]] = []
        self.list_calls: list[tuple[Any, ...]] = []
        self.search_calls: list[tuple[Any, ...]] = []
        self.stats_calls: list[dict[str, Any] | None] = []

    # -- Batched primitives --

    async def categories_by_ids(self, category_ids: list[str]) -> list[dict[str, Any]]:
        self.category_batches.append(list(category_ids))
        # Reverse order: the loader must redistribute by id
        return [dict(c) for c in reversed(CATEGORIES) if c["id"] in category_ids]

    async def tags_by_article_ids(self, article_ids: list[str]) -> dict[str, list[dict[str, Any]]]:
        self.tag_batches.append(list(article_ids))
        tags_by_id = {t["id"]: t for t in TAGS}
        return {
            article_id: [dict(tags_by_id[tag_id]) for tag_id in ARTICLE_TAGS[article_id]]
            for article_id in article_ids
            if article_id in ARTICLE_TAGS
        }

    async def article_counts_by_category_ids(self, category_ids: list[str]) -> dict[str, int]:
        self.count_batches.append(list(category_ids))
        counts: dict[str, int] = {}
        for article in ARTICLES:
            if article["categoryId"] in category_ids:
                counts[article["categoryId"]] = counts.get(article["categoryId"], 0) + 1
        return counts

    async def articles_by_category_ids(
        self, category_ids: list[str], limit: int, offset: int
    ) -> dict[str, list[dict[str, Any]]]:
        self.category_article_batches.append((list(category_ids), limit, offset))
        grouped: dict[str, list[dict[str, Any]]] = {}
        for category_id in category_ids:
            rows = _newest_first(a for a in ARTICLES if a["categoryId"] == category_id)
            if rows:
                grouped[category_id] = rows[offset : offset + limit]
        return grouped

    async def articles_by_tag_ids(
        self, tag_ids: list[str], limit: int
    ) -> dict[str, list[dict[str, Any]]]:
        self.tag_article_batches.append((list(tag_ids), limit))
        grouped: dict[str, list[dict[str, Any]]] = {}
        for tag_id in tag_ids:
            rows = _newest_first(a for a in ARTICLES if tag_id in ARTICLE_TAGS.get(a["id"], []))
            if rows:
                grouped[tag_id] = rows[:limit]
        return grouped

    async def article_counts_by_tag_ids(self, tag_ids: list[str]) -> dict[str, int]:
        self.tag_count_batches.append(list(tag_ids))
        counts: dict[str, int] = {}
        for tag_ids_of_article in ARTICLE_TAGS.values():
            for tag_id in tag_ids_of_article:
                if tag_id in tag_ids:
                    counts[tag_id] = counts.get(tag_id, 0) + 1
        return counts

    async def related_articles_by_article_ids(
        self, article_ids: list[str], limit: int
    ) -> dict[str, list[dict[str, Any]]]:
        self.related_batches.append((list(article_ids), limit))
        by_id = {a["id"]: a for a in ARTICLES}
        grouped: dict[str, list[dict[str, Any]]] = {}
        for article_id in article_ids:
            source = by_id.get(article_id)
            if source is None:
                continue
            source_tags = set(ARTICLE_TAGS.get(article_id, []))
            grouped[article_id] = _newest_first(
                a
                for a in ARTICLES
                if a["id"] != article_id
                and (
                    a["categoryId"] == source["categoryId"]
                    or source_tags & set(ARTICLE_TAGS.get(a["id"], []))
                )
            )[:limit]
        return grouped

    # -- Root reads --

    def _filtered(self, article_filter: dict[str, Any] | None) -> list[dict[str, Any]]:
        rows = [dict(a) for a in ARTICLES]
        for key in ("categoryId", "author", "source"):
            if article_filter and article_filter.get(key):
                rows = [a for a in rows if a[key] == article_filter[key]]
        return rows

    async def get_article(self, article_id: str | None, slug: str | None) -> dict[str, Any] | None:
        for article in ARTICLES:
            if article["id"] == article_id or (slug and article["slug"] == slug):
                return dict(article)
        return None

    async def list_articles(
        self,
        article_filter: dict[str, Any] | None,
        sort: dict[str, str] | None,
        limit: int,
        offset: int,
    ) -> list[dict[str, Any]]:
        self.list_calls.append((article_filter, sort, limit, offset))
        rows = self._filtered(article_filter)
        if sort and sort.get("field") == "PUBLISHED_AT":
            rows.sort(key=lambda a: a["publishedAt"], reverse=sort.get("order") == "DESC")
        return rows[offset : offset + limit]

    async def search_articles(
        self,
        query: str,
        article_filter: dict[str, Any] | None,
        limit: int,
    ) -> dict[str, Any]:
        self.search_calls.append((query, article_filter, limit))
        term = query.lower()
        matches = [
            a
            for a in self._filtered(article_filter)
            if term in a["title"].lower() or term in a["content"].lower()
        ]
        return {
            "articles": matches[:limit],
            "totalCount": len(matches),
            "facets": {"categories": [], "authors": [], "sources": []},
        }

    async def article_stats(self, article_filter: dict[str, Any] | None) -> dict[str, Any]:
        self.stats_calls.append(article_filter)
        rows = self._filtered(article_filter)
        total = len(rows)
        return {
            "totalCount": total,
            "averageWordCount": sum(a["wordCount"] for a in rows) / total if total else 0.0,
            "averageReadingTime": sum(a["readingTime"] for a in rows) / total if total else 0.0,
            "topAuthors": [],
            "categoryBreakdown": [],
            "sentimentDistribution": {
                "positive": sum(1 for a in rows if a["sentiment"] > 0.3),
                "neutral": sum(1 for a in rows if -0.3 <= a["sentiment"] <= 0.3),
                "negative": sum(1 for a in rows if a["sentiment"] < -0.3),
                "average": sum(a["sentiment"] for a in rows) / total if total else 0.0,
            },
        }

    async def trending_articles(self, limit: int) -> list[dict[str, Any]]:
        rows = sorted((dict(a) for a in ARTICLES), key=lambda a: a["viewCount"], reverse=True)
        return rows[:limit]

    async def recommended_articles(self, article_id: str, limit: int) -> list[dict[str, Any]] | None:
        source = await self.get_article(article_id, None)
        if source is None:
            return None
        return [
            dict(a)
            for a in ARTICLES
            if a["id"] != article_id and a["categoryId"] == source["categoryId"]
        ][:limit]

    async def list_categories(self) -> list[dict[str, Any]]:
        return [dict(c) for c in CATEGORIES]

    async def get_category(self, slug: str) -> dict[str, Any] | None:
        return next((dict(c) for c in CATEGORIES if c["slug"] == slug), None)

    async def list_tags(self, limit: int) -> list[dict[str, Any]]:
        return [dict(t) for t in TAGS][:limit]


class SpyReporter:
    """Spy satisfying the ``ProgressReporter`` protocol.

    Captures every ``step_start`` / ``step_end`` call for assertions.
    """

    def __init__(self) -> None:
        self.events: list[dict[str, str]] = []

    def step_start(self, step: str) -> None:
        """Record a step-start event."""
        self.events.append({"step": step, "status": "started"})

    def step_end(self, step: str) -> None:
        """Record a step-end event."""
        self.events.append({"step": step, "status": "completed"})


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Return a ``Settings`` instance populated with safe test defaults."""
    return Settings(
        azure_ai_project_endpoint="https://test.services.ai.azure.com/api/projects/test",
        azure_sql_server="test-server.database.windows.net",
        azure_sql_database="TestDB",
        azure_ai_model_deployment_name="test-model",
    )


@pytest.fixture(scope="session")
def grammar() -> SchemaGrammar:
    """Return the bundled schema grammar."""
    return load_schema_grammar()


@pytest.fixture
def fake_store() -> FakeNewsStore:
    """Return a fresh ``FakeNewsStore`` instance."""
    return FakeNewsStore()


@pytest.fixture
def spy_reporter() -> SpyReporter:
    """Return a fresh ``SpyReporter`` instance."""
    return SpyReporter()


@pytest.fixture
def noop_reporter() -> NoOpReporter:
    """Return a ``NoOpReporter`` from the protocols module."""
    return NoOpReporter()


@pytest.fixture
def executor(grammar: SchemaGrammar, fake_store: FakeNewsStore) -> GraphQLQueryExecutor:
    """Return a ``GraphQLQueryExecutor`` over the fake store."""
    return GraphQLQueryExecutor(grammar, fake_store)


@pytest.fixture
def clients(
    grammar: SchemaGrammar,
    executor: GraphQLQueryExecutor,
    spy_reporter: SpyReporter,
) -> PipelineClients:
    """Return ``PipelineClients`` that use keyword translation only."""
    return PipelineClients(grammar=grammar, executor=executor, reporter=spy_reporter)
