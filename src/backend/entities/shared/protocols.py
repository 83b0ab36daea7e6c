"""Protocol interfaces for I/O boundaries.

These protocols enable dependency injection for testability.
Production implementations wrap Azure SQL and the GraphQL engine;
test fakes return canned data with zero network or filesystem access.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from models import ExecutionResult

Row = dict[str, Any]


@runtime_checkable
class NewsStore(Protocol):
    """Read access to the article corpus.

    The ``*_by_*_ids`` methods are the batched-load primitives used
    by the per-request loaders: they receive every key requested during one
    execution and may return rows in any order. The remaining methods back
    the root operations of the schema grammar. Rows use the schema's field
    names (``id``, ``title``, ``categoryId`` ...).
    """

    async def categories_by_ids(self, category_ids: list[str]) -> list[Row]:
        """Fetch the categories with the given ids (missing ids are skipped)."""
        ...

    async def tags_by_article_ids(self, article_ids: list[str]) -> dict[str, list[Row]]:
        """Fetch tags grouped by article id (articles without tags are skipped)."""
        ...

    async def article_counts_by_category_ids(self, category_ids: list[str]) -> dict[str, int]:
        """Count articles per category (categories without articles are skipped)."""
        ...

    async def articles_by_category_ids(
        self, category_ids: list[str], limit: int, offset: int
    ) -> dict[str, list[Row]]:
        """Page through each category's articles, newest first, grouped by category id."""
        ...

    async def articles_by_tag_ids(self, tag_ids: list[str], limit: int) -> dict[str, list[Row]]:
        """Newest articles carrying each tag, grouped by tag id."""
        ...

    async def article_counts_by_tag_ids(self, tag_ids: list[str]) -> dict[str, int]:
        """Count articles per tag (tags without articles are skipped)."""
        ...

    async def related_articles_by_article_ids(
        self, article_ids: list[str], limit: int
    ) -> dict[str, list[Row]]:
        """Articles sharing a category or a tag with each article, grouped by its id.

        Unknown article ids are skipped.
        """
        ...

    async def get_article(self, article_id: str | None, slug: str | None) -> Row | None:
        """Fetch one article by id or slug."""
        ...

    async def list_articles(
        self,
        article_filter: dict[str, Any] | None,
        sort: dict[str, str] | None,
        limit: int,
        offset: int,
    ) -> list[Row]:
        """List articles matching a filter, sorted and paginated."""
        ...

    async def search_articles(
        self,
        query: str,
        article_filter: dict[str, Any] | None,
        limit: int,
    ) -> Row:
        """Full-text search; returns ``articles``, ``totalCount`` and ``facets``."""
        ...

    async def article_stats(self, article_filter: dict[str, Any] | None) -> Row:
        """Aggregate statistics shaped like the ``ArticleStats`` type."""
        ...

    async def trending_articles(self, limit: int) -> list[Row]:
        """Most viewed recent articles."""
        ...

    async def recommended_articles(self, article_id: str, limit: int) -> list[Row] | None:
        """Articles similar to the given one, or ``None`` if it does not exist."""
        ...

    async def list_categories(self) -> list[Row]:
        """Every category."""
        ...

    async def get_category(self, slug: str) -> Row | None:
        """One category by slug."""
        ...

    async def list_tags(self, limit: int) -> list[Row]:
        """Up to ``limit`` tags."""
        ...


@runtime_checkable
class QueryExecutor(Protocol):
    """Runs a structured query against the schema grammar's engine."""

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> ExecutionResult:
        """Execute a GraphQL query.

        Args:
            query: GraphQL document text.
            variables: Variable values (or ``None``).

        Returns:
            Result data, or the engine's error messages verbatim.
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports step-level progress of a pipeline run."""

    def step_start(self, step: str) -> None:
        """Signal that a named step has started.

        Args:
            step: Human-readable step label.
        """
        ...

    def step_end(self, step: str) -> None:
        """Signal that a named step has completed.

        Args:
            step: Human-readable step label (must match a prior start).
        """
        ...


# ---------------------------------------------------------------------------
# Concrete implementations
# ---------------------------------------------------------------------------


class NoOpReporter:
    """ProgressReporter that silently discards all events.

    Useful in tests and in contexts where nobody watches progress.
    """

    def step_start(self, step: str) -> None:
        """No-op."""

    def step_end(self, step: str) -> None:
        """No-op."""
