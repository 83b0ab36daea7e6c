"""Azure SQL implementation of the ``NewsStore`` protocol.

Every method opens a fresh connection through ``AzureSqlClient`` and
runs parameterised T-SQL against the article tables:

* ``dbo.Articles``    (Id, Title, Slug, Content, Excerpt, Author, PublishedAt,
                       Source, WordCount, ReadingTime, Sentiment, ViewCount, CategoryId)
* ``dbo.Categories``  (Id, Name, Slug, Description)
* ``dbo.Tags``        (Id, Name)
* ``dbo.ArticleTags`` (ArticleId, TagId)

Column aliases match the schema grammar's field names so rows can be
handed to the GraphQL engine unchanged.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from entities.shared.clients import AzureSqlClient

logger = logging.getLogger(__name__)

_ARTICLE_COLUMNS = (
    "a.Id AS id, a.Title AS title, a.Slug AS slug, a.Content AS content, "
    "a.Excerpt AS excerpt, a.Author AS author, a.PublishedAt AS publishedAt, "
    "a.Source AS source, a.WordCount AS wordCount, a.ReadingTime AS readingTime, "
    "a.Sentiment AS sentiment, a.ViewCount AS viewCount, a.CategoryId AS categoryId"
)
_CATEGORY_COLUMNS = "c.Id AS id, c.Name AS name, c.Slug AS slug, c.Description AS description"

_SORT_COLUMNS = {
    "PUBLISHED_AT": "a.PublishedAt",
    "VIEW_COUNT": "a.ViewCount",
    "WORD_COUNT": "a.WordCount",
    "SENTIMENT": "a.Sentiment",
    "READING_TIME": "a.ReadingTime",
}

# Sentiment bucket boundaries
POSITIVE_SENTIMENT = 0.3
NEGATIVE_SENTIMENT = -0.3

_FACET_LIMIT = 10
_TOP_AUTHORS = 5


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


def _group_ranked(rows: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group windowed rows by ``groupKey``, dropping the window columns."""
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        article = dict(row)
        key = str(article.pop("groupKey"))
        article.pop("rowNumber", None)
        grouped[key].append(article)
    return dict(grouped)


def build_article_where(article_filter: dict[str, Any] | None) -> tuple[str, list[Any]]:
    """Translate an ``ArticleFilter`` input into a WHERE clause.

    Args:
        article_filter: Filter values keyed by ``ArticleFilter`` field name.

    Returns:
        Tuple of (clause starting with ``WHERE`` or empty, bind parameters).
    """
    if not article_filter:
        return "", []

    conditions: list[str] = []
    params: list[Any] = []

    for key, column in (("categoryId", "a.CategoryId"), ("author", "a.Author"), ("source", "a.Source")):
        value = article_filter.get(key)
        if value:
            conditions.append(f"{column} = ?")
            params.append(value)

    search_term = article_filter.get("searchTerm")
    if search_term:
        conditions.append("(a.Title LIKE ? OR a.Content LIKE ?)")
        params.extend([f"%{search_term}%", f"%{search_term}%"])

    if article_filter.get("publishedAfter"):
        conditions.append("a.PublishedAt >= ?")
        params.append(article_filter["publishedAfter"])
    if article_filter.get("publishedBefore"):
        conditions.append("a.PublishedAt <= ?")
        params.append(article_filter["publishedBefore"])

    if article_filter.get("minWordCount") is not None:
        conditions.append("a.WordCount >= ?")
        params.append(article_filter["minWordCount"])
    if article_filter.get("maxWordCount") is not None:
        conditions.append("a.WordCount <= ?")
        params.append(article_filter["maxWordCount"])

    sentiment = article_filter.get("sentiment") or {}
    if sentiment.get("min") is not None:
        conditions.append("a.Sentiment >= ?")
        params.append(sentiment["min"])
    if sentiment.get("max") is not None:
        conditions.append("a.Sentiment <= ?")
        params.append(sentiment["max"])

    tags = article_filter.get("tags") or []
    if tags:
        conditions.append(
            "EXISTS (SELECT 1 FROM dbo.ArticleTags at JOIN dbo.Tags t ON t.Id = at.TagId "
            f"WHERE at.ArticleId = a.Id AND t.Name IN ({_placeholders(len(tags))}))"
        )
        params.extend(tags)

    if not conditions:
        return "", []
    return "WHERE " + " AND ".join(conditions), params


def build_order_by(sort: dict[str, str] | None) -> str:
    """Translate an ``ArticleSort`` input into an ORDER BY clause.

    Unknown fields fall back to publication date; the default order is
    newest first.
    """
    if not sort:
        return "ORDER BY a.PublishedAt DESC"
    column = _SORT_COLUMNS.get(sort.get("field", ""), "a.PublishedAt")
    direction = "ASC" if str(sort.get("order", "DESC")).upper() == "ASC" else "DESC"
    return f"ORDER BY {column} {direction}"


class SqlNewsStore:
    """``NewsStore`` backed by ``AzureSqlClient``.

    Args:
        server: Azure SQL server hostname.
        database: Database name.
        client_id: Optional managed identity client ID.
        trending_window_days: Look-back window of ``trending_articles``.
    """

    def __init__(
        self,
        server: str,
        database: str,
        client_id: str | None = None,
        trending_window_days: int = 7,
    ) -> None:
        self._server = server
        self._database = database
        self._client_id = client_id
        self._trending_window_days = trending_window_days

    async def _fetch(self, query: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        async with AzureSqlClient(self._server, self._database, self._client_id) as client:
            return await client.fetch_all(query, params)

    # -- Batched primitives ------------------------------------------------

    async def categories_by_ids(self, category_ids: list[str]) -> list[dict[str, Any]]:
        if not category_ids:
            return []
        logger.debug("Loading %d categories in one batch", len(category_ids))
        return await self._fetch(
            f"SELECT {_CATEGORY_COLUMNS} FROM dbo.Categories c "
            f"WHERE c.Id IN ({_placeholders(len(category_ids))})",
            list(category_ids),
        )

    async def tags_by_article_ids(self, article_ids: list[str]) -> dict[str, list[dict[str, Any]]]:
        if not article_ids:
            return {}
        logger.debug("Loading tags for %d articles in one batch", len(article_ids))
        rows = await self._fetch(
            "SELECT at.ArticleId AS articleId, t.Id AS id, t.Name AS name "
            "FROM dbo.ArticleTags at JOIN dbo.Tags t ON t.Id = at.TagId "
            f"WHERE at.ArticleId IN ({_placeholders(len(article_ids))}) "
            "ORDER BY t.Name",
            list(article_ids),
        )
        grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
        for row in rows:
            grouped[str(row["articleId"])].append({"id": row["id"], "name": row["name"]})
        return dict(grouped)

    async def article_counts_by_category_ids(self, category_ids: list[str]) -> dict[str, int]:
        if not category_ids:
            return {}
        rows = await self._fetch(
            "SELECT a.CategoryId AS categoryId, COUNT(*) AS articleCount FROM dbo.Articles a "
            f"WHERE a.CategoryId IN ({_placeholders(len(category_ids))}) "
            "GROUP BY a.CategoryId",
            list(category_ids),
        )
        return {str(row["categoryId"]): int(row["articleCount"]) for row in rows}

    async def articles_by_category_ids(
        self, category_ids: list[str], limit: int, offset: int
    ) -> dict[str, list[dict[str, Any]]]:
        if not category_ids:
            return {}
        logger.debug("Loading articles for %d categories in one batch", len(category_ids))
        rows = await self._fetch(
            "SELECT * FROM ("
            f"SELECT a.CategoryId AS groupKey, {_ARTICLE_COLUMNS}, "
            "ROW_NUMBER() OVER (PARTITION BY a.CategoryId ORDER BY a.PublishedAt DESC) AS rowNumber "
            f"FROM dbo.Articles a WHERE a.CategoryId IN ({_placeholders(len(category_ids))})"
            ") ranked WHERE ranked.rowNumber > ? AND ranked.rowNumber <= ? "
            "ORDER BY ranked.groupKey, ranked.rowNumber",
            [*category_ids, offset, offset + limit],
        )
        return _group_ranked(rows)

    async def articles_by_tag_ids(
        self, tag_ids: list[str], limit: int
    ) -> dict[str, list[dict[str, Any]]]:
        if not tag_ids:
            return {}
        logger.debug("Loading articles for %d tags in one batch", len(tag_ids))
        rows = await self._fetch(
            "SELECT * FROM ("
            f"SELECT at.TagId AS groupKey, {_ARTICLE_COLUMNS}, "
            "ROW_NUMBER() OVER (PARTITION BY at.TagId ORDER BY a.PublishedAt DESC) AS rowNumber "
            "FROM dbo.ArticleTags at JOIN dbo.Articles a ON a.Id = at.ArticleId "
            f"WHERE at.TagId IN ({_placeholders(len(tag_ids))})"
            ") ranked WHERE ranked.rowNumber <= ? "
            "ORDER BY ranked.groupKey, ranked.rowNumber",
            [*tag_ids, limit],
        )
        return _group_ranked(rows)

    async def article_counts_by_tag_ids(self, tag_ids: list[str]) -> dict[str, int]:
        if not tag_ids:
            return {}
        rows = await self._fetch(
            "SELECT at.TagId AS tagId, COUNT(*) AS articleCount FROM dbo.ArticleTags at "
            f"WHERE at.TagId IN ({_placeholders(len(tag_ids))}) "
            "GROUP BY at.TagId",
            list(tag_ids),
        )
        return {str(row["tagId"]): int(row["articleCount"]) for row in rows}

    async def related_articles_by_article_ids(
        self, article_ids: list[str], limit: int
    ) -> dict[str, list[dict[str, Any]]]:
        if not article_ids:
            return {}
        logger.debug("Loading related articles for %d articles in one batch", len(article_ids))
        rows = await self._fetch(
            "SELECT * FROM ("
            f"SELECT src.Id AS groupKey, {_ARTICLE_COLUMNS}, "
            "ROW_NUMBER() OVER (PARTITION BY src.Id ORDER BY a.PublishedAt DESC) AS rowNumber "
            "FROM dbo.Articles src JOIN dbo.Articles a ON a.Id <> src.Id AND ("
            "a.CategoryId = src.CategoryId OR EXISTS ("
            "SELECT 1 FROM dbo.ArticleTags mine JOIN dbo.ArticleTags theirs "
            "ON theirs.TagId = mine.TagId "
            "WHERE mine.ArticleId = src.Id AND theirs.ArticleId = a.Id)) "
            f"WHERE src.Id IN ({_placeholders(len(article_ids))})"
            ") ranked WHERE ranked.rowNumber <= ? "
            "ORDER BY ranked.groupKey, ranked.rowNumber",
            [*article_ids, limit],
        )
        return _group_ranked(rows)

    # -- Root reads --------------------------------------------------------

    async def get_article(self, article_id: str | None, slug: str | None) -> dict[str, Any] | None:
        column, value = ("a.Id", article_id) if article_id else ("a.Slug", slug)
        rows = await self._fetch(
            f"SELECT TOP 1 {_ARTICLE_COLUMNS} FROM dbo.Articles a WHERE {column} = ?", [value]
        )
        return rows[0] if rows else None

    async def list_articles(
        self,
        article_filter: dict[str, Any] | None,
        sort: dict[str, str] | None,
        limit: int,
        offset: int,
    ) -> list[dict[str, Any]]:
        where, params = build_article_where(article_filter)
        return await self._fetch(
            f"SELECT {_ARTICLE_COLUMNS} FROM dbo.Articles a {where} {build_order_by(sort)} "
            "OFFSET ? ROWS FETCH NEXT ? ROWS ONLY",
            [*params, offset, limit],
        )

    async def search_articles(
        self,
        query: str,
        article_filter: dict[str, Any] | None,
        limit: int,
    ) -> dict[str, Any]:
        where, params = build_article_where(article_filter)
        pattern = f"%{query}%"
        match = "(a.Title LIKE ? OR a.Content LIKE ? OR a.Excerpt LIKE ?)"
        where = f"{where} AND {match}" if where else f"WHERE {match}"
        params = [*params, pattern, pattern, pattern]

        articles = await self._fetch(
            f"SELECT TOP (?) {_ARTICLE_COLUMNS} FROM dbo.Articles a {where} "
            "ORDER BY a.PublishedAt DESC",
            [limit, *params],
        )
        total = await self._fetch(f"SELECT COUNT(*) AS totalCount FROM dbo.Articles a {where}", params)
        category_facets = await self._fetch(
            f"SELECT TOP ({_FACET_LIMIT}) COALESCE(c.Name, 'Unknown') AS [key], COUNT(*) AS [count] "
            f"FROM dbo.Articles a LEFT JOIN dbo.Categories c ON c.Id = a.CategoryId {where} "
            "GROUP BY c.Name ORDER BY COUNT(*) DESC",
            params,
        )
        author_facets = await self._fetch(
            f"SELECT TOP ({_FACET_LIMIT}) a.Author AS [key], COUNT(*) AS [count] "
            f"FROM dbo.Articles a {where} GROUP BY a.Author ORDER BY COUNT(*) DESC",
            params,
        )
        source_where = f"{where} AND a.Source IS NOT NULL"
        source_facets = await self._fetch(
            f"SELECT TOP ({_FACET_LIMIT}) a.Source AS [key], COUNT(*) AS [count] "
            f"FROM dbo.Articles a {source_where} GROUP BY a.Source ORDER BY COUNT(*) DESC",
            params,
        )
        return {
            "articles": articles,
            "totalCount": int(total[0]["totalCount"]) if total else 0,
            "facets": {
                "categories": category_facets,
                "authors": author_facets,
                "sources": source_facets,
            },
        }

    async def article_stats(self, article_filter: dict[str, Any] | None) -> dict[str, Any]:
        where, params = build_article_where(article_filter)
        summary_rows = await self._fetch(
            "SELECT COUNT(*) AS totalCount, "
            "COALESCE(AVG(CAST(a.WordCount AS FLOAT)), 0) AS averageWordCount, "
            "COALESCE(AVG(CAST(a.ReadingTime AS FLOAT)), 0) AS averageReadingTime, "
            "SUM(CASE WHEN a.Sentiment > ? THEN 1 ELSE 0 END) AS positive, "
            "SUM(CASE WHEN a.Sentiment BETWEEN ? AND ? THEN 1 ELSE 0 END) AS neutral, "
            "SUM(CASE WHEN a.Sentiment < ? THEN 1 ELSE 0 END) AS negative, "
            "COALESCE(AVG(COALESCE(a.Sentiment, 0)), 0) AS average "
            f"FROM dbo.Articles a {where}",
            [
                POSITIVE_SENTIMENT,
                NEGATIVE_SENTIMENT,
                POSITIVE_SENTIMENT,
                NEGATIVE_SENTIMENT,
                *params,
            ],
        )
        summary = summary_rows[0] if summary_rows else {}
        total_count = int(summary.get("totalCount") or 0)

        top_authors = await self._fetch(
            f"SELECT TOP ({_TOP_AUTHORS}) a.Author AS author, COUNT(*) AS articleCount, "
            "COALESCE(AVG(a.Sentiment), 0) AS averageSentiment, "
            "COALESCE(SUM(a.ViewCount), 0) AS totalViews "
            f"FROM dbo.Articles a {where} GROUP BY a.Author ORDER BY COUNT(*) DESC",
            params,
        )
        breakdown_rows = await self._fetch(
            f"SELECT {_CATEGORY_COLUMNS}, COUNT(*) AS [count] "
            f"FROM dbo.Articles a JOIN dbo.Categories c ON c.Id = a.CategoryId {where} "
            "GROUP BY c.Id, c.Name, c.Slug, c.Description ORDER BY COUNT(*) DESC",
            params,
        )
        category_breakdown = [
            {
                "category": {
                    "id": row["id"],
                    "name": row["name"],
                    "slug": row["slug"],
                    "description": row["description"],
                },
                "count": int(row["count"]),
                "percentage": (int(row["count"]) / total_count * 100) if total_count else 0.0,
            }
            for row in breakdown_rows
        ]

        return {
            "totalCount": total_count,
            "averageWordCount": float(summary.get("averageWordCount") or 0),
            "averageReadingTime": float(summary.get("averageReadingTime") or 0),
            "topAuthors": top_authors,
            "categoryBreakdown": category_breakdown,
            "sentimentDistribution": {
                "positive": int(summary.get("positive") or 0),
                "neutral": int(summary.get("neutral") or 0),
                "negative": int(summary.get("negative") or 0),
                "average": float(summary.get("average") or 0),
            },
        }

    async def trending_articles(self, limit: int) -> list[dict[str, Any]]:
        return await self._fetch(
            f"SELECT TOP (?) {_ARTICLE_COLUMNS} FROM dbo.Articles a "
            "WHERE a.PublishedAt >= DATEADD(day, ?, SYSUTCDATETIME()) "
            "ORDER BY a.ViewCount DESC",
            [limit, -self._trending_window_days],
        )

    async def recommended_articles(self, article_id: str, limit: int) -> list[dict[str, Any]] | None:
        source = await self.get_article(article_id, None)
        if source is None:
            return None
        return await self._fetch(
            f"SELECT TOP (?) {_ARTICLE_COLUMNS} FROM dbo.Articles a "
            "WHERE a.Id <> ? AND (a.CategoryId = ? OR EXISTS ("
            "SELECT 1 FROM dbo.ArticleTags mine JOIN dbo.ArticleTags theirs "
            "ON theirs.TagId = mine.TagId "
            "WHERE mine.ArticleId = ? AND theirs.ArticleId = a.Id)) "
            "ORDER BY a.ViewCount DESC",
            [limit, article_id, source.get("categoryId"), article_id],
        )

    async def list_categories(self) -> list[dict[str, Any]]:
        return await self._fetch(f"SELECT {_CATEGORY_COLUMNS} FROM dbo.Categories c ORDER BY c.Name")

    async def get_category(self, slug: str) -> dict[str, Any] | None:
        rows = await self._fetch(
            f"SELECT TOP 1 {_CATEGORY_COLUMNS} FROM dbo.Categories c WHERE c.Slug = ?", [slug]
        )
        return rows[0] if rows else None

    async def list_tags(self, limit: int) -> list[dict[str, Any]]:
        return await self._fetch(
            "SELECT TOP (?) t.Id AS id, t.Name AS name FROM dbo.Tags t ORDER BY t.Name", [limit]
        )
