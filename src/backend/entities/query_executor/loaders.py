"""Per-execution batching loaders.

Every structured-query execution gets its own ``ExecutionContext`` built
by ``create_execution_context()``. Its loaders coalesce every key
requested while one result tree is assembled into a single store call,
and cache the answers for the rest of that execution only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from entities.shared.protocols import NewsStore
from strawberry.dataloader import DataLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionContext:
    """Resolution state owned by exactly one execution.

    Attributes:
        store: Backing store used by root resolvers.
        category_loader: article ``categoryId`` → category row or ``None``.
        tags_loader: article id → list of tag rows (empty when untagged).
        article_count_loader: category id → number of articles (0 when none).
        category_articles_loader: ``(category id, limit, offset)`` → article rows.
        tag_articles_loader: ``(tag id, limit)`` → article rows.
        tag_article_count_loader: tag id → number of articles (0 when none).
        related_articles_loader: ``(article id, limit)`` → related article rows.
    """

    store: NewsStore
    category_loader: DataLoader[str, dict[str, Any] | None]
    tags_loader: DataLoader[str, list[dict[str, Any]]]
    article_count_loader: DataLoader[str, int]
    category_articles_loader: DataLoader[tuple[str, int, int], list[dict[str, Any]]]
    tag_articles_loader: DataLoader[tuple[str, int], list[dict[str, Any]]]
    tag_article_count_loader: DataLoader[str, int]
    related_articles_loader: DataLoader[tuple[str, int], list[dict[str, Any]]]


def group_by_arguments(keys: list[tuple[Any, ...]]) -> dict[tuple[Any, ...], list[str]]:
    """Group ``(id, *arguments)`` keys by their argument values.

    Fields selected with the same arguments on every parent collapse into
    a single group, so one store call serves the whole level.
    """
    groups: dict[tuple[Any, ...], list[str]] = {}
    for key_id, *arguments in keys:
        ids = groups.setdefault(tuple(arguments), [])
        if key_id not in ids:
            ids.append(key_id)
    return groups


def create_execution_context(store: NewsStore) -> ExecutionContext:
    """Build a fresh execution context with empty loader caches.

    Args:
        store: Backing store the loaders batch against.

    Returns:
        A new ``ExecutionContext``; never reuse it for a second query.
    """

    async def load_categories(keys: list[str]) -> list[dict[str, Any] | None]:
        logger.debug("Batch loading %d categories", len(keys))
        rows = await store.categories_by_ids(list(keys))
        by_id = {str(row["id"]): row for row in rows}
        return [by_id.get(key) for key in keys]

    async def load_tags(keys: list[str]) -> list[list[dict[str, Any]]]:
        logger.debug("Batch loading tags for %d articles", len(keys))
        grouped = await store.tags_by_article_ids(list(keys))
        return [list(grouped.get(key, [])) for key in keys]

    async def load_article_counts(keys: list[str]) -> list[int]:
        logger.debug("Batch loading article counts for %d categories", len(keys))
        counts = await store.article_counts_by_category_ids(list(keys))
        return [counts.get(key, 0) for key in keys]

    async def load_category_articles(
        keys: list[tuple[str, int, int]],
    ) -> list[list[dict[str, Any]]]:
        logger.debug("Batch loading articles for %d categories", len(keys))
        results: dict[tuple[str, int, int], list[dict[str, Any]]] = {}
        for (limit, offset), ids in group_by_arguments(keys).items():
            grouped = await store.articles_by_category_ids(ids, limit, offset)
            for key_id in ids:
                results[(key_id, limit, offset)] = list(grouped.get(key_id, []))
        return [results[key] for key in keys]

    async def load_tag_articles(keys: list[tuple[str, int]]) -> list[list[dict[str, Any]]]:
        logger.debug("Batch loading articles for %d tags", len(keys))
        results: dict[tuple[str, int], list[dict[str, Any]]] = {}
        for (limit,), ids in group_by_arguments(keys).items():
            grouped = await store.articles_by_tag_ids(ids, limit)
            for key_id in ids:
                results[(key_id, limit)] = list(grouped.get(key_id, []))
        return [results[key] for key in keys]

    async def load_tag_article_counts(keys: list[str]) -> list[int]:
        logger.debug("Batch loading article counts for %d tags", len(keys))
        counts = await store.article_counts_by_tag_ids(list(keys))
        return [counts.get(key, 0) for key in keys]

    async def load_related_articles(keys: list[tuple[str, int]]) -> list[list[dict[str, Any]]]:
        logger.debug("Batch loading related articles for %d articles", len(keys))
        results: dict[tuple[str, int], list[dict[str, Any]]] = {}
        for (limit,), ids in group_by_arguments(keys).items():
            grouped = await store.related_articles_by_article_ids(ids, limit)
            for key_id in ids:
                results[(key_id, limit)] = list(grouped.get(key_id, []))
        return [results[key] for key in keys]

    return ExecutionContext(
        store=store,
        category_loader=DataLoader(load_fn=load_categories),
        tags_loader=DataLoader(load_fn=load_tags),
        article_count_loader=DataLoader(load_fn=load_article_counts),
        category_articles_loader=DataLoader(load_fn=load_category_articles),
        tag_articles_loader=DataLoader(load_fn=load_tag_articles),
        tag_article_count_loader=DataLoader(load_fn=load_tag_article_counts),
        related_articles_loader=DataLoader(load_fn=load_related_articles),
    )
