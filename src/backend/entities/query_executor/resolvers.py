"""Field resolvers binding the schema grammar to the news store.

Root fields read ``info.context.store``; relational fields go through the
per-execution loaders on ``info.context``. Arguments arrive under their
schema names (``articleId``, ``filter`` ...), with grammar defaults
already applied by the engine.
"""

from __future__ import annotations

from typing import Any, Callable

from graphql import GraphQLError, GraphQLResolveInfo

Resolver = Callable[..., Any]


# -- Query ---------------------------------------------------------------------


async def resolve_article(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    article_id = kwargs.get("id")
    slug = kwargs.get("slug")
    if not article_id and not slug:
        raise GraphQLError("Either id or slug must be provided")
    return await info.context.store.get_article(article_id, slug)


async def resolve_articles(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.store.list_articles(
        kwargs.get("filter"),
        kwargs.get("sort"),
        kwargs["limit"],
        kwargs["offset"],
    )


async def resolve_search_articles(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.store.search_articles(
        kwargs["query"], kwargs.get("filter"), kwargs["limit"]
    )


async def resolve_article_stats(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.store.article_stats(kwargs.get("filter"))


async def resolve_trending_articles(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.store.trending_articles(kwargs["limit"])


async def resolve_recommended_articles(
    _root: Any, info: GraphQLResolveInfo, **kwargs: Any
) -> Any:
    articles = await info.context.store.recommended_articles(kwargs["articleId"], kwargs["limit"])
    if articles is None:
        raise GraphQLError("Article not found")
    return articles


async def resolve_categories(_root: Any, info: GraphQLResolveInfo, **_kwargs: Any) -> Any:
    return await info.context.store.list_categories()


async def resolve_category(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.store.get_category(kwargs["slug"])


async def resolve_tags(_root: Any, info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.store.list_tags(kwargs["limit"])


# -- Relations -----------------------------------------------------------------


async def resolve_article_category(article: dict[str, Any], info: GraphQLResolveInfo) -> Any:
    category_id = article.get("categoryId")
    if category_id is None:
        return None
    return await info.context.category_loader.load(str(category_id))


async def resolve_article_tags(article: dict[str, Any], info: GraphQLResolveInfo) -> Any:
    return await info.context.tags_loader.load(str(article["id"]))


async def resolve_category_article_count(
    category: dict[str, Any], info: GraphQLResolveInfo
) -> Any:
    if category.get("articleCount") is not None:
        return category["articleCount"]
    return await info.context.article_count_loader.load(str(category["id"]))


async def resolve_category_articles(
    category: dict[str, Any], info: GraphQLResolveInfo, **kwargs: Any
) -> Any:
    return await info.context.category_articles_loader.load(
        (str(category["id"]), kwargs["limit"], kwargs["offset"])
    )


async def resolve_tag_articles(tag: dict[str, Any], info: GraphQLResolveInfo, **kwargs: Any) -> Any:
    return await info.context.tag_articles_loader.load((str(tag["id"]), kwargs["limit"]))


async def resolve_tag_article_count(tag: dict[str, Any], info: GraphQLResolveInfo) -> Any:
    if tag.get("articleCount") is not None:
        return tag["articleCount"]
    return await info.context.tag_article_count_loader.load(str(tag["id"]))


async def resolve_related_articles(
    article: dict[str, Any], info: GraphQLResolveInfo, **kwargs: Any
) -> Any:
    return await info.context.related_articles_loader.load((str(article["id"]), kwargs["limit"]))


RESOLVERS: dict[tuple[str, str], Resolver] = {
    ("Query", "article"): resolve_article,
    ("Query", "articles"): resolve_articles,
    ("Query", "searchArticles"): resolve_search_articles,
    ("Query", "articleStats"): resolve_article_stats,
    ("Query", "trendingArticles"): resolve_trending_articles,
    ("Query", "recommendedArticles"): resolve_recommended_articles,
    ("Query", "categories"): resolve_categories,
    ("Query", "category"): resolve_category,
    ("Query", "tags"): resolve_tags,
    ("Article", "category"): resolve_article_category,
    ("Article", "tags"): resolve_article_tags,
    ("Article", "relatedArticles"): resolve_related_articles,
    ("Category", "articleCount"): resolve_category_article_count,
    ("Category", "articles"): resolve_category_articles,
    ("Tag", "articles"): resolve_tag_articles,
    ("Tag", "articleCount"): resolve_tag_article_count,
}
