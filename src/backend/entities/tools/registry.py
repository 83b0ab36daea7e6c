"""Assistant-facing tools over the query pipeline.

``query_news_articles`` answers a natural-language request exactly like
the HTTP entry point; ``get_article_stats`` runs a fixed statistics query
with optional filters.
"""

from __future__ import annotations

import logging
from typing import Any

from entities.nl_query import PipelineClients, process_query
from models import (
    ArticleStatsToolInput,
    NaturalLanguageToolInput,
    QueryExecutionError,
    ResultEnvelope,
    ToolDefinition,
    ToolNotFoundError,
)

logger = logging.getLogger(__name__)

ARTICLE_STATS_QUERY = """query GetStats($filter: ArticleFilter) {
  articleStats(filter: $filter) {
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


class ToolRegistry:
    """Tools keyed by their unique name."""

    def __init__(self, tools: list[ToolDefinition]) -> None:
        self._tools = {tool.name: tool for tool in tools}

    def list_tools(self) -> list[dict[str, Any]]:
        """Describe every registered tool (handlers omitted)."""
        return [tool.describe() for tool in self._tools.values()]

    def get(self, name: str) -> ToolDefinition:
        """Return the named tool.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    async def call_tool(self, name: str, params: dict[str, Any] | None = None) -> Any:
        """Invoke a tool by name.

        Args:
            name: Tool name.
            params: Raw parameter object; validated by the tool's handler.

        Returns:
            Whatever the tool's handler returns.

        Raises:
            ToolNotFoundError: If no tool has that name.
            pydantic.ValidationError: If the parameters are malformed.
        """
        tool = self.get(name)
        logger.info("Calling tool %s", name)
        return await tool.handler(params or {})


def create_tool_registry(clients: PipelineClients) -> ToolRegistry:
    """Build the registry of assistant-facing tools.

    Args:
        clients: Pipeline dependencies shared with the HTTP entry point.

    Returns:
        A ``ToolRegistry`` with ``query_news_articles`` and ``get_article_stats``.
    """

    async def query_news_articles(params: dict[str, Any]) -> ResultEnvelope:
        tool_input = NaturalLanguageToolInput.model_validate(params)
        return await process_query(tool_input.query, clients)

    async def get_article_stats(params: dict[str, Any]) -> dict[str, Any] | None:
        tool_input = ArticleStatsToolInput.model_validate(params)
        variables = None
        if tool_input.filter is not None:
            variables = {"filter": tool_input.filter.to_article_filter()}

        result = await clients.executor.execute(ARTICLE_STATS_QUERY, variables)
        if not result.ok:
            raise QueryExecutionError(result.errors[0])
        return result.data

    return ToolRegistry(
        [
            ToolDefinition(
                name="query_news_articles",
                description="Search and analyze news articles using natural language queries",
                parameters=NaturalLanguageToolInput.model_json_schema(),
                handler=query_news_articles,
            ),
            ToolDefinition(
                name="get_article_stats",
                description="Get statistical analysis of articles",
                parameters=ArticleStatsToolInput.model_json_schema(),
                handler=get_article_stats,
            ),
        ]
    )
