"""
Tool invocation models.

Inputs accepted by the assistant-facing tools. Unknown keys are rejected
so that malformed tool calls fail loudly instead of being ignored.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field


class NaturalLanguageToolInput(BaseModel):
    """Input of ``query_news_articles``."""

    model_config = ConfigDict(extra="forbid")

    query: str = Field(min_length=1, description="Natural language query about news articles")


class DateRange(BaseModel):
    """Inclusive publication date range (ISO dates)."""

    model_config = ConfigDict(extra="forbid")

    start: str | None = None
    end: str | None = None


class StatsFilterInput(BaseModel):
    """Optional filters for ``get_article_stats``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    category: str | None = Field(default=None, description="Category identifier")
    author: str | None = None
    date_range: DateRange | None = Field(default=None, alias="dateRange")

    def to_article_filter(self) -> dict[str, Any]:
        """Map to the schema's ``ArticleFilter`` input, omitting unset keys."""
        article_filter: dict[str, Any] = {}
        if self.category:
            article_filter["categoryId"] = self.category
        if self.author:
            article_filter["author"] = self.author
        if self.date_range:
            if self.date_range.start:
                article_filter["publishedAfter"] = self.date_range.start
            if self.date_range.end:
                article_filter["publishedBefore"] = self.date_range.end
        return article_filter


class ArticleStatsToolInput(BaseModel):
    """Input of ``get_article_stats``."""

    model_config = ConfigDict(extra="forbid")

    filter: StatsFilterInput | None = None


ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDefinition:
    """A tool exposed to an external assistant.

    Attributes:
        name: Unique tool name.
        description: What the tool does, for the assistant.
        parameters: JSON-Schema object describing the tool input.
        handler: Coroutine function receiving the raw parameter object.
    """

    name: str
    description: str
    parameters: dict[str, Any]
    handler: ToolHandler

    def describe(self) -> dict[str, Any]:
        """Return the tool descriptor without its handler."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }


class ToolCallRequest(BaseModel):
    """Body of a tool execution request."""

    model_config = ConfigDict(extra="forbid")

    tool: str = Field(min_length=1, description="Name of the tool to invoke")
    input: dict[str, Any] = Field(default_factory=dict, description="Tool parameters")


class ToolCallResponse(BaseModel):
    """Echo of a tool execution request with its result."""

    tool: str
    input: dict[str, Any]
    result: Any = None
