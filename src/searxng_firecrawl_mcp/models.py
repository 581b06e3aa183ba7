from __future__ import annotations

from typing import Any, Literal, TypedDict

from mcp import types
from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    query: str = Field(min_length=1, description="The search query.")
    categories: str | None = Field(
        default=None, description="Comma-separated categories, e.g. 'general,news'."
    )
    engines: str | None = Field(
        default=None, description="Comma-separated engine names, e.g. 'google,duckduckgo'."
    )
    language: str | None = Field(default=None, description="Locale code, e.g. 'en'.")
    pageno: int | None = Field(default=None, ge=1, description="Result page; upstream default is 1.")
    time_range: Literal["day", "month", "year"] | None = None
    safesearch: Literal[0, 1, 2] | None = None


class SearchResultItem(TypedDict, total=False):
    title: str
    url: str
    content: str
    engine: str
    score: float
    category: str
    publishedDate: str


class SearchResult(TypedDict, total=False):
    """SearXNG `format=json` body; passed through exactly as received."""

    query: str
    number_of_results: int
    results: list[SearchResultItem]
    answers: list[Any]
    corrections: list[Any]
    infoboxes: list[Any]
    suggestions: list[Any]


class ScrapeRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    # Syntax is left to httpx, which rejects malformed URLs at request time.
    url: str = Field(description="Absolute URL to retrieve.")


class ExtractionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    markdown: str | None = None
    html: str | None = None
    metadata: dict[str, Any] | None = None


class ExtractionResponse(BaseModel):
    """Firecrawl `/scrape` reply."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    data: ExtractionData | None = None
    error: str | None = None

    @property
    def markdown(self) -> str | None:
        if self.data is None:
            return None
        return self.data.markdown


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    content: list[TextBlock]
    is_error: bool = False

    @classmethod
    def from_text(cls, text: str) -> ToolResponse:
        return cls(content=[TextBlock(text=text)])

    @classmethod
    def from_error(cls, message: str) -> ToolResponse:
        return cls(content=[TextBlock(text=f"Error: {message}")], is_error=True)

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content)

    def to_call_tool_result(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=block.text) for block in self.content],
            isError=self.is_error,
        )
