from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

import httpx

from .content.retriever import ContentRetriever
from .errors import UnknownTool
from .models import ScrapeRequest, SearchRequest, ToolResponse
from .search.searxng import search_searxng
from .utils.diagnostics import Diagnostics

logger = logging.getLogger(__name__)

SEARCH_TOOL = "search"
SCRAPE_TOOL = "scrape"


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class ToolDescriptor:
    """Catalog entry; `input_schema` is stored read-only, nested levels included."""

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_schema", _freeze(self.input_schema))

    def schema_dict(self) -> dict[str, Any]:
        """A fresh, JSON-ready copy of the input schema."""
        return _thaw(self.input_schema)


SEARCH_DESCRIPTOR = ToolDescriptor(
    name=SEARCH_TOOL,
    description=(
        "Search the web using SearXNG. Returns a list of search results with titles, "
        "URLs, and snippets."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "The search query",
            },
            "categories": {
                "type": "string",
                "description": "Comma-separated list of categories (e.g., 'general,news,science')",
            },
            "engines": {
                "type": "string",
                "description": "Comma-separated list of search engines to use (e.g., 'google,duckduckgo')",
            },
            "language": {
                "type": "string",
                "description": "Language code (e.g., 'en', 'fr', 'de')",
            },
            "pageno": {
                "type": "number",
                "description": "Page number for pagination (default: 1)",
            },
            "time_range": {
                "type": "string",
                "enum": ["day", "month", "year"],
                "description": "Filter results by time range",
            },
            "safesearch": {
                "type": "number",
                "enum": [0, 1, 2],
                "description": "Safe search level: 0 = None, 1 = Moderate, 2 = Strict",
            },
        },
        "required": ["query"],
    },
)

SCRAPE_DESCRIPTOR = ToolDescriptor(
    name=SCRAPE_TOOL,
    description=(
        "Scrape content from a URL. Uses Firecrawl if configured, otherwise falls back "
        "to basic HTTP fetch."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "description": "The URL to scrape",
            },
        },
        "required": ["url"],
    },
)

TOOL_CATALOG: tuple[ToolDescriptor, ...] = (SEARCH_DESCRIPTOR, SCRAPE_DESCRIPTOR)


class ToolDispatcher:
    """
    Route tool calls to the search invoker or the content retriever.

    `invoke` never raises: every failure becomes an error-flagged
    `ToolResponse` whose text is `"Error: <message>"`.
    """

    def __init__(
        self,
        search_client: httpx.AsyncClient,
        retriever: ContentRetriever,
        *,
        diagnostics_enabled: bool = False,
    ) -> None:
        self._search_client = search_client
        self._retriever = retriever
        self._diagnostics_enabled = diagnostics_enabled

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        return TOOL_CATALOG

    async def _search(self, arguments: Mapping[str, Any], diagnostics: Diagnostics) -> str:
        request = SearchRequest.model_validate(dict(arguments))
        result = await search_searxng(self._search_client, request, diagnostics=diagnostics)
        return json.dumps(result, indent=2, ensure_ascii=False)

    async def _scrape(self, arguments: Mapping[str, Any], diagnostics: Diagnostics) -> str:
        request = ScrapeRequest.model_validate(dict(arguments))
        return await self._retriever.retrieve(request, diagnostics=diagnostics)

    async def invoke(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        diagnostics = Diagnostics(tool=name, enabled=self._diagnostics_enabled)
        diagnostics.emit("tool.invoke", "Tool call received", {"arguments": arguments or {}})
        try:
            if name == SEARCH_TOOL:
                text = await self._search(arguments or {}, diagnostics)
            elif name == SCRAPE_TOOL:
                text = await self._scrape(arguments or {}, diagnostics)
            else:
                raise UnknownTool(name)
        except Exception as e:
            logger.info("Tool %s failed: %s", name, e)
            diagnostics.emit("tool.error", "Tool call failed", {"error": type(e).__name__})
            return ToolResponse.from_error(str(e))

        diagnostics.emit("tool.done", "Tool call succeeded", {"text_len": len(text)})
        return ToolResponse.from_text(text)
