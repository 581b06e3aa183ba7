from __future__ import annotations

from typing import Any

import httpx

from ..errors import SearchFailure
from ..models import SearchRequest, SearchResult
from ..utils.diagnostics import Diagnostics

SEARCH_PATH = "/search"
RESPONSE_FORMAT = "json"

_OPTIONAL_PARAMS = ("categories", "engines", "language", "pageno", "time_range")


def build_search_params(request: SearchRequest) -> dict[str, Any]:
    """
    Map a request onto SearXNG query parameters.

    Absent fields are omitted rather than sent empty. `safesearch=0` is a real
    level and is kept.
    """
    params: dict[str, Any] = {"q": request.query, "format": RESPONSE_FORMAT}
    for name in _OPTIONAL_PARAMS:
        value = getattr(request, name)
        if value:
            params[name] = value
    if request.safesearch is not None:
        params["safesearch"] = request.safesearch
    return params


def _upstream_error_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("error")
        if message:
            return str(message)
    return None


def _describe(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        upstream = _upstream_error_message(exc.response)
        if upstream:
            return upstream
    return str(exc).strip() or type(exc).__name__


async def search_searxng(
    client: httpx.AsyncClient,
    request: SearchRequest,
    *,
    diagnostics: Diagnostics | None = None,
) -> SearchResult:
    """Run one SearXNG query and return its JSON body untouched."""
    params = build_search_params(request)
    if diagnostics:
        diagnostics.emit("search.request", "Querying SearXNG", {"params": params})

    try:
        response = await client.get(SEARCH_PATH, params=params)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        detail = _describe(exc)
        if diagnostics:
            diagnostics.emit(
                "search.error",
                "SearXNG search failed",
                {"error": type(exc).__name__, "detail": detail},
            )
        raise SearchFailure(f"SearXNG search failed: {detail}") from exc

    if diagnostics:
        diagnostics.emit(
            "search.response",
            "SearXNG responded",
            {
                "status": response.status_code,
                "result_count": len(data.get("results") or []) if isinstance(data, dict) else None,
            },
        )
    return data
