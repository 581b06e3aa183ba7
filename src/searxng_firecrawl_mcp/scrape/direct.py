from __future__ import annotations

import httpx

from .attempt import Attempt, describe_error
from ..utils.diagnostics import Diagnostics, sample_text

FALLBACK_USER_AGENT = "Mozilla/5.0 (compatible; MCP-Server/1.0)"
FALLBACK_TIMEOUT_SECONDS = 15.0


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    response = await client.get(
        url,
        headers={"User-Agent": FALLBACK_USER_AGENT},
        timeout=FALLBACK_TIMEOUT_SECONDS,
        follow_redirects=True,
    )
    response.raise_for_status()
    return response


async def fetch_direct(
    url: str,
    *,
    http_client: httpx.AsyncClient | None = None,
    diagnostics: Diagnostics | None = None,
) -> Attempt:
    """
    Plain unauthenticated GET of `url`; the body is returned as decoded by httpx.

    No HTML-to-text conversion happens here.
    """
    if diagnostics:
        diagnostics.emit("scrape.fallback", "Fetching URL directly", {"url": url})

    try:
        if http_client is not None:
            response = await _get(http_client, url)
        else:
            async with httpx.AsyncClient() as client:
                response = await _get(client, url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        if diagnostics:
            diagnostics.emit(
                "scrape.fallback_error",
                "Direct fetch failed",
                {"error": type(exc).__name__},
            )
        return Attempt.failure(describe_error(exc))

    body = response.text
    if diagnostics:
        diagnostics.emit("scrape.fallback_ok", "Direct fetch succeeded", sample_text(body))
    return Attempt.success(body)
