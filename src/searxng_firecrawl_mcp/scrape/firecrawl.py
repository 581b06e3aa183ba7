from __future__ import annotations

import httpx
from pydantic import ValidationError

from .attempt import Attempt, describe_error
from ..models import ExtractionResponse
from ..utils.diagnostics import Diagnostics, sample_text

SCRAPE_PATH = "/scrape"
OUTPUT_FORMATS = ("markdown",)


async def extract_markdown(
    client: httpx.AsyncClient,
    url: str,
    *,
    diagnostics: Diagnostics | None = None,
) -> Attempt:
    """
    Ask Firecrawl for the page as Markdown.

    Never raises for upstream trouble: network errors, timeouts, non-2xx
    statuses, unparsable replies and `success: false` all come back as a
    failed `Attempt`.
    """
    if diagnostics:
        diagnostics.emit("scrape.extraction", "Requesting Firecrawl markdown", {"url": url})

    try:
        response = await client.post(
            SCRAPE_PATH,
            json={"url": url, "formats": list(OUTPUT_FORMATS)},
        )
        response.raise_for_status()
        reply = ExtractionResponse.model_validate(response.json())
    except (httpx.HTTPError, httpx.InvalidURL, ValueError, ValidationError) as exc:
        return Attempt.failure(describe_error(exc))

    markdown = reply.markdown
    if reply.success and markdown:
        if diagnostics:
            diagnostics.emit("scrape.extraction_ok", "Firecrawl returned markdown", sample_text(markdown))
        return Attempt.success(markdown)
    return Attempt.failure(reply.error or "Firecrawl scrape failed")
