from __future__ import annotations

import logging

import httpx

from ..clients import ExtractionBackend, ExtractionDisabled, ExtractionEnabled
from ..errors import ScrapeFailure
from ..models import ScrapeRequest
from ..scrape.attempt import Attempt
from ..scrape.direct import fetch_direct
from ..scrape.firecrawl import extract_markdown
from ..utils.diagnostics import Diagnostics

logger = logging.getLogger(__name__)


class ContentRetriever:
    """Resolve a URL to text.

    Stage 1: Firecrawl markdown extraction (only when configured).
    Stage 2: direct HTTP GET of the URL, raw body.

    A failed stage 1 is logged and falls through to stage 2. A failed stage 2
    raises `ScrapeFailure`.
    """

    def __init__(
        self,
        extraction: ExtractionBackend,
        *,
        fallback_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._extraction = extraction
        self._fallback_client = fallback_client

    async def _extraction_attempt(
        self, url: str, diagnostics: Diagnostics | None
    ) -> Attempt | None:
        backend = self._extraction
        if isinstance(backend, ExtractionEnabled):
            return await extract_markdown(backend.client, url, diagnostics=diagnostics)
        if isinstance(backend, ExtractionDisabled):
            if diagnostics:
                diagnostics.emit("scrape.route", "Firecrawl not configured", {"handler": "direct"})
            return None
        raise TypeError(f"Unsupported extraction backend: {backend!r}")

    async def retrieve(
        self,
        request: ScrapeRequest,
        *,
        diagnostics: Diagnostics | None = None,
    ) -> str:
        url = request.url

        extracted = await self._extraction_attempt(url, diagnostics)
        if extracted is not None:
            if extracted.ok:
                return extracted.content
            logger.warning("Firecrawl failed, falling back to basic scrape: %s", extracted.error)
            if diagnostics:
                diagnostics.emit(
                    "scrape.route",
                    "Firecrawl failed; falling back to direct fetch",
                    {"handler": "direct", "detail": extracted.error},
                )

        fetched = await fetch_direct(
            url, http_client=self._fallback_client, diagnostics=diagnostics
        )
        if fetched.ok:
            return fetched.content
        raise ScrapeFailure(f"Failed to scrape URL: {fetched.error}")
