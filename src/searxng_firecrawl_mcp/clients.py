from __future__ import annotations

from dataclasses import dataclass

import httpx

from .config import ServerConfig

SEARXNG_USER_AGENT = "SearXNG-MCP-Server/1.0"
UPSTREAM_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ExtractionEnabled:
    client: httpx.AsyncClient


@dataclass(frozen=True)
class ExtractionDisabled:
    pass


# Callers must handle both variants; "disabled" is a normal state, not an error.
ExtractionBackend = ExtractionEnabled | ExtractionDisabled


@dataclass(frozen=True)
class UpstreamClients:
    search: httpx.AsyncClient
    extraction: ExtractionBackend

    async def aclose(self) -> None:
        await self.search.aclose()
        if isinstance(self.extraction, ExtractionEnabled):
            await self.extraction.client.aclose()


def _bearer(headers: dict[str, str], key: str | None) -> dict[str, str]:
    if key:
        headers["Authorization"] = f"Bearer {key}"
    return headers


def build_search_client(
    config: ServerConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    headers = _bearer({"User-Agent": SEARXNG_USER_AGENT}, config.searxng_key)
    return httpx.AsyncClient(
        base_url=config.searxng_url,
        headers=headers,
        timeout=UPSTREAM_TIMEOUT_SECONDS,
        transport=transport,
    )


def build_extraction_backend(
    config: ServerConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExtractionBackend:
    if not config.firecrawl_url:
        return ExtractionDisabled()
    headers = _bearer({"Content-Type": "application/json"}, config.firecrawl_key)
    client = httpx.AsyncClient(
        base_url=config.firecrawl_url,
        headers=headers,
        timeout=UPSTREAM_TIMEOUT_SECONDS,
        transport=transport,
    )
    return ExtractionEnabled(client=client)


def build_clients(
    config: ServerConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> UpstreamClients:
    """
    Build the two long-lived upstream handles.

    Headers and timeouts are fixed here and never mutated afterwards, so the
    handles are safe to share across overlapping tool calls.
    """
    return UpstreamClients(
        search=build_search_client(config, transport=transport),
        extraction=build_extraction_backend(config, transport=transport),
    )
