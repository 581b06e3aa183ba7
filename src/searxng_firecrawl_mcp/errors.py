from __future__ import annotations


class WebToolError(Exception):
    """Base class for failures surfaced to the caller as error envelopes."""


class SearchFailure(WebToolError):
    """SearXNG call failed: network, timeout, non-2xx, or malformed body."""


class ScrapeFailure(WebToolError):
    """The direct fetch failed, after extraction was skipped or fell through."""


class UnknownTool(WebToolError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")
