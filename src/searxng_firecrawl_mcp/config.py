from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .utils.diagnostics import diagnostics_enabled, mask_secrets

DEFAULT_SEARXNG_URL = "http://localhost:8888"
DEFAULT_LOG_LEVEL = "INFO"


def _read(source: Mapping[str, str], key: str) -> str | None:
    value = (source.get(key) or "").strip()
    return value or None


@dataclass(frozen=True)
class ServerConfig:
    """
    Process-wide settings, read once at startup.

    `firecrawl_url` doubles as the on/off switch for the extraction backend.
    """

    searxng_url: str = DEFAULT_SEARXNG_URL
    searxng_key: str | None = None
    firecrawl_url: str | None = None
    firecrawl_key: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    diagnostics: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ServerConfig:
        source = env if env is not None else os.environ
        return cls(
            searxng_url=_read(source, "SEARXNG_URL") or DEFAULT_SEARXNG_URL,
            searxng_key=_read(source, "SEARXNG_KEY"),
            firecrawl_url=_read(source, "FIRECRAWL_URL"),
            firecrawl_key=_read(source, "FIRECRAWL_KEY"),
            log_level=(_read(source, "LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
            diagnostics=diagnostics_enabled(source),
        )

    @property
    def extraction_enabled(self) -> bool:
        return self.firecrawl_url is not None

    def masked(self) -> dict[str, str]:
        """Environment-style snapshot that is safe to log."""
        return mask_secrets(
            {
                "SEARXNG_URL": self.searxng_url,
                "SEARXNG_KEY": self.searxng_key,
                "FIRECRAWL_URL": self.firecrawl_url,
                "FIRECRAWL_KEY": self.firecrawl_key,
                "LOG_LEVEL": self.log_level,
            }
        )
