from __future__ import annotations

from .searxng import build_search_params, search_searxng

__all__ = ["build_search_params", "search_searxng"]
