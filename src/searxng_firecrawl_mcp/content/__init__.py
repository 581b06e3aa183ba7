from __future__ import annotations

from .retriever import ContentRetriever

__all__ = ["ContentRetriever"]
