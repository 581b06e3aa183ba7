"""MCP server exposing SearXNG search and Firecrawl-backed page scraping as tools."""

__version__ = "1.0.0"
