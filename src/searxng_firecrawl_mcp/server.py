from __future__ import annotations

import logging
import sys

import anyio
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .clients import build_clients
from .config import ServerConfig
from .content.retriever import ContentRetriever
from .tools import ToolDispatcher

SERVER_NAME = "searxng-firecrawl-mcp"

logger = logging.getLogger(__name__)


def build_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=descriptor.name,
                description=descriptor.description,
                inputSchema=descriptor.schema_dict(),
            )
            for descriptor in dispatcher.list_tools()
        ]

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        response = await dispatcher.invoke(request.params.name, request.params.arguments)
        return types.ServerResult(response.to_call_tool_result())

    # Registered directly: the dispatcher already builds the full envelope,
    # including the error flag, so the SDK must not validate or re-wrap it.
    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(config: ServerConfig) -> None:
    clients = build_clients(config)
    try:
        dispatcher = ToolDispatcher(
            clients.search,
            ContentRetriever(clients.extraction),
            diagnostics_enabled=config.diagnostics,
        )
        server = build_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await clients.aclose()


def configure_logging(level: str) -> None:
    # stdout carries the MCP stream; everything human-readable goes to stderr.
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def log_startup(config: ServerConfig) -> None:
    logger.info("SearXNG + Firecrawl MCP Server")
    logger.info("SearXNG URL: %s", config.searxng_url)
    logger.info(
        "Firecrawl: %s",
        "Enabled" if config.extraction_enabled else "Disabled (using fallback)",
    )
    logger.debug("Configuration: %s", config.masked())


def main() -> None:
    config = ServerConfig.from_env()
    configure_logging(config.log_level)
    log_startup(config)
    try:
        anyio.run(serve, config)
    except KeyboardInterrupt:
        return
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)
