"""blogsearch MCP server entrypoint using FastMCP.

Exposes full-text search over a static blog's posts.
Run with:
  - poetry run blogsearch-mcp
  - or: python -m blogsearch.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

from typing import Optional

from fastmcp import FastMCP
from loguru import logger

from blogsearch.config import Settings, load_settings
from blogsearch.connectors.manifest import ManifestConnector
from blogsearch.log import configure_logging
from blogsearch.mcp.tools import register_search_tools
from blogsearch.parsers.html_parser import PostParser
from blogsearch.search.controller import SearchController


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.controller: Optional[SearchController] = None

    def init_controller(self) -> None:
        """Build the connector and controller from configuration."""
        site = self.settings.site
        connector = ManifestConnector(
            site.manifest_url,
            base_url=site.base_url,
            parser=PostParser(self.settings.layout),
            timeout=site.timeout,
            concurrency=site.concurrency,
            user_agent=site.user_agent,
        )
        self.controller = SearchController(connector)


def create_server(state: AppState) -> FastMCP:
    mcp = FastMCP(f"{state.settings.app.name} MCP Server")
    register_search_tools(mcp, get_state=lambda: state)
    return mcp


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    settings = load_settings()
    configure_logging(settings.app.log_level)
    state = AppState(settings)
    state.init_controller()
    mcp = create_server(state)
    logger.info("Serving search over {}", settings.site.manifest_url)
    # The index loads on the server's loop with the first query
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
