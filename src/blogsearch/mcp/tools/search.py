"""Blog search tools for FastMCP.

The tools are the presentation boundary: they hand the host the structured
`SearchView` payload and leave rendering to it.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from fastmcp import FastMCP

from blogsearch.search.controller import SearchController


def register_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register blog search tools on the given FastMCP instance.

    Reads the session's controller from state.controller.
    """

    def _controller() -> SearchController:
        controller = getattr(get_state(), "controller", None)
        if controller is None:
            raise RuntimeError("Search is not initialized.")
        return controller

    @mcp.tool
    async def search(query: str, wait_for_index: bool = True) -> Dict[str, Any]:
        """Search all blog posts for `query`.

        Parameters
        ----------
        query: str
            Literal, case-insensitive text to look for. Shorter than two
            characters returns `show_original: true` and no results.
        wait_for_index: bool
            If True, wait for the initial index load before answering.
            Otherwise a query arriving before the load finishes sees no posts.
        """
        controller = _controller()
        if wait_for_index:
            await controller.wait_ready()
        else:
            controller.start()
        return controller.search(query).to_payload()

    @mcp.tool
    async def list_documents() -> List[Dict[str, Any]]:
        """List indexed posts with their section headers."""
        controller = _controller()
        await controller.wait_ready()
        return [
            {
                "url": doc.url,
                "title": doc.title,
                "headers": [
                    {"id": h.id, "text": h.text, "level": h.level, "resolved": h.resolved}
                    for h in doc.headers
                ],
            }
            for doc in controller.index
        ]

    @mcp.tool
    def health() -> str:
        """Simple health check tool."""
        return "ok"
