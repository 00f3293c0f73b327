"""Search controller: owns the published index and answers queries.

The index is loaded once through a connector and published atomically as a
tuple; until then every query sees an empty index. Query handling is
synchronous pure computation over that tuple, recomputed on every call.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from blogsearch.connectors.base_connector import BaseConnector
from blogsearch.parsers.base_parser import IndexedDocument

from .matcher import MIN_QUERY_LENGTH, highlight, is_highlighted, matches
from .snippets import Snippet, extract_snippets


class ControllerState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class DisplayState(enum.Enum):
    ORIGINAL = "original"
    RESULTS = "results"


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A matching post with its highlighted title and snippets."""

    document: IndexedDocument
    highlighted_title: str
    snippets: Tuple[Snippet, ...] = ()

    def snippet_url(self, snippet: Snippet) -> str:
        """Deep link to the section containing `snippet`."""
        if snippet.anchor_id:
            return f"{self.document.url}#{snippet.anchor_id}"
        return self.document.url


@dataclass(frozen=True, slots=True)
class SearchView:
    """What the presentation layer should show for one query."""

    query: str
    results: Tuple[SearchResult, ...] = ()
    show_original: bool = False

    @property
    def display(self) -> DisplayState:
        return DisplayState.ORIGINAL if self.show_original else DisplayState.RESULTS

    def to_payload(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "show_original": self.show_original,
            "results": [
                {
                    "url": r.document.url,
                    "title": r.highlighted_title,
                    "snippets": [
                        {
                            "text": s.highlighted_text,
                            "anchor": s.anchor_id,
                            "url": r.snippet_url(s),
                        }
                        for s in r.snippets
                    ],
                }
                for r in self.results
            ],
        }


def build_result(doc: IndexedDocument, query: str) -> SearchResult:
    return SearchResult(
        document=doc,
        highlighted_title=highlight(doc.title, query),
        snippets=tuple(extract_snippets(doc.text, query, doc.headers)),
    )


@dataclass
class SearchController:
    """Owns the index for a session and turns queries into `SearchView`s."""

    connector: BaseConnector
    state: ControllerState = field(default=ControllerState.IDLE, init=False)
    _index: Tuple[IndexedDocument, ...] = field(default=(), init=False, repr=False)
    _task: Optional[asyncio.Task[None]] = field(default=None, init=False, repr=False)

    @property
    def index(self) -> Tuple[IndexedDocument, ...]:
        return self._index

    def start(self) -> asyncio.Task[None]:
        """Schedule the index load on the running loop. Idempotent."""
        if self._task is None:
            self.state = ControllerState.LOADING
            self._task = asyncio.create_task(self._load())
        return self._task

    async def load(self) -> None:
        """Load and publish the index, reusing an in-flight or finished load."""
        await self.start()

    async def wait_ready(self) -> None:
        await self.load()

    async def _load(self) -> None:
        try:
            docs = await self.connector.fetch_content()
        except Exception:
            # A failed load publishes an empty index
            logger.exception("Loading the search index failed")
            docs = []
        self._index = tuple(docs)
        self.state = ControllerState.READY
        logger.info("Search index ready with {} posts", len(self._index))

    def search(self, query: str) -> SearchView:
        """Answer one input event.

        Queries shorter than two characters ask for the original content.
        Posts that match only through text the snippets could not show (and
        not through the title) are left out.
        """
        if len(query) < MIN_QUERY_LENGTH:
            return SearchView(query=query, show_original=True)

        results: List[SearchResult] = []
        for doc in self._index:
            if not matches(doc, query):
                continue
            result = build_result(doc, query)
            if result.snippets or is_highlighted(result.highlighted_title):
                results.append(result)
        return SearchView(query=query, results=tuple(results))
