"""HTML parser for rendered blog posts.

Extracts the post title, flattens the prose of the content root into a single
whitespace-collapsed string and locates every heading inside that string so
search hits can deep-link to the nearest section.
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag  # type: ignore[import-untyped]
from loguru import logger

from blogsearch.config import LayoutConfig
from blogsearch.exceptions import DocumentParseError

from .base_parser import UNRESOLVED_OFFSET, BaseParser, HeaderRef, IndexedDocument

_WHITESPACE = re.compile(r"\s+")
_HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim. Idempotent."""
    return _WHITESPACE.sub(" ", text).strip()


def text_content(node: Tag) -> str:
    # Plain concatenation of text nodes, like DOM textContent
    return node.get_text()


def locate_headers(root: Tag, text: str) -> Tuple[HeaderRef, ...]:
    """Find each h1-h6 under `root` (document order) within flattened `text`.

    The offset is the first occurrence of the header's normalized text, or
    `UNRESOLVED_OFFSET` when it does not occur at all.
    """
    headers: List[HeaderRef] = []
    for tag in root.find_all(_HEADINGS):
        header_text = normalize_whitespace(text_content(tag))
        offset = text.find(header_text)
        if offset == -1:
            logger.warning("Header not found in flattened text: {!r}", header_text)
            offset = UNRESOLVED_OFFSET
        headers.append(
            HeaderRef(
                id=str(tag.get("id") or ""),
                offset=offset,
                text=header_text,
                level=int(tag.name[1]),
            )
        )
    return tuple(headers)


class PostParser(BaseParser):
    """Parser for posts rendered with a title block, TOC and postamble."""

    def __init__(self, layout: Optional[LayoutConfig] = None) -> None:
        self._layout = layout or LayoutConfig()

    def can_parse(self, path: Path) -> bool:
        return path.suffix.lower() in {".html", ".htm"}

    def prune(self, root: Tag) -> Tag:
        """Return a copy of `root` without its non-prose blocks."""
        pruned = copy.copy(root)
        for selector in self._layout.prune_selectors:
            node = pruned.select_one(selector)
            if node is not None:
                node.decompose()
        return pruned

    def title(self, root: Tag) -> str:
        link = root.select_one(self._layout.title_selector)
        return normalize_whitespace(text_content(link)) if link is not None else ""

    def parse_content(self, content: str, *, url: str) -> IndexedDocument:
        soup = BeautifulSoup(content, "html.parser")
        root = soup.find(id=self._layout.content_id)
        if not isinstance(root, Tag):
            raise DocumentParseError(
                f"{url}: no element with id {self._layout.content_id!r}"
            )

        title = self.title(root)
        pruned = self.prune(root)
        text = normalize_whitespace(text_content(pruned))
        return IndexedDocument(
            url=url,
            title=title,
            text=text,
            headers=locate_headers(pruned, text),
        )
