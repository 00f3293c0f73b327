"""Context snippet extraction around query matches.

Each match becomes a short, word-aligned window of the flattened post text,
sanitized and highlighted, linked to the nearest preceding header. The scan
resumes at the end of each emitted window, so snippets never overlap.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from blogsearch.parsers.base_parser import HeaderRef
from blogsearch.parsers.html_parser import normalize_whitespace

from .matcher import compile_query, highlight, is_highlighted

CONTEXT_SIZE = 30
ELLIPSIS = "…"

# Angle brackets and markdown emphasis markers leaking from code blocks
_UNSAFE_CHARS = re.compile(r"[<>*_~`]")


@dataclass(frozen=True, slots=True)
class Snippet:
    """A highlighted excerpt of a post.

    `offset` is the index of the match in the source text; `anchor_id` is the
    id of the nearest preceding header, or "" when no header precedes it.
    """

    highlighted_text: str
    anchor_id: str
    offset: int


def sanitize(snippet: str) -> str:
    """Strip markup-like characters and re-normalize whitespace."""
    return normalize_whitespace(_UNSAFE_CHARS.sub("", snippet))


def nearest_header(offset: int, headers: Sequence[HeaderRef]) -> Optional[HeaderRef]:
    """Return the resolved header with the largest offset not after `offset`.

    On equal offsets the first header in document order wins.
    """
    nearest: Optional[HeaderRef] = None
    for header in headers:
        if not header.resolved or header.offset > offset:
            continue
        if nearest is None or header.offset > nearest.offset:
            nearest = header
    return nearest


def _word_aligned_window(text: str, index: int, length: int) -> tuple[int, int]:
    start = max(0, index - CONTEXT_SIZE)
    end = min(len(text), index + length + CONTEXT_SIZE)
    while start > 0 and not text[start].isspace():
        start -= 1
    while end < len(text) and not text[end].isspace():
        end += 1
    return start, end


def extract_snippets(text: str, query: str, headers: Sequence[HeaderRef]) -> List[Snippet]:
    """Return the non-overlapping snippets of `text` around `query`, left to right."""
    if not query:
        return []

    pattern = compile_query(query)
    snippets: List[Snippet] = []
    pos = 0
    while True:
        match = pattern.search(text, pos)
        if match is None:
            break
        index = match.start()
        start, end = _word_aligned_window(text, index, len(query))

        body = highlight(sanitize(normalize_whitespace(text[start:end])), query)
        if is_highlighted(body):
            header = nearest_header(index, headers)
            prefix = ELLIPSIS if start > 0 else ""
            suffix = ELLIPSIS if end < len(text) else ""
            snippets.append(
                Snippet(
                    highlighted_text=f"{prefix}{body}{suffix}",
                    anchor_id=header.id if header is not None else "",
                    offset=index,
                )
            )

        pos = end
    return snippets
