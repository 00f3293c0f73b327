"""Literal, case-insensitive query matching and highlighting.

Queries are always escaped: this is substring search, never pattern search.
"""

from __future__ import annotations

import re

from blogsearch.parsers.base_parser import IndexedDocument

MIN_QUERY_LENGTH = 2
MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"


def compile_query(query: str) -> re.Pattern[str]:
    """Compile `query` into a case-insensitive literal-substring pattern."""
    return re.compile(re.escape(query), re.IGNORECASE)


def contains_query(text: str, query: str) -> bool:
    return compile_query(query).search(text) is not None


def matches(doc: IndexedDocument, query: str) -> bool:
    """Return True if the title or the body of `doc` contains `query`."""
    if len(query) < MIN_QUERY_LENGTH:
        return False
    return contains_query(doc.title, query) or contains_query(doc.text, query)


def highlight(text: str, query: str) -> str:
    """Wrap every occurrence of `query` in `text` with a <mark> tag."""
    if not query:
        return text
    return compile_query(query).sub(lambda m: f"{MARK_OPEN}{m.group(0)}{MARK_CLOSE}", text)


def is_highlighted(text: str) -> bool:
    return MARK_OPEN in text
