"""Abstract base classes and data structures for post parsers.

Parsers turn a rendered blog post into an `IndexedDocument`: flattened,
whitespace-collapsed body text plus the headers found in it, each with its
character offset into that text.

Concrete implementations should subclass `BaseParser` and implement
`can_parse()` and `parse_content()`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

# Offset of a header whose text could not be found in the flattened text
UNRESOLVED_OFFSET = -1


@dataclass(frozen=True, slots=True)
class HeaderRef:
    """A section header located inside a document's flattened text.

    Attributes
    ----------
    id: str
        Anchor identifier; empty for headers without one (usually the h1).
    offset: int
        Character index into the owning document's text, or
        `UNRESOLVED_OFFSET` when the header text was not found.
    text: str
        The header's whitespace-normalized text.
    level: int
        Heading level, 1 for h1 through 6 for h6.
    """

    id: str
    offset: int
    text: str
    level: int = 1

    @property
    def resolved(self) -> bool:
        return self.offset >= 0


@dataclass(frozen=True, slots=True)
class IndexedDocument:
    """A post ready for searching. Immutable once built."""

    url: str
    title: str
    text: str
    headers: Tuple[HeaderRef, ...] = ()


class BaseParser(ABC):
    """Abstract parser interface."""

    @abstractmethod
    def can_parse(self, path: Path) -> bool:
        """Return True if this parser can handle the given file/path."""

    @abstractmethod
    def parse_content(self, content: str, *, url: str) -> IndexedDocument:
        """Parse raw markup fetched from `url` into an `IndexedDocument`.

        Implementations should raise `blogsearch.exceptions.DocumentParseError`
        on failure.
        """
        raise NotImplementedError

    def parse(self, path: Path) -> IndexedDocument:
        """Parse a file from disk, using its path as the document URL."""
        return self.parse_content(path.read_text(encoding="utf-8"), url=path.as_posix())
