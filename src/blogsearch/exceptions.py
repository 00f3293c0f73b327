"""Custom exception hierarchy for blogsearch.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
None of them is meant to reach the reader of the blog: loading degrades
to an empty or reduced index and queries to "no results".
"""

from __future__ import annotations


class BlogSearchError(Exception):
    """Base class for all blogsearch exceptions."""


class ConfigError(BlogSearchError):
    """Raised when configuration loading or validation fails."""


class FetchError(BlogSearchError):
    """Raised when a remote resource cannot be retrieved."""


class ManifestFetchError(FetchError):
    """Raised when the post manifest cannot be fetched or decoded."""


class DocumentFetchError(FetchError):
    """Raised when a single post cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url


class ParsingError(BlogSearchError):
    """Raised when a document fails to parse."""


class DocumentParseError(ParsingError):
    """Raised when a post lacks the structure needed for indexing."""
