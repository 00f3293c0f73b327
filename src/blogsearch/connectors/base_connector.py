"""Base interfaces for content connectors.

A connector knows where posts live and how to turn them into indexed
documents. Connectors run once per session; there is no sync workflow.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from blogsearch.parsers.base_parser import IndexedDocument


class BaseConnector(ABC):
    """Abstract connector interface.

    Implementations should be safe to construct without side effects and should
    not perform network calls until methods are invoked.
    """

    @abstractmethod
    async def fetch_content(self) -> List[IndexedDocument]:
        """Fetch and return the indexed documents of the source."""
        raise NotImplementedError
