"""Manifest-driven connector: fetch the post list, then every post.

The manifest is a JSON array of post URLs. Posts are fetched and parsed
concurrently; a post that fails is logged and left out of the index rather
than failing the whole batch. A manifest that cannot be read yields an empty
index.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import httpx
from loguru import logger

from blogsearch.connectors.base_connector import BaseConnector
from blogsearch.exceptions import DocumentFetchError, DocumentParseError, ManifestFetchError
from blogsearch.parsers.base_parser import BaseParser, IndexedDocument
from blogsearch.parsers.html_parser import PostParser


class ManifestConnector(BaseConnector):
    """Connector for a static blog that publishes a post manifest.

    Parameters
    ----------
    manifest_url:
        Location of the JSON post list, absolute or relative to `base_url`.
    base_url:
        Base for resolving the manifest and relative post URLs. Post URLs
        default to resolving against the manifest location.
    parser:
        Parser turning post HTML into `IndexedDocument`.
    timeout:
        Per-request timeout in seconds.
    concurrency:
        Maximum number of posts fetched at once.
    """

    def __init__(
        self,
        manifest_url: str,
        *,
        base_url: Optional[str] = None,
        parser: Optional[BaseParser] = None,
        timeout: float = 20.0,
        concurrency: int = 8,
        user_agent: str = "blogsearch-indexer/0.1",
    ) -> None:
        self.manifest_url = manifest_url
        self.base_url = base_url
        self.timeout = timeout
        self.concurrency = max(1, int(concurrency))
        self._parser = parser or PostParser()
        self._headers: Dict[str, str] = {"User-Agent": user_agent}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers, follow_redirects=True
        )

    def _resolve(self, url: str, base: Optional[str]) -> str:
        # urljoin raises ValueError on malformed netlocs such as "http://[x"
        return urljoin(base, url) if base else url

    def _resolve_url(self, url: str, base: Optional[str]) -> str:
        try:
            return self._resolve(url, base)
        except ValueError as exc:
            raise ManifestFetchError(f"{url}: {exc}") from exc

    async def fetch_content(self) -> List[IndexedDocument]:
        return await self.load()

    async def load(self, manifest_url: Optional[str] = None) -> List[IndexedDocument]:
        """Build the index for every post listed in the manifest.

        Returns documents in manifest order. Never raises for fetch or parse
        failures: see the module docstring for the degradation policy.
        """
        manifest = manifest_url or self.manifest_url

        async with self._client() as client:
            try:
                manifest = self._resolve_url(manifest, self.base_url)
                urls = await self.fetch_manifest(client, manifest)
            except ManifestFetchError as exc:
                logger.error("Error fetching post manifest: {}", exc)
                return []

            post_base = self.base_url or manifest
            sem = asyncio.Semaphore(self.concurrency)

            async def index_one(url: str) -> Optional[IndexedDocument]:
                try:
                    async with sem:
                        html = await self.fetch_document(client, url, base=post_base)
                    return self._parser.parse_content(html, url=url)
                except (DocumentFetchError, DocumentParseError) as exc:
                    logger.warning("Skipping post {}: {}", url, exc)
                    return None

            results = await asyncio.gather(*(index_one(u) for u in urls))

        docs = [d for d in results if d is not None]
        logger.info("Indexed {} of {} posts from {}", len(docs), len(urls), manifest)
        return docs

    async def fetch_manifest(self, client: httpx.AsyncClient, url: str) -> List[str]:
        """Fetch and validate the manifest at `url`. Duplicates are dropped."""
        try:
            resp = await client.get(url)
            resp.raise_for_status()
            data: Any = resp.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            raise ManifestFetchError(f"{url}: {exc}") from exc

        if not isinstance(data, list) or not all(isinstance(u, str) for u in data):
            raise ManifestFetchError(f"{url}: expected a JSON array of URL strings")
        return list(dict.fromkeys(data))

    async def fetch_document(
        self, client: httpx.AsyncClient, url: str, *, base: Optional[str] = None
    ) -> str:
        """Fetch the post at `url`, resolved against `base` when given."""
        try:
            resp = await client.get(self._resolve(url, base))
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            raise DocumentFetchError(url, str(exc)) from exc
        return resp.text
