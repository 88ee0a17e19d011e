"""Adapter implementations for the web search protocol."""

import logging
from typing import Sequence

import httpx
from pydantic import ValidationError

from .client import FirecrawlClient, SearchError
from .models import SearchDocument, SearchResponse
from .protocols import SearchProvider

logger = logging.getLogger(__name__)


class FirecrawlAdapter(SearchProvider):
    """
    Adapter for the Firecrawl search API.

    Usage:
        async with FirecrawlAdapter() as search:
            documents = await search.search("solid state batteries 2025", limit=5)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Firecrawl adapter.

        Args:
            api_key: Optional API key. If not provided, uses FIRECRAWL_KEY.
            base_url: Optional API URL for self-hosted instances. If not
                     provided, uses FIRECRAWL_BASE_URL.
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self._client = FirecrawlClient(
            api_key=api_key, base_url=base_url, transport=transport
        )
        self._entered = False

    async def __aenter__(self) -> "FirecrawlAdapter":
        await self._client.__aenter__()
        self._entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.__aexit__(exc_type, exc_val, exc_tb)
        self._entered = False

    def _ensure_entered(self) -> None:
        if not self._entered:
            raise RuntimeError(
                "Adapter not initialized. Use 'async with' context manager."
            )

    async def search(
        self,
        query: str,
        limit: int = 5,
        timeout: float = 45.0,
        formats: Sequence[str] = ("markdown",),
    ) -> list[SearchDocument]:
        """Run a search and map the payload to SearchDocument objects."""
        self._ensure_entered()

        payload = await self._client.search(
            query=query,
            limit=limit,
            timeout=timeout,
            formats=formats,
        )

        try:
            response = SearchResponse.model_validate(payload)
        except ValidationError as e:
            raise SearchError(f"Malformed search response for '{query}': {e}") from e

        if not response.success:
            raise SearchError(f"Search failed for '{query}': {response.error or 'unknown error'}")
        if response.warning:
            logger.warning(f"Firecrawl warning for '{query}': {response.warning}")

        return response.data[:limit]
