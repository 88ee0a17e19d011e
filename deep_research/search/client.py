"""Async HTTP client for the Firecrawl search API with retry."""

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Sequence

import httpx

from ..settings import (
    FIRECRAWL_BASE_URL,
    FIRECRAWL_KEY,
    MAX_RETRIES,
    RETRY_BACKOFF_FACTOR,
)

logger = logging.getLogger(__name__)


class SearchError(RuntimeError):
    """The search collaborator failed (timeouts say "Timeout")."""


def parse_retry_after(value: str | None) -> float | None:
    """Seconds to wait from a Retry-After header (delay-seconds or HTTP-date).

    Returns None when the header is missing or unparseable.
    """
    if not value:
        return None

    value = value.strip()
    if value.isdigit():
        return float(value)

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable Retry-After header: {value!r}")
        return None

    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max((retry_at - datetime.now(timezone.utc)).total_seconds(), 0.0)


class FirecrawlClient:
    """Async client for the Firecrawl API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else FIRECRAWL_KEY
        self.base_url = (base_url or FIRECRAWL_BASE_URL).rstrip("/")

        self.headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            self.headers["Authorization"] = f"Bearer {self.api_key}"
            logger.info("Firecrawl client initialized with API key")
        else:
            logger.warning("No Firecrawl API key provided - only self-hosted instances will work")

        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "FirecrawlClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=60.0,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager."
            )
        return self._client

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a request with exponential backoff on rate limits, server and connection errors."""
        last_exception: Exception | None = None
        last_response: httpx.Response | None = None

        for attempt in range(MAX_RETRIES):
            logger.debug(f"Request attempt {attempt + 1}/{MAX_RETRIES}: {method} {url}")

            try:
                response = await self.client.request(method, url, **kwargs)
            except (httpx.ConnectError, httpx.ReadTimeout) as e:
                last_exception = e
                backoff = RETRY_BACKOFF_FACTOR ** attempt
                logger.warning(f"Connection error: {e}, backoff {backoff}s")
                await asyncio.sleep(backoff)
                continue

            last_exception = None
            last_response = response
            logger.debug(f"Response status: {response.status_code}")

            if response.status_code == 429:
                backoff = RETRY_BACKOFF_FACTOR ** (attempt + 1)
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                if retry_after is not None:
                    backoff = max(retry_after, backoff)
                logger.warning(f"Rate limited (429), waiting {backoff}s (attempt {attempt + 1})")
                await asyncio.sleep(backoff)
                continue

            if response.status_code in (500, 502, 503, 504):
                backoff = RETRY_BACKOFF_FACTOR ** attempt
                logger.warning(f"Server error ({response.status_code}), backoff {backoff}s")
                await asyncio.sleep(backoff)
                continue

            response.raise_for_status()
            return response

        logger.error(f"Request failed after {MAX_RETRIES} retries")
        if last_exception:
            raise last_exception
        if last_response is not None:
            raise httpx.HTTPStatusError(
                f"Request failed with status {last_response.status_code}: {last_response.text[:200]}",
                request=last_response.request,
                response=last_response,
            )
        raise RuntimeError("Request failed after all retries")

    async def search(
        self,
        query: str,
        limit: int = 5,
        timeout: float = 45.0,
        formats: Sequence[str] = ("markdown",),
    ) -> dict[str, Any]:
        """Search the web and scrape each hit using the /v1/search endpoint.

        Raises:
            SearchError: On timeout, transport or HTTP failure
        """
        payload = {
            "query": query,
            "limit": limit,
            "timeout": int(timeout * 1000),
            "scrapeOptions": {"formats": list(formats)},
        }

        logger.info(f"Searching web: query='{query}', limit={limit}")

        try:
            response = await asyncio.wait_for(
                self._request_with_retry("POST", "/v1/search", json=payload),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise SearchError(f"Timeout after {timeout}s searching '{query}'") from e
        except httpx.HTTPStatusError as e:
            raise SearchError(
                f"HTTP {e.response.status_code} searching '{query}': {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SearchError(f"{type(e).__name__} searching '{query}': {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SearchError(f"Invalid JSON from search for '{query}': {e}") from e

        if not isinstance(data, dict):
            raise SearchError(f"Unexpected search payload for '{query}': {type(data).__name__}")

        logger.info(f"Search returned {len(data.get('data') or [])} documents")
        return data
