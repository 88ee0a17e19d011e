"""Protocol definitions for web search providers."""

from typing import Any, Protocol, Sequence, runtime_checkable

from .models import SearchDocument


@runtime_checkable
class SearchProvider(Protocol):
    """Protocol for web search providers.

    Implement this protocol to add support for new search APIs.
    """

    async def search(
        self,
        query: str,
        limit: int = 5,
        timeout: float = 45.0,
        formats: Sequence[str] = ("markdown",),
    ) -> list[SearchDocument]:
        """
        Run a keyword query and return the scraped result documents.

        Args:
            query: Search query string
            limit: Maximum number of documents to return
            timeout: Wall-clock limit for the whole call, in seconds
            formats: Content formats to scrape for each hit

        Returns:
            List of SearchDocument objects in provider order

        Raises:
            SearchError: On any failure, including timeout
        """
        ...

    async def __aenter__(self) -> Any:
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        ...
