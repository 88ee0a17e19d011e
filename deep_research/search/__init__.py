"""Web search integration with protocol-based adapter pattern."""

from .models import SearchDocument, SearchResponse
from .protocols import SearchProvider
from .adapters import FirecrawlAdapter
from .client import FirecrawlClient, SearchError

__all__ = [
    # Models
    "SearchDocument",
    "SearchResponse",
    # Protocols (for implementing custom providers)
    "SearchProvider",
    # Adapters
    "FirecrawlAdapter",
    # Low-level client
    "FirecrawlClient",
    "SearchError",
]
