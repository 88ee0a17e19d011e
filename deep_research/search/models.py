"""Pydantic models for web search responses."""

from pydantic import BaseModel, Field


class SearchDocument(BaseModel):
    """One search hit; either field may be missing depending on the provider."""

    url: str | None = None
    title: str | None = None
    description: str | None = None
    markdown: str | None = None

    model_config = {"extra": "ignore"}


class SearchResponse(BaseModel):
    """Response body of the Firecrawl /v1/search endpoint."""

    success: bool = True
    data: list[SearchDocument] = Field(default_factory=list)
    warning: str | None = None
    error: str | None = None
