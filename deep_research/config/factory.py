"""Factory functions to create backends from configuration."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..context.trimmer import ContextTrimmer
    from ..llm.protocols import LLMProvider
    from ..search.models import SearchDocument
    from ..search.protocols import SearchProvider
    from ..orchestration import (
        DeepResearcher,
        FeedbackGenerator,
        ReportSynthesizer,
    )
    from .loader import LLMConfig, ProfileConfig, SearchConfig


MOCK_RESPONSE = {
    "queries": [{"query": "[Mock query]", "research_goal": "[Mock research goal]"}],
    "learnings": ["[Mock learning]"],
    "follow_up_questions": ["[Mock follow-up question]"],
    "questions": ["[Mock clarifying question]"],
    "report_markdown": "# Mock report",
}


class MockLLMProvider:
    """Mock LLM provider for testing.

    Answers every prompt with one JSON object that satisfies all of the
    research schemas at once.
    """

    model = "mock"

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str:
        """Return a mock completion."""
        return json.dumps(MOCK_RESPONSE)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class MockSearchProvider:
    """Mock search provider for testing - one fixed document per query."""

    async def search(
        self,
        query: str,
        limit: int = 5,
        timeout: float = 45.0,
        formats: Sequence[str] = ("markdown",),
    ) -> list[SearchDocument]:
        from ..search.models import SearchDocument

        return [
            SearchDocument(
                url="https://example.com/mock",
                title="Mock result",
                markdown=f"Mock content for: {query}",
            )
        ][:limit]

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


def create_llm_provider(config: LLMConfig, timeout: float = 120.0) -> LLMProvider:
    """Create a language model backend from configuration.

    Args:
        config: LLM configuration
        timeout: Per-request SDK timeout in seconds

    Returns:
        LLMProvider instance (OpenAIAdapter, AnthropicAdapter, or Mock)

    Raises:
        ValueError: If backend type is not supported or a key is missing
    """
    if config.backend == "openai":
        from ..llm import OpenAIAdapter
        from ..settings import resolve_openai_api_key

        api_key = config.api_key or resolve_openai_api_key()
        if not api_key:
            raise ValueError("OpenAI backend requires api_key")

        return OpenAIAdapter(
            api_key=api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=timeout,
        )

    elif config.backend == "anthropic":
        from ..llm import AnthropicAdapter
        api_key = config.api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("Anthropic backend requires api_key")

        return AnthropicAdapter(
            api_key=api_key,
            model=config.model,
            timeout=timeout,
        )

    elif config.backend == "mock":
        return MockLLMProvider()

    else:
        raise ValueError(f"Unsupported LLM backend: {config.backend}")


def create_search_provider(config: SearchConfig) -> SearchProvider:
    """Create a web search backend from configuration.

    Raises:
        ValueError: If backend type is not supported
    """
    if config.backend == "firecrawl":
        from ..search import FirecrawlAdapter

        return FirecrawlAdapter(api_key=config.api_key, base_url=config.base_url)

    elif config.backend == "mock":
        return MockSearchProvider()

    else:
        raise ValueError(f"Unsupported search backend: {config.backend}")


def create_from_profile(profile: ProfileConfig) -> tuple[LLMProvider, SearchProvider]:
    """Create the LLM and search backends of a profile (not yet entered)."""
    llm = create_llm_provider(profile.llm, timeout=profile.research.model_timeout)
    search = create_search_provider(profile.search)
    return llm, search


def create_researcher(
    profile: ProfileConfig,
    llm: LLMProvider,
    search: SearchProvider,
    trimmer: ContextTrimmer | None = None,
) -> DeepResearcher:
    """Wire planner, distiller and search into a DeepResearcher.

    Args:
        profile: Profile supplying the research settings
        llm: Entered LLM provider
        search: Entered search provider
        trimmer: Optional document trimmer for the distiller
    """
    from ..orchestration import ContentDistiller, DeepResearcher, QueryPlanner

    research = profile.research
    planner = QueryPlanner(
        llm_provider=llm,
        temperature=profile.llm.temperature,
        timeout=research.model_timeout,
    )
    distiller = ContentDistiller(
        llm_provider=llm,
        trimmer=trimmer,
        document_token_limit=research.document_token_limit,
        temperature=profile.llm.temperature,
        timeout=research.model_timeout,
    )
    return DeepResearcher(
        planner=planner,
        distiller=distiller,
        search_provider=search,
        concurrency_limit=research.concurrency_limit,
        search_result_limit=research.search_result_limit,
        search_timeout=research.search_timeout,
    )


def create_report_synthesizer(
    profile: ProfileConfig,
    llm: LLMProvider,
    trimmer: ContextTrimmer | None = None,
) -> ReportSynthesizer:
    """Create a ReportSynthesizer using the profile's limits."""
    from ..orchestration import ReportSynthesizer

    return ReportSynthesizer(
        llm_provider=llm,
        trimmer=trimmer,
        learnings_token_limit=profile.research.report_token_limit,
        temperature=profile.llm.temperature,
        timeout=profile.research.model_timeout,
    )


def create_feedback_generator(profile: ProfileConfig, llm: LLMProvider) -> FeedbackGenerator:
    """Create a FeedbackGenerator using the profile's timeout."""
    from ..orchestration import FeedbackGenerator

    return FeedbackGenerator(llm_provider=llm, timeout=profile.research.model_timeout)
