"""Query planning for research searches.

Turns a research topic (plus whatever has been learned so far) into a
bounded list of distinct SERP queries, each with a stated research goal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from ..llm.structured import generate_object
from .models import SerpQueryPlan, SubQuery
from .prompts import (
    NO_PRIOR_LEARNINGS_SECTION,
    PLAN_PROMPT_TEMPLATE,
    PRIOR_LEARNINGS_SECTION,
    system_prompt,
)

if TYPE_CHECKING:
    from ..llm.protocols import LLMProvider

logger = logging.getLogger(__name__)


class QueryPlanner:
    """
    Creates SERP queries for a research topic.

    Uniqueness of the queries is requested from the model, not verified.
    The planner performs no retries; a ProviderError propagates to the
    caller.
    """

    def __init__(
        self,
        llm_provider: LLMProvider | None = None,
        temperature: float = 0.7,
        timeout: float | None = 120.0,
    ):
        """
        Initialize the query planner.

        Args:
            llm_provider: LLM provider for plan generation. If None,
                         uses the default OpenAIAdapter.
            temperature: LLM temperature
            timeout: Wall-clock limit for the model call, in seconds
        """
        self._llm_provider = llm_provider
        self.temperature = temperature
        self.timeout = timeout

    def build_prompt(
        self,
        query: str,
        learnings: Sequence[str] | None,
        num_queries: int,
    ) -> str:
        if learnings:
            learnings_section = PRIOR_LEARNINGS_SECTION.format(
                learnings="\n".join(
                    f"{idx}. {learning}" for idx, learning in enumerate(learnings, 1)
                )
            )
        else:
            learnings_section = NO_PRIOR_LEARNINGS_SECTION

        return PLAN_PROMPT_TEMPLATE.format(
            num_queries=num_queries,
            query=query,
            learnings_section=learnings_section,
        )

    async def plan(
        self,
        query: str,
        learnings: Sequence[str] | None = None,
        num_queries: int = 3,
    ) -> list[SubQuery]:
        """
        Plan up to ``num_queries`` SERP queries for a topic.

        Args:
            query: The research topic or synthesized follow-up prompt
            learnings: Optional learnings from earlier rounds
            num_queries: Maximum number of queries to return

        Returns:
            List of SubQuery, at most ``num_queries`` long

        Raises:
            ProviderError: If the model call fails
        """
        result = await generate_object(
            prompt=self.build_prompt(query, learnings, num_queries),
            schema=SerpQueryPlan,
            system_prompt=system_prompt(),
            provider=self._llm_provider,
            timeout=self.timeout,
            temperature=self.temperature,
        )

        queries = [
            SubQuery(query=q.query, research_goal=q.research_goal)
            for q in result.queries[:num_queries]
        ]
        logger.info(
            f"Created {len(result.queries)} SERP queries: "
            f"{[q.query for q in result.queries]}"
        )
        return queries
