"""
Recursive research orchestrator.

Turns one research request into a bounded tree of concurrent
sub-investigations: plan queries, search, distill, and recurse on the
follow-up questions with a smaller budget until depth runs out.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Sequence

import httpx

from .models import (
    ResearchBudget,
    ResearchProgress,
    ResearchResult,
    SubQuery,
    child_breadth,
)

if TYPE_CHECKING:
    from ..search.protocols import SearchProvider
    from .distiller import ContentDistiller
    from .query_planner import QueryPlanner

logger = logging.getLogger(__name__)

CONCURRENCY_LIMIT = 4
"""Concurrent branches per research call (not shared across the tree)."""

SEARCH_RESULT_LIMIT = 5
SEARCH_TIMEOUT = 45.0

ProgressCallback = Callable[[ResearchProgress], None]


def is_timeout(error: BaseException) -> bool:
    """True for timeout failures from either collaborator."""
    if isinstance(error, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return True
    return "timeout" in str(error).lower()


def build_follow_up_query(sub_query: SubQuery, follow_up_questions: Sequence[str]) -> str:
    """The prompt handed to the next level: goal plus follow-up directions."""
    directions = "".join(f"\n{question}" for question in follow_up_questions)
    return (
        f"Previous research goal: {sub_query.research_goal}\n"
        f"Follow-up research directions: {directions}"
    ).strip()


class DeepResearcher:
    """
    The research orchestrator.

    Each call to :meth:`research`:
    1. Plans up to ``breadth`` queries from the prompt and prior learnings
    2. Searches and distills each query, at most ``concurrency_limit`` at once
    3. Recurses per query with ``breadth`` halved and ``depth`` decremented
    4. Merges all branch results with set semantics

    A failing branch contributes an empty result; only a planning failure
    in the call itself propagates.
    """

    def __init__(
        self,
        planner: QueryPlanner,
        distiller: ContentDistiller,
        search_provider: SearchProvider,
        concurrency_limit: int = CONCURRENCY_LIMIT,
        search_result_limit: int = SEARCH_RESULT_LIMIT,
        search_timeout: float = SEARCH_TIMEOUT,
        breadth_policy: Callable[[int], int] = child_breadth,
    ):
        """
        Initialize the orchestrator.

        Args:
            planner: Query planner
            distiller: Content distiller
            search_provider: Entered search provider
            concurrency_limit: Concurrent branches per research call
            search_result_limit: Documents requested per search
            search_timeout: Wall-clock limit per search, in seconds
            breadth_policy: Maps a level's breadth to its children's breadth
        """
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")

        self.planner = planner
        self.distiller = distiller
        self.search_provider = search_provider
        self.concurrency_limit = concurrency_limit
        self.search_result_limit = search_result_limit
        self.search_timeout = search_timeout
        self.breadth_policy = breadth_policy

    @staticmethod
    def _report(
        progress: ResearchProgress,
        on_progress: ProgressCallback | None,
        **changes,
    ) -> None:
        progress.update(**changes)
        if on_progress is None:
            return
        try:
            on_progress(progress)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}", exc_info=True)

    async def research(
        self,
        query: str,
        budget: ResearchBudget,
        learnings: Sequence[str] = (),
        visited_urls: Sequence[str] = (),
        on_progress: ProgressCallback | None = None,
        progress: ResearchProgress | None = None,
    ) -> ResearchResult:
        """
        Research ``query`` within ``budget``.

        Args:
            query: Research prompt (user prompt or synthesized follow-up)
            budget: Remaining breadth and depth
            learnings: Learnings accumulated so far on this path
            visited_urls: URLs visited so far on this path
            on_progress: Optional synchronous progress callback
            progress: Shared progress record; created when None (root call)

        Returns:
            Deduplicated learnings and visited URLs of the whole subtree

        Raises:
            ProviderError: If this call's query planning fails
        """
        if progress is None:
            progress = ResearchProgress(
                current_depth=budget.depth,
                total_depth=budget.depth,
                current_breadth=budget.breadth,
                total_breadth=budget.breadth,
            )
        self._report(
            progress,
            on_progress,
            current_depth=budget.depth,
            total_depth=budget.depth,
            current_breadth=budget.breadth,
            total_breadth=budget.breadth,
            total_queries=0,
            completed_queries=0,
        )

        sub_queries = await self.planner.plan(
            query=query,
            learnings=list(learnings),
            num_queries=budget.breadth,
        )

        self._report(
            progress,
            on_progress,
            total_queries=len(sub_queries),
            current_query=sub_queries[0].query if sub_queries else None,
        )

        semaphore = asyncio.Semaphore(self.concurrency_limit)

        async def run_branch(sub_query: SubQuery) -> ResearchResult:
            async with semaphore:
                return await self._research_branch(
                    sub_query,
                    budget,
                    learnings,
                    visited_urls,
                    on_progress,
                    progress,
                )

        results = await asyncio.gather(*(run_branch(q) for q in sub_queries))
        return ResearchResult.merge(*results)

    async def _research_branch(
        self,
        sub_query: SubQuery,
        budget: ResearchBudget,
        learnings: Sequence[str],
        visited_urls: Sequence[str],
        on_progress: ProgressCallback | None,
        progress: ResearchProgress,
    ) -> ResearchResult:
        """Search, distill and (if depth remains) recurse for one query."""
        try:
            documents = await self.search_provider.search(
                sub_query.query,
                limit=self.search_result_limit,
                timeout=self.search_timeout,
            )

            new_urls = [doc.url for doc in documents if doc.url]
            child = budget.child(self.breadth_policy)

            distilled = await self.distiller.distill(
                query=sub_query.query,
                documents=documents,
                num_follow_ups=child.breadth,
            )
            all_learnings = [*learnings, *distilled.learnings]
            all_urls = [*visited_urls, *new_urls]

            if child.depth > 0:
                logger.info(
                    f"Researching deeper, breadth: {child.breadth}, depth: {child.depth}"
                )
                self._report(
                    progress,
                    on_progress,
                    current_depth=child.depth,
                    current_breadth=child.breadth,
                    completed_queries=progress.completed_queries + 1,
                    current_query=sub_query.query,
                )
                return await self.research(
                    query=build_follow_up_query(sub_query, distilled.follow_up_questions),
                    budget=child,
                    learnings=all_learnings,
                    visited_urls=all_urls,
                    on_progress=on_progress,
                    progress=progress,
                )

            self._report(
                progress,
                on_progress,
                current_depth=0,
                completed_queries=progress.completed_queries + 1,
                current_query=sub_query.query,
            )
            return ResearchResult(learnings=all_learnings, visited_urls=all_urls)

        except Exception as e:
            if is_timeout(e):
                logger.warning(f"Timeout error running query: '{sub_query.query}': {e}")
            else:
                logger.error(f"Error running query: '{sub_query.query}': {e}", exc_info=True)
            return ResearchResult()


async def deep_research(
    query: str,
    breadth: int,
    depth: int,
    researcher: DeepResearcher,
    learnings: Sequence[str] = (),
    visited_urls: Sequence[str] = (),
    on_progress: ProgressCallback | None = None,
) -> ResearchResult:
    """
    Convenience function to run a root research call.

    Example:
        async with OpenAIAdapter() as llm, FirecrawlAdapter() as search:
            researcher = DeepResearcher(QueryPlanner(llm), ContentDistiller(llm), search)
            result = await deep_research("solid state batteries", 4, 2, researcher)
    """
    return await researcher.research(
        query=query,
        budget=ResearchBudget(breadth=breadth, depth=depth),
        learnings=learnings,
        visited_urls=visited_urls,
        on_progress=on_progress,
    )
