"""Distill raw search results into learnings and follow-up questions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from ..context.trimmer import ContextTrimmer
from ..llm.structured import generate_object
from .models import DistilledContent, SerpDistillation
from .prompts import DISTILL_PROMPT_TEMPLATE, system_prompt

if TYPE_CHECKING:
    from ..llm.protocols import LLMProvider
    from ..search.models import SearchDocument

logger = logging.getLogger(__name__)


class ContentDistiller:
    """
    Extracts learnings and follow-up questions from one search result set.

    Each document body is trimmed to ``document_token_limit`` tokens before
    the request is assembled, so the prompt fits the context window no
    matter how many or how large the documents are. Learnings are not
    deduplicated here.
    """

    def __init__(
        self,
        llm_provider: LLMProvider | None = None,
        trimmer: ContextTrimmer | None = None,
        document_token_limit: int = 50_000,
        temperature: float = 0.7,
        timeout: float | None = 120.0,
    ):
        """
        Initialize the distiller.

        Args:
            llm_provider: LLM provider. If None, uses the default OpenAIAdapter.
            trimmer: Trimmer for document bodies
            document_token_limit: Token ceiling per document
            temperature: LLM temperature
            timeout: Wall-clock limit for the model call, in seconds
        """
        self._llm_provider = llm_provider
        self.trimmer = trimmer or ContextTrimmer()
        self.document_token_limit = document_token_limit
        self.temperature = temperature
        self.timeout = timeout

    def prepare_contents(self, documents: Sequence[SearchDocument]) -> list[str]:
        """Drop empty bodies and trim the rest to the per-document ceiling."""
        return [
            self.trimmer.trim(doc.markdown, self.document_token_limit)
            for doc in documents
            if doc.markdown
        ]

    async def distill(
        self,
        query: str,
        documents: Sequence[SearchDocument],
        num_learnings: int = 5,
        num_follow_ups: int = 5,
    ) -> DistilledContent:
        """
        Turn the documents returned for ``query`` into learnings.

        Args:
            query: The SERP query the documents were returned for
            documents: Search result set
            num_learnings: Maximum learnings to return
            num_follow_ups: Maximum follow-up questions to return

        Returns:
            DistilledContent with both lists within their bounds

        Raises:
            ProviderError: If the model call fails
        """
        contents = self.prepare_contents(documents)
        logger.info(f"Ran SERP query '{query}', found {len(contents)} usable content entries")

        prompt = DISTILL_PROMPT_TEMPLATE.format(
            query=query,
            num_learnings=num_learnings,
            num_follow_ups=num_follow_ups,
            contents="\n".join(f"<content>\n{content}\n</content>" for content in contents),
        )

        result = await generate_object(
            prompt=prompt,
            schema=SerpDistillation,
            system_prompt=system_prompt(),
            provider=self._llm_provider,
            timeout=self.timeout,
            temperature=self.temperature,
        )

        distilled = DistilledContent(
            learnings=result.learnings[:num_learnings],
            follow_up_questions=result.follow_up_questions[:num_follow_ups],
        )
        logger.info(
            f"Created {len(distilled.learnings)} learnings and "
            f"{len(distilled.follow_up_questions)} follow-up questions"
        )
        logger.debug(f"Learnings: {distilled.learnings}")
        logger.debug(f"Follow-up questions: {distilled.follow_up_questions}")
        return distilled
