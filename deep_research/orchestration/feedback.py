"""Clarifying questions asked before research starts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..llm.structured import generate_object
from .models import FeedbackQuestions
from .prompts import FEEDBACK_PROMPT_TEMPLATE, system_prompt

if TYPE_CHECKING:
    from ..llm.protocols import LLMProvider

logger = logging.getLogger(__name__)


class FeedbackGenerator:
    """Asks the model what it would need to know to research a query well."""

    def __init__(
        self,
        llm_provider: LLMProvider | None = None,
        timeout: float | None = 120.0,
    ):
        self._llm_provider = llm_provider
        self.timeout = timeout

    async def generate(self, query: str, num_questions: int = 5) -> list[str]:
        """Return at most ``num_questions`` clarifying questions."""
        result = await generate_object(
            prompt=FEEDBACK_PROMPT_TEMPLATE.format(query=query, num_questions=num_questions),
            schema=FeedbackQuestions,
            system_prompt=system_prompt(),
            provider=self._llm_provider,
            timeout=self.timeout,
        )
        questions = result.questions[:num_questions]
        logger.info(f"Generated {len(questions)} clarifying questions")
        return questions


def combine_query(query: str, questions: list[str], answers: list[str]) -> str:
    """Fold the user's answers to the clarifying questions into one prompt."""
    if not questions:
        return query
    qa = "\n".join(f"Q: {q}\nA: {a}" for q, a in zip(questions, answers))
    return f"Initial Query: {query}\nFollow-up Questions and Answers:\n{qa}"
