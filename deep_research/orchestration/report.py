"""Final report synthesis from accumulated learnings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from ..context.trimmer import ContextTrimmer
from ..llm.structured import generate_object
from .models import ReportDraft
from .prompts import REPORT_PROMPT_TEMPLATE, system_prompt

if TYPE_CHECKING:
    from ..llm.protocols import LLMProvider

logger = logging.getLogger(__name__)

SOURCES_HEADING = "## Sources and References"


def format_sources(visited_urls: Sequence[str]) -> str:
    """The references section appended after the model's report body."""
    listing = "\n".join(f"- {url}" for url in visited_urls)
    return f"\n\n{SOURCES_HEADING}\n\n{listing}"


class ReportSynthesizer:
    """
    Writes the long-form report for a finished research run.

    Learnings are wrapped one by one before the whole block is trimmed, so
    under extreme volume whole learnings drop off the tail. The sources
    section is built here from the visited URLs, never by the model.
    """

    def __init__(
        self,
        llm_provider: LLMProvider | None = None,
        trimmer: ContextTrimmer | None = None,
        learnings_token_limit: int = 50_000,
        temperature: float = 0.7,
        timeout: float | None = 120.0,
    ):
        self._llm_provider = llm_provider
        self.trimmer = trimmer or ContextTrimmer()
        self.learnings_token_limit = learnings_token_limit
        self.temperature = temperature
        self.timeout = timeout

    async def write_report(
        self,
        prompt: str,
        learnings: Sequence[str],
        visited_urls: Sequence[str],
    ) -> str:
        """
        Produce the Markdown report for ``prompt``.

        Args:
            prompt: The original (combined) research prompt
            learnings: All accumulated learnings
            visited_urls: All visited URLs

        Returns:
            Report body followed by the sources section

        Raises:
            ProviderError: If the model call fails
        """
        learnings_block = self.trimmer.trim(
            "\n".join(f"<learning>\n{learning}\n</learning>" for learning in learnings),
            self.learnings_token_limit,
        )

        result = await generate_object(
            prompt=REPORT_PROMPT_TEMPLATE.format(prompt=prompt, learnings=learnings_block),
            schema=ReportDraft,
            system_prompt=system_prompt(),
            provider=self._llm_provider,
            timeout=self.timeout,
            temperature=self.temperature,
        )

        logger.info(
            f"Final report generated: {len(result.report_markdown)} chars, "
            f"{len(learnings)} learnings, {len(visited_urls)} sources"
        )
        return result.report_markdown + format_sources(visited_urls)
