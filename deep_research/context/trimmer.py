"""Trim prompts so they fit a token budget.

Text is shortened from the tail, preferring paragraph, then line, then word
boundaries, until its token count is within budget.
"""

from __future__ import annotations

import logging
from typing import Callable

import tiktoken
from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..settings import CONTEXT_SIZE

logger = logging.getLogger(__name__)

MIN_CHUNK_SIZE = 140
"""Below this many characters trimming is degenerate and stops."""

DEFAULT_CHARS_PER_TOKEN = 3
DEFAULT_ENCODING = "o200k_base"

_encoders: dict[str, tiktoken.Encoding] = {}


def _get_encoder(name: str) -> tiktoken.Encoding:
    if name not in _encoders:
        _encoders[name] = tiktoken.get_encoding(name)
    return _encoders[name]


class ContextTrimmer:
    """
    Shrinks text to fit a token budget while keeping its prefix.

    Token counts come from tiktoken by default; any ``str -> int`` counter
    can be injected instead.
    """

    def __init__(
        self,
        token_counter: Callable[[str], int] | None = None,
        encoding_name: str = DEFAULT_ENCODING,
        chars_per_token: int = DEFAULT_CHARS_PER_TOKEN,
        min_chunk_size: int = MIN_CHUNK_SIZE,
    ):
        """
        Initialize the trimmer.

        Args:
            token_counter: Optional custom token counter
            encoding_name: tiktoken encoding used when no counter is given
            chars_per_token: Estimate used to turn token overflow into characters
            min_chunk_size: Character floor below which trimming short-circuits
        """
        self._token_counter = token_counter
        self.encoding_name = encoding_name
        self.chars_per_token = chars_per_token
        self.min_chunk_size = min_chunk_size

    def count_tokens(self, text: str) -> int:
        if self._token_counter is not None:
            return self._token_counter(text)
        return len(_get_encoder(self.encoding_name).encode(text, disallowed_special=()))

    def trim(self, text: str, token_budget: int | None = None) -> str:
        """
        Return a prefix-derived shortening of ``text`` within ``token_budget``.

        The result may exceed the budget only in the degenerate case where
        the estimated target drops below ``min_chunk_size``; then exactly the
        first ``min_chunk_size`` characters are returned.
        """
        if not text:
            return ""

        budget = CONTEXT_SIZE if token_budget is None else token_budget

        length = self.count_tokens(text)
        if length <= budget:
            return text

        overflow_tokens = length - budget
        target_chunk_size = len(text) - overflow_tokens * self.chars_per_token

        if target_chunk_size < self.min_chunk_size:
            return text[: self.min_chunk_size]

        splitter = RecursiveCharacterTextSplitter(
            chunk_size=target_chunk_size,
            chunk_overlap=0,
        )
        chunks = splitter.split_text(text)
        trimmed = chunks[0] if chunks else ""

        # Splitter made no progress: hard slice instead
        if len(trimmed) == len(text):
            return self.trim(text[:target_chunk_size], budget)

        # The chars-per-token estimate is approximate; re-check the chunk
        return self.trim(trimmed, budget)


_default_trimmer = ContextTrimmer()


def trim_prompt(text: str, token_budget: int | None = None) -> str:
    """
    Trim ``text`` to ``token_budget`` tokens with the default trimmer.

    Args:
        text: Prompt text to trim
        token_budget: Token ceiling. Defaults to CONTEXT_SIZE.

    Returns:
        The trimmed text ("" for empty input)

    Example:
        body = trim_prompt(page_markdown, 50_000)
    """
    return _default_trimmer.trim(text, token_budget)
