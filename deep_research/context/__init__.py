"""Context window management."""

from .trimmer import MIN_CHUNK_SIZE, ContextTrimmer, trim_prompt

__all__ = [
    "MIN_CHUNK_SIZE",
    "ContextTrimmer",
    "trim_prompt",
]
