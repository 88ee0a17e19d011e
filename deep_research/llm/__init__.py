"""LLM provider integrations with protocol-based adapter pattern."""

from .protocols import LLMProvider
from .adapters import AnthropicAdapter, OpenAIAdapter
from .structured import ProviderError, extract_json, generate_object

__all__ = [
    # Protocols
    "LLMProvider",
    # Adapters
    "OpenAIAdapter",
    "AnthropicAdapter",
    # Structured output
    "ProviderError",
    "extract_json",
    "generate_object",
]
