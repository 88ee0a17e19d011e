"""Configuration settings for the deep research agent."""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

# Logging setup
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)


# OpenAI (or any OpenAI-compatible endpoint)
def resolve_openai_api_key() -> str | None:
    """Read the OpenAI key under any of its accepted names."""
    return (
        os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_KEY") or os.getenv("openai_api_key")
    )


OPENAI_API_KEY = resolve_openai_api_key()
OPENAI_ENDPOINT = os.getenv("OPENAI_ENDPOINT", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "o3-mini")

# Anthropic (direct API)
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-7-sonnet-20250219")

# Firecrawl
FIRECRAWL_KEY = os.getenv("FIRECRAWL_KEY", "")
FIRECRAWL_BASE_URL = os.getenv("FIRECRAWL_BASE_URL", "https://api.firecrawl.dev")

# Context window (tokens) used when trimming prompts
CONTEXT_SIZE = int(os.getenv("CONTEXT_SIZE", "200000" if ANTHROPIC_API_KEY else "128000"))

# Retry settings for the search client
MAX_RETRIES = 3
RETRY_BACKOFF_FACTOR = 2.0
