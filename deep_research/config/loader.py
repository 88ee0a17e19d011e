"""Configuration loader with Pydantic validation and env var expansion."""

import logging
import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "models.yaml"


class LLMConfig(BaseModel):
    """Configuration for the language model backend."""

    backend: Literal["openai", "anthropic", "mock"] = "openai"
    model: str | None = None
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.7


class SearchConfig(BaseModel):
    """Configuration for the web search backend."""

    backend: Literal["firecrawl", "mock"] = "firecrawl"
    api_key: str | None = None
    base_url: str | None = None


class ResearchConfig(BaseModel):
    """Configuration for the recursive research loop."""

    breadth: int = Field(4, ge=1)  # Queries planned at the root level
    depth: int = Field(2, ge=0)  # Recursion levels below the root
    concurrency_limit: int = Field(4, ge=1)  # Per research call, not global
    search_result_limit: int = Field(5, ge=1)
    search_timeout: float = 45.0  # Seconds
    model_timeout: float = 120.0  # Seconds
    document_token_limit: int = 50_000  # Per scraped document
    report_token_limit: int = 50_000  # For all learnings in the report prompt
    feedback_questions: int = Field(5, ge=0)


class ProfileConfig(BaseModel):
    """Configuration profile containing all backend configs."""

    llm: LLMConfig = LLMConfig()
    search: SearchConfig = SearchConfig()
    research: ResearchConfig = ResearchConfig()


class ConfigFile(BaseModel):
    """Root configuration file structure."""

    profiles: dict[str, ProfileConfig]


def expand_env_vars(value: str) -> str:
    """Expand ${VAR} references in string with environment variables.

    Unknown variables are left untouched.
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}]+)\}"

    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replacer, value)


def expand_env_vars_recursive(data):
    """Recursively expand env vars in nested dict/list structures."""
    if isinstance(data, dict):
        return {k: expand_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _drop_unexpanded(data):
    """Treat values still of the form ${VAR} (unset variable) as missing."""
    if isinstance(data, dict):
        return {
            k: _drop_unexpanded(v)
            for k, v in data.items()
            if not (isinstance(v, str) and re.fullmatch(r"\$\{[^}]+\}", v))
        }
    if isinstance(data, list):
        return [_drop_unexpanded(item) for item in data]
    return data


def load_config_file(config_path: Path) -> ConfigFile:
    """Read and validate a whole configuration file."""
    with open(config_path) as f:
        raw_data = yaml.safe_load(f) or {}

    expanded_data = _drop_unexpanded(expand_env_vars_recursive(raw_data))
    return ConfigFile(**expanded_data)


def load_config_from_yaml(config_path: Path, profile_name: str) -> ProfileConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config YAML file
        profile_name: Name of profile to load

    Returns:
        ProfileConfig for the requested profile

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config is invalid
        KeyError: If profile doesn't exist
    """
    config_file = load_config_file(config_path)

    if profile_name not in config_file.profiles:
        available = ", ".join(config_file.profiles.keys())
        raise KeyError(
            f"Profile '{profile_name}' not found. Available profiles: {available}"
        )

    return config_file.profiles[profile_name]


def load_config_from_env() -> ProfileConfig:
    """Load configuration from environment variables (fallback mode).

    Anthropic is used when ANTHROPIC_API_KEY is set and USE_CLAUDE is
    truthy, OpenAI otherwise.
    """
    use_claude = os.environ.get("USE_CLAUDE", "").lower() in ("1", "true", "yes")

    if use_claude and os.environ.get("ANTHROPIC_API_KEY"):
        llm = LLMConfig(
            backend="anthropic",
            model=os.environ.get("ANTHROPIC_MODEL"),
            api_key=os.environ.get("ANTHROPIC_API_KEY"),
        )
    else:
        llm = LLMConfig(
            backend="openai",
            model=os.environ.get("OPENAI_MODEL", "o3-mini"),
            api_key=os.environ.get("OPENAI_API_KEY") or os.environ.get("OPENAI_KEY"),
            base_url=os.environ.get("OPENAI_ENDPOINT", "https://api.openai.com/v1"),
        )

    search = SearchConfig(
        backend="firecrawl",
        api_key=os.environ.get("FIRECRAWL_KEY"),
        base_url=os.environ.get("FIRECRAWL_BASE_URL"),
    )

    research = ResearchConfig()
    if os.environ.get("CONCURRENCY_LIMIT"):
        research.concurrency_limit = int(os.environ["CONCURRENCY_LIMIT"])

    return ProfileConfig(llm=llm, search=search, research=research)


def load_config(
    profile: str | None = None,
    config_path: Path | None = None,
) -> ProfileConfig:
    """Load configuration from YAML file or environment variables.

    Args:
        profile: Profile name to load. If None, uses RESEARCH_PROFILE env var
                or "default".
        config_path: Path to config file. If None, uses the models.yaml
                    shipped next to this module.

    Returns:
        ProfileConfig with all backend configurations

    Raises:
        ValidationError: If configuration is invalid
        KeyError: If requested profile doesn't exist
    """
    if profile is None:
        profile = os.environ.get("RESEARCH_PROFILE", "default")

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        return load_config_from_yaml(config_path, profile)

    logger.warning(f"Config file {config_path} not found, using environment variables")
    return load_config_from_env()
