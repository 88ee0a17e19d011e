"""Configuration system for model/search backends and the research loop."""

from .loader import (
    load_config,
    load_config_file,
    load_config_from_env,
    load_config_from_yaml,
    ProfileConfig,
    LLMConfig,
    SearchConfig,
    ResearchConfig,
)
from .factory import (
    MockLLMProvider,
    MockSearchProvider,
    create_llm_provider,
    create_search_provider,
    create_from_profile,
    create_researcher,
    create_report_synthesizer,
    create_feedback_generator,
)

__all__ = [
    # Loader
    "load_config",
    "load_config_file",
    "load_config_from_env",
    "load_config_from_yaml",
    "ProfileConfig",
    "LLMConfig",
    "SearchConfig",
    "ResearchConfig",
    # Factory - Backends
    "MockLLMProvider",
    "MockSearchProvider",
    "create_llm_provider",
    "create_search_provider",
    "create_from_profile",
    # Factory - Research components
    "create_researcher",
    "create_report_synthesizer",
    "create_feedback_generator",
]
