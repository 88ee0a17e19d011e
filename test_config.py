"""
Configuration System Tests

Tests for the YAML configuration loader and factory functions.
"""

import asyncio
from pathlib import Path

import pytest

from deep_research.config import (
    MockLLMProvider,
    MockSearchProvider,
    LLMConfig,
    SearchConfig,
    create_feedback_generator,
    create_from_profile,
    create_llm_provider,
    create_report_synthesizer,
    create_researcher,
    create_search_provider,
    load_config,
    load_config_from_env,
    load_config_from_yaml,
)
from deep_research.config.loader import DEFAULT_CONFIG_PATH
from deep_research.context import ContextTrimmer
from deep_research.orchestration import ResearchBudget
from deep_research.llm import AnthropicAdapter, OpenAIAdapter
from deep_research.search import FirecrawlAdapter


def test_load_config_from_yaml():
    """Test loading the shipped profiles from YAML."""
    print("=" * 60)
    print("TEST 1: Load configuration from YAML")
    print("=" * 60)

    profile = load_config_from_yaml(DEFAULT_CONFIG_PATH, "test")
    print(f"\nLoaded profile: test")
    print(f"  LLM backend: {profile.llm.backend}")
    print(f"  Search backend: {profile.search.backend}")

    assert profile.llm.backend == "mock"
    assert profile.search.backend == "mock"
    assert profile.research.breadth == 2
    assert profile.research.depth == 1
    print("\n[PASS] test profile loaded correctly")

    profile = load_config_from_yaml(DEFAULT_CONFIG_PATH, "claude")
    print(f"\nLoaded profile: claude")
    print(f"  LLM backend: {profile.llm.backend} ({profile.llm.model})")
    print(f"  Concurrency: {profile.research.concurrency_limit}")

    assert profile.llm.backend == "anthropic"
    assert profile.research.concurrency_limit == 2
    print("\n[PASS] claude profile loaded correctly")

    profile = load_config_from_yaml(DEFAULT_CONFIG_PATH, "quick")
    assert profile.llm.model == "gpt-4o-mini"
    assert profile.research.feedback_questions == 0
    # Defaults fill whatever the profile leaves out
    assert profile.research.search_timeout == 45.0
    assert profile.research.document_token_limit == 50_000
    print("\n[PASS] quick profile loaded correctly")


def test_env_var_expansion(tmp_path, monkeypatch):
    """${VAR} values come from the environment; unset ones become None."""
    print("\n" + "=" * 60)
    print("TEST 2: Environment variable expansion")
    print("=" * 60)

    monkeypatch.setenv("RESEARCH_TEST_KEY", "sk-from-env")
    monkeypatch.delenv("RESEARCH_TEST_MISSING", raising=False)

    config_path = tmp_path / "models.yaml"
    config_path.write_text(
        "profiles:\n"
        "  custom:\n"
        "    llm:\n"
        "      backend: openai\n"
        "      model: gpt-4o\n"
        "      api_key: ${RESEARCH_TEST_KEY}\n"
        "      base_url: ${RESEARCH_TEST_MISSING}\n"
        "    research:\n"
        "      breadth: 6\n"
    )

    profile = load_config_from_yaml(config_path, "custom")
    print(f"\n  api_key: {profile.llm.api_key}")
    print(f"  base_url: {profile.llm.base_url}")

    assert profile.llm.api_key == "sk-from-env"
    assert profile.llm.base_url is None
    assert profile.research.breadth == 6
    assert profile.search.backend == "firecrawl"
    print("\n[PASS] Environment variables expanded")


def test_unknown_profile_lists_available():
    print("\n" + "=" * 60)
    print("TEST 3: Unknown profile")
    print("=" * 60)

    with pytest.raises(KeyError) as exc_info:
        load_config_from_yaml(DEFAULT_CONFIG_PATH, "does-not-exist")

    message = exc_info.value.args[0]
    print(f"\n  {message}")
    assert "default" in message
    assert "test" in message
    print("\n[PASS] Unknown profile rejected")


def test_invalid_research_settings_rejected(tmp_path):
    config_path = tmp_path / "models.yaml"
    config_path.write_text("profiles:\n  bad:\n    research:\n      breadth: 0\n")

    with pytest.raises(ValueError):
        load_config_from_yaml(config_path, "bad")


def test_load_config_env_fallback(tmp_path, monkeypatch):
    """Test loading configuration from environment variables."""
    print("\n" + "=" * 60)
    print("TEST 4: Load configuration from environment (fallback)")
    print("=" * 60)

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("FIRECRAWL_KEY", "fc-test")
    monkeypatch.setenv("CONCURRENCY_LIMIT", "2")
    monkeypatch.delenv("USE_CLAUDE", raising=False)

    profile = load_config(config_path=tmp_path / "missing.yaml")
    print(f"\nLoaded from environment:")
    print(f"  LLM backend: {profile.llm.backend}")
    print(f"  Concurrency: {profile.research.concurrency_limit}")

    assert profile.llm.backend == "openai"
    assert profile.llm.api_key == "sk-test"
    assert profile.search.api_key == "fc-test"
    assert profile.research.concurrency_limit == 2
    print("\n[PASS] Environment fallback works correctly")


def test_env_fallback_selects_anthropic(monkeypatch):
    monkeypatch.setenv("USE_CLAUDE", "true")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

    profile = load_config_from_env()

    assert profile.llm.backend == "anthropic"
    assert profile.llm.api_key == "sk-ant-test"


def test_research_profile_env_var(monkeypatch):
    monkeypatch.setenv("RESEARCH_PROFILE", "test")

    profile = load_config()

    assert profile.llm.backend == "mock"


def test_factory_creates_backends(monkeypatch):
    """Test the factory functions with mock and real backends."""
    print("\n" + "=" * 60)
    print("TEST 5: Factory functions")
    print("=" * 60)

    assert isinstance(create_llm_provider(LLMConfig(backend="mock")), MockLLMProvider)
    assert isinstance(create_search_provider(SearchConfig(backend="mock")), MockSearchProvider)
    print("\n[PASS] Mock backends created")

    search = create_search_provider(SearchConfig(backend="firecrawl", api_key="fc-test"))
    assert isinstance(search, FirecrawlAdapter)
    print("[PASS] Firecrawl backend created")

    for name in ("OPENAI_API_KEY", "OPENAI_KEY", "openai_api_key", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValueError, match="api_key"):
        create_llm_provider(LLMConfig(backend="openai", api_key=None))
    with pytest.raises(ValueError, match="api_key"):
        create_llm_provider(LLMConfig(backend="anthropic", api_key=None))
    print("[PASS] Missing API keys rejected")


def test_end_to_end_with_mocks():
    """Run a full research pass and report with the test profile."""
    print("\n" + "=" * 60)
    print("TEST 6: End-to-end research with mock backends")
    print("=" * 60)

    profile = load_config_from_yaml(DEFAULT_CONFIG_PATH, "test")
    trimmer = ContextTrimmer(token_counter=len)

    async def run():
        llm, search = create_from_profile(profile)
        async with llm, search:
            questions = await create_feedback_generator(profile, llm).generate(
                "mock topic", profile.research.feedback_questions
            )
            researcher = create_researcher(profile, llm, search, trimmer=trimmer)
            result = await researcher.research(
                "mock topic",
                ResearchBudget(profile.research.breadth, profile.research.depth),
            )
            synthesizer = create_report_synthesizer(profile, llm, trimmer=trimmer)
            report = await synthesizer.write_report(
                "mock topic", result.learnings, result.visited_urls
            )
        return questions, result, report

    questions, result, report = asyncio.run(run())

    print(f"\n  Questions: {questions}")
    print(f"  Learnings: {result.learnings}")
    print(f"  URLs: {result.visited_urls}")

    assert questions == ["[Mock clarifying question]"]
    assert result.learnings == ["[Mock learning]"]
    assert result.visited_urls == ["https://example.com/mock"]
    assert report.startswith("# Mock report")
    assert report.endswith("## Sources and References\n\n- https://example.com/mock")
    print("\n[PASS] Mock research pass completed")


def test_shipped_config_exists():
    assert Path(DEFAULT_CONFIG_PATH).exists()


def test_default_profile_accepts_openai_key_alias(monkeypatch):
    """OPENAI_KEY alone is enough to build the default profile's backend."""
    print("\n" + "=" * 60)
    print("TEST 7: OpenAI key alias")
    print("=" * 60)

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("openai_api_key", raising=False)
    monkeypatch.setenv("OPENAI_KEY", "sk-alias")

    profile = load_config("default")
    assert profile.llm.api_key is None

    llm, search = create_from_profile(profile)
    print(f"\n  LLM: {type(llm).__name__} ({llm.model})")

    assert isinstance(llm, OpenAIAdapter)
    assert llm.api_key == "sk-alias"
    print("\n[PASS] OPENAI_KEY picked up")


def test_anthropic_key_read_from_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")

    llm = create_llm_provider(LLMConfig(backend="anthropic", api_key=None))

    assert isinstance(llm, AnthropicAdapter)
    assert llm.api_key == "sk-ant-env"
