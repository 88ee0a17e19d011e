"""
Research Component Tests

Tests for the query planner, content distiller, report synthesizer and
feedback generator against a scripted LLM provider.
"""

import asyncio
import json

from deep_research.context import ContextTrimmer
from deep_research.orchestration import (
    ContentDistiller,
    FeedbackGenerator,
    QueryPlanner,
    ReportSynthesizer,
    SubQuery,
    combine_query,
    format_sources,
)
from deep_research.search import SearchDocument


class ScriptedProvider:
    """Returns one JSON reply for every prompt and keeps the prompts."""

    model = "scripted"

    def __init__(self, payload: dict):
        self.payload = payload
        self.prompts = []

    async def complete(self, prompt, system_prompt=None, temperature=0.7, max_tokens=None):
        self.prompts.append(prompt)
        return json.dumps(self.payload)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


def length_trimmer() -> ContextTrimmer:
    return ContextTrimmer(token_counter=len)


# =============================================================================
# Query planner
# =============================================================================


def test_planner_slices_to_requested_count():
    provider = ScriptedProvider(
        {
            "queries": [
                {"query": f"query {i}", "research_goal": f"goal {i}"} for i in range(5)
            ]
        }
    )
    planner = QueryPlanner(llm_provider=provider)

    queries = asyncio.run(planner.plan("battery recycling", num_queries=3))

    assert queries == [
        SubQuery(query="query 0", research_goal="goal 0"),
        SubQuery(query="query 1", research_goal="goal 1"),
        SubQuery(query="query 2", research_goal="goal 2"),
    ]
    assert "up to 3 SERP" in provider.prompts[0]
    assert "<prompt>battery recycling</prompt>" in provider.prompts[0]


def test_planner_numbers_prior_learnings():
    planner = QueryPlanner(llm_provider=ScriptedProvider({"queries": []}))

    prompt = planner.build_prompt("topic", ["first fact", "second fact"], 2)

    assert "1. first fact\n2. second fact" in prompt
    assert "No earlier learnings" not in prompt


def test_planner_cold_start_prompt():
    planner = QueryPlanner(llm_provider=ScriptedProvider({"queries": []}))

    prompt = planner.build_prompt("topic", [], 2)

    assert "No earlier learnings are available" in prompt


def test_planner_may_return_fewer_queries():
    provider = ScriptedProvider(
        {"queries": [{"query": "only one", "research_goal": "narrow topic"}]}
    )

    queries = asyncio.run(QueryPlanner(llm_provider=provider).plan("narrow", num_queries=4))

    assert len(queries) == 1


# =============================================================================
# Content distiller
# =============================================================================


def test_distiller_skips_empty_documents_and_slices():
    provider = ScriptedProvider(
        {
            "learnings": [f"learning {i}" for i in range(8)],
            "follow_up_questions": [f"question {i}" for i in range(8)],
        }
    )
    distiller = ContentDistiller(llm_provider=provider, trimmer=length_trimmer())
    documents = [
        SearchDocument(url="https://a.example", markdown="Alpha content"),
        SearchDocument(url="https://b.example", markdown=""),
        SearchDocument(url="https://c.example"),
        SearchDocument(url="https://d.example", markdown="Delta content"),
    ]

    distilled = asyncio.run(
        distiller.distill("query", documents, num_learnings=3, num_follow_ups=2)
    )

    assert distilled.learnings == ["learning 0", "learning 1", "learning 2"]
    assert distilled.follow_up_questions == ["question 0", "question 1"]

    prompt = provider.prompts[0]
    assert prompt.count("<content>") == 2
    assert "Alpha content" in prompt
    assert "Delta content" in prompt


def test_distiller_trims_each_document():
    distiller = ContentDistiller(
        llm_provider=ScriptedProvider({}),
        trimmer=length_trimmer(),
        document_token_limit=200,
    )
    long_body = " ".join(["lithium"] * 500)

    contents = distiller.prepare_contents(
        [SearchDocument(markdown=long_body), SearchDocument(markdown="short")]
    )

    assert len(contents) == 2
    assert len(contents[0]) <= 200
    assert long_body.startswith(contents[0])
    assert contents[1] == "short"


def test_distiller_with_no_usable_documents_still_asks_model():
    provider = ScriptedProvider({"learnings": [], "follow_up_questions": []})
    distiller = ContentDistiller(llm_provider=provider, trimmer=length_trimmer())

    distilled = asyncio.run(distiller.distill("query", [SearchDocument(url="u")]))

    assert distilled.learnings == []
    assert "<content>" not in provider.prompts[0]


# =============================================================================
# Report synthesizer
# =============================================================================


def test_report_appends_sources_section():
    provider = ScriptedProvider({"report_markdown": "# Battery Report\n\nBody."})
    synthesizer = ReportSynthesizer(llm_provider=provider, trimmer=length_trimmer())

    report = asyncio.run(
        synthesizer.write_report(
            prompt="battery recycling",
            learnings=["L1", "L2"],
            visited_urls=["https://a.example", "https://b.example"],
        )
    )

    assert report == (
        "# Battery Report\n\nBody."
        "\n\n## Sources and References\n\n"
        "- https://a.example\n- https://b.example"
    )
    prompt = provider.prompts[0]
    assert "<learning>\nL1\n</learning>" in prompt
    assert "<learning>\nL2\n</learning>" in prompt


def test_format_sources_without_urls():
    assert format_sources([]) == "\n\n## Sources and References\n\n"


# =============================================================================
# Feedback
# =============================================================================


def test_feedback_questions_are_bounded():
    provider = ScriptedProvider({"questions": ["Q1?", "Q2?", "Q3?"]})

    questions = asyncio.run(
        FeedbackGenerator(llm_provider=provider).generate("topic", num_questions=2)
    )

    assert questions == ["Q1?", "Q2?"]
    assert "up to 2 follow-up questions" in provider.prompts[0]


def test_combine_query():
    combined = combine_query("topic", ["Scope?", "Region?"], ["Europe only", ""])

    assert combined == (
        "Initial Query: topic\n"
        "Follow-up Questions and Answers:\n"
        "Q: Scope?\nA: Europe only\n"
        "Q: Region?\nA: "
    )
    assert combine_query("topic", [], []) == "topic"
