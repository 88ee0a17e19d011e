"""Orchestration module for the recursive research agent.

- QueryPlanner: topic + prior learnings -> distinct SERP queries
- ContentDistiller: search results -> learnings + follow-up questions
- DeepResearcher: bounded, concurrent, recursive exploration
- ReportSynthesizer: learnings + URLs -> Markdown report
- FeedbackGenerator: clarifying questions before research starts
"""

from .models import (
    DistilledContent,
    ResearchBudget,
    ResearchProgress,
    ResearchResult,
    SubQuery,
    child_breadth,
)
from .query_planner import QueryPlanner
from .distiller import ContentDistiller
from .orchestrator import (
    CONCURRENCY_LIMIT,
    DeepResearcher,
    build_follow_up_query,
    deep_research,
    is_timeout,
)
from .report import ReportSynthesizer, format_sources
from .feedback import FeedbackGenerator, combine_query
from .prompts import system_prompt

__all__ = [
    # Models
    "DistilledContent",
    "ResearchBudget",
    "ResearchProgress",
    "ResearchResult",
    "SubQuery",
    "child_breadth",
    # Planning and distillation
    "QueryPlanner",
    "ContentDistiller",
    # Orchestrator
    "CONCURRENCY_LIMIT",
    "DeepResearcher",
    "build_follow_up_query",
    "deep_research",
    "is_timeout",
    # Reporting
    "ReportSynthesizer",
    "format_sources",
    # Feedback
    "FeedbackGenerator",
    "combine_query",
    "system_prompt",
]
