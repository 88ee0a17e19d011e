"""Recursive web research agent."""

from .context import trim_prompt
from .orchestration import (
    ContentDistiller,
    DeepResearcher,
    FeedbackGenerator,
    QueryPlanner,
    ReportSynthesizer,
    ResearchBudget,
    ResearchProgress,
    ResearchResult,
    deep_research,
)

__all__ = [
    "trim_prompt",
    "ContentDistiller",
    "DeepResearcher",
    "FeedbackGenerator",
    "QueryPlanner",
    "ReportSynthesizer",
    "ResearchBudget",
    "ResearchProgress",
    "ResearchResult",
    "deep_research",
]
