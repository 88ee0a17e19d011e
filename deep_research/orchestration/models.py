"""Data models for the recursive research orchestrator."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Callable

from pydantic import BaseModel, Field


def child_breadth(breadth: int) -> int:
    """Breadth granted to the next recursion level (halved, rounded up)."""
    return math.ceil(breadth / 2)


@dataclass(frozen=True)
class ResearchBudget:
    """How wide (breadth) and how deep (depth) research may still go."""

    breadth: int
    depth: int

    def __post_init__(self):
        if self.breadth < 1:
            raise ValueError("Breadth must be at least 1")
        if self.depth < 0:
            raise ValueError("Depth must be non-negative")

    def child(self, breadth_policy: Callable[[int], int] = child_breadth) -> ResearchBudget:
        """Budget for the next level; a child with depth 0 is a leaf."""
        return ResearchBudget(
            breadth=breadth_policy(self.breadth),
            depth=max(self.depth - 1, 0),
        )


@dataclass(frozen=True)
class SubQuery:
    """One planned search and the goal it serves."""

    query: str
    research_goal: str


@dataclass
class DistilledContent:
    """Learnings and follow-up questions extracted from one result set."""

    learnings: list[str] = field(default_factory=list)
    follow_up_questions: list[str] = field(default_factory=list)


@dataclass
class ResearchProgress:
    """Progress of one root research call.

    A single instance is shared by every recursive call of the tree and
    mutated in place; concurrent branches overwrite each other's fields.
    """

    current_depth: int
    total_depth: int
    current_breadth: int
    total_breadth: int
    current_query: str | None = None
    total_queries: int = 0
    completed_queries: int = 0

    def update(self, **changes) -> None:
        for name, value in changes.items():
            if not hasattr(self, name):
                raise AttributeError(f"ResearchProgress has no field '{name}'")
            setattr(self, name, value)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ResearchResult:
    """Learnings and visited URLs returned by every research call."""

    learnings: list[str] = field(default_factory=list)
    visited_urls: list[str] = field(default_factory=list)

    @classmethod
    def merge(cls, *results: ResearchResult) -> ResearchResult:
        """Ordered set union of all results (first occurrence wins)."""
        return cls(
            learnings=list(
                dict.fromkeys(item for r in results for item in r.learnings)
            ),
            visited_urls=list(
                dict.fromkeys(item for r in results for item in r.visited_urls)
            ),
        )


# Schemas for typed model replies


class SerpQuery(BaseModel):
    query: str = Field(
        description="The explicitly worded, targeted SERP query designed for maximum precision and clarity."
    )
    research_goal: str = Field(
        description=(
            "The main research intent behind this query, followed by detailed next steps "
            "and specific research directions to pursue once results are obtained."
        )
    )


class SerpQueryPlan(BaseModel):
    queries: list[SerpQuery] = Field(
        default_factory=list,
        description="A precisely crafted list of distinct SERP queries.",
    )


class SerpDistillation(BaseModel):
    learnings: list[str] = Field(
        default_factory=list,
        description=(
            "Concise, information-dense learnings. Each one contains key entities, "
            "metrics, numbers, dates or other precise factual details."
        ),
    )
    follow_up_questions: list[str] = Field(
        default_factory=list,
        description="Precise, actionable follow-up research questions.",
    )


class ReportDraft(BaseModel):
    report_markdown: str = Field(
        description="The complete research report in Markdown."
    )


class FeedbackQuestions(BaseModel):
    questions: list[str] = Field(
        default_factory=list,
        description="Follow-up questions that clarify the research direction.",
    )
