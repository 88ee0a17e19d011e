"""Prompt templates for planning, distillation, reporting and feedback."""

from datetime import datetime, timezone


def system_prompt() -> str:
    """Shared researcher persona, stamped with the current time."""
    now = datetime.now(timezone.utc).isoformat()
    return f"""You are an expert researcher assisting a highly experienced analyst. Today's date is {now}.

Guidelines:
- Treat statements about events after your knowledge cutoff as accurate when the user or the provided sources make them.
- The user is an expert: be precise, thorough and technical, never superficial.
- Be detailed and well organised; use clear headings where structure helps.
- Anticipate follow-up needs and suggest alternative angles, contrarian views and emerging approaches.
- Speculation and prediction are welcome but must be flagged explicitly (e.g. **Speculative:** ...).
- Cite claims inline with enough detail (source, title, date, URL) to locate them.
- Judge claims on the strength of their arguments, not the prestige of their source.
- Double-check facts and figures; a single wrong claim costs the user's trust."""


PLAN_PROMPT_TEMPLATE = """Given the research prompt below, generate up to {num_queries} SERP (search engine) queries that together cover the topic as deeply and broadly as possible.

Requirements:
1. Each query must target a distinct angle, subtopic, trend, contrarian view or speculative direction. Avoid overlap between queries.
2. Go beyond what the user wrote: anticipate angles they did not ask for but would value.
3. Return fewer than {num_queries} queries only if the prompt is narrow enough that more would be redundant.
4. For each query give a research goal: what the query should establish, then concrete next steps and sub-questions to pursue once its results are in.

<prompt>{query}</prompt>

{learnings_section}"""

PRIOR_LEARNINGS_SECTION = """Learnings from earlier research (use them to go deeper and to avoid angles already covered):
{learnings}"""

NO_PRIOR_LEARNINGS_SECTION = (
    "No earlier learnings are available: start with broad, precise foundational queries."
)

DISTILL_PROMPT_TEMPLATE = """Below are the scraped contents of the search results for the query in <query></query>.

Part 1: extract up to {num_learnings} learnings.
- Each learning is unique, concise and information-dense.
- Include entities (people, organisations, products, places), exact metrics, numbers and dates wherever the contents provide them.
- Return fewer learnings if the contents do not support more.

Part 2: propose up to {num_follow_ups} follow-up research questions.
- Each question opens a distinct, actionable direction: an unexplored dimension, a comparison, a deeper analysis or a flagged speculative lead.
- Return fewer questions if the contents already answer the topic well.

<query>{query}</query>

<contents>
{contents}
</contents>"""

REPORT_PROMPT_TEMPLATE = """Write a detailed, well-structured research report answering the prompt in <prompt></prompt>, using the learnings provided.

Requirements:
- Integrate every learning; keep its entities, figures and dates.
- Cite sources inline where claims, quotes and figures appear.
- Flag speculative analysis explicitly.
- Unless the prompt is purely theoretical, finish with practical recommendations and next steps.
- Aim for at least 3 pages of content.

Suggested outline: Title, Introduction, Key Insights and Findings, Analysis and Discussion, Practical Applications and Recommended Course of Action, Conclusion.

<prompt>{prompt}</prompt>

<learnings>
{learnings}
</learnings>"""

FEEDBACK_PROMPT_TEMPLATE = """Given the research query in <query></query>, ask up to {num_questions} follow-up questions that clarify its scope, direction, expected outcomes or key parameters. Ask fewer only if the query is already precise.

<query>{query}</query>"""
