"""Command-line interface for the deep research agent."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from .config.loader import DEFAULT_CONFIG_PATH, ProfileConfig, load_config
from .config.factory import (
    create_feedback_generator,
    create_from_profile,
    create_report_synthesizer,
    create_researcher,
)
from .orchestration import ResearchBudget, ResearchProgress, combine_query

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="deep-research",
    help="Recursive web research agent that writes a sourced report.",
    add_completion=False,
)


def print_progress(progress: ResearchProgress) -> None:
    typer.echo(
        f"[depth {progress.current_depth}/{progress.total_depth} | "
        f"breadth {progress.current_breadth}/{progress.total_breadth} | "
        f"queries {progress.completed_queries}/{progress.total_queries}] "
        f"{progress.current_query or ''}",
        err=True,
    )


@app.command()
def research(
    query: Annotated[str, typer.Argument(help="What would you like to research?")],
    breadth: Annotated[
        int,
        typer.Option("--breadth", "-b", min=1, help="Queries per level (default from profile)"),
    ] = None,
    depth: Annotated[
        int,
        typer.Option("--depth", "-d", min=0, help="Recursion depth (default from profile)"),
    ] = None,
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Configuration profile"),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the Markdown report"),
    ] = Path("report.md"),
    feedback: Annotated[
        bool,
        typer.Option("--feedback/--no-feedback", help="Ask clarifying questions first"),
    ] = True,
):
    """
    Research a topic and write a report.

    Examples:

        # Default profile, breadth/depth from the profile
        deep-research research "solid state battery commercialisation"

        # Wider and deeper, no clarifying questions
        deep-research research "RISC-V in datacenters" -b 6 -d 3 --no-feedback

        # Claude instead of OpenAI
        deep-research research "grid-scale storage" --profile claude
    """
    try:
        config = load_config(profile)
    except KeyError as e:
        typer.echo(f"Error: {e.args[0]}", err=True)
        raise typer.Exit(1)

    budget = ResearchBudget(
        breadth=breadth if breadth is not None else config.research.breadth,
        depth=depth if depth is not None else config.research.depth,
    )

    try:
        report = asyncio.run(_research_async(query, budget, config, output, feedback))
    except KeyboardInterrupt:
        typer.echo("\nResearch interrupted by user", err=True)
        raise typer.Exit(130)
    except Exception as e:
        logger.error(f"Research failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"\nReport written to {output} ({len(report)} chars)")


async def _research_async(
    query: str,
    budget: ResearchBudget,
    config: ProfileConfig,
    output: Path,
    feedback: bool,
) -> str:
    """Async implementation of research."""
    llm, search = create_from_profile(config)

    async with llm, search:
        combined_query = query
        if feedback and config.research.feedback_questions > 0:
            generator = create_feedback_generator(config, llm)
            questions = await generator.generate(query, config.research.feedback_questions)
            if questions:
                typer.echo("\nTo better understand your research needs, please answer these follow-up questions:")
            answers = [typer.prompt(f"\n{question}", default="", show_default=False) for question in questions]
            combined_query = combine_query(query, questions, answers)

        typer.echo(f"\nStarting research (breadth={budget.breadth}, depth={budget.depth})...\n")

        researcher = create_researcher(config, llm, search)
        result = await researcher.research(
            query=combined_query,
            budget=budget,
            on_progress=print_progress,
        )

        typer.echo(f"\nLearnings ({len(result.learnings)}):\n")
        for learning in result.learnings:
            typer.echo(f"- {learning}")
        typer.echo(f"\nVisited URLs ({len(result.visited_urls)}):\n")
        for url in result.visited_urls:
            typer.echo(f"- {url}")

        typer.echo("\nWriting final report...")
        synthesizer = create_report_synthesizer(config, llm)
        report = await synthesizer.write_report(
            prompt=combined_query,
            learnings=result.learnings,
            visited_urls=result.visited_urls,
        )

    output.write_text(report, encoding="utf-8")
    return report


@app.command()
def profiles():
    """List available configuration profiles."""
    from .config.loader import load_config_file

    config_file = load_config_file(DEFAULT_CONFIG_PATH)

    typer.echo("Available profiles:\n")
    for name, profile in config_file.profiles.items():
        typer.echo(f"  {name}")
        typer.echo(f"    LLM: {profile.llm.backend} ({profile.llm.model or 'default model'})")
        typer.echo(f"    Search: {profile.search.backend}")
        typer.echo(
            f"    Breadth/depth: {profile.research.breadth}/{profile.research.depth}, "
            f"concurrency {profile.research.concurrency_limit}"
        )
        typer.echo()


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
