"""
SprintFit - Main entry point.

Scores resumes against job descriptions and opens an optional
recruiter chat about the best (or any chosen) match.

Usage:
    # One resume against one job description
    sprintfit -c resume.pdf -d job.pdf

    # Rank several resumes for one job, then chat about them
    sprintfit -t many-to-one -c alice.pdf -c bob.pdf -d job.pdf --chat

    # Rank several jobs for one resume as JSON
    sprintfit -t one-to-many -c resume.pdf -d a.txt -d b.txt --json
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from matcher.document_loader import load_documents
from pipeline.session import MatchSession
from shared.config import get_settings
from shared.exceptions import SprintFitError
from shared.logger import setup_logging
from shared.models import BatchRun, Speaker, Topology

CHAT_HELP = "Ask a question, '/focus N' to switch result, '/quit' to leave."


def format_leaderboard(batch_run: BatchRun) -> str:
    """Render ranked results as plain text."""
    lines = []
    for rank, result in enumerate(batch_run.results, start=1):
        marker = "*" if result.id == batch_run.focus_id else " "
        lines.append(
            f"{marker}{rank:>2}. {result.display_name}  "
            f"{result.hybrid_score}% ({result.band})  "
            f"keywords: {result.lexical_rate}%  ai: {result.semantic_rate:g}%"
        )
        lines.append(f"     Verdict: {result.verdict}")
        if result.missing_skills:
            lines.append(f"     Missing: {', '.join(result.missing_skills)}")
        if result.matched_keywords:
            lines.append(f"     Matched: {', '.join(result.matched_keywords)}")
    return "\n".join(lines)


async def read_line(label: str) -> str:
    """Read one line on a worker thread, off the event loop."""
    return await asyncio.to_thread(click.prompt, label, default="", show_default=False)


async def chat_loop(session: MatchSession, credential: Optional[str]) -> None:
    """Prompt for questions until the user quits."""
    click.echo(f"\n{CHAT_HELP}")
    while True:
        focused = session.batch_run.focused
        text = await read_line(f"[{focused.display_name}] you")
        command = text.strip()

        if not command:
            continue
        if command in ("/quit", "/exit"):
            return
        if command.startswith("/focus"):
            try:
                index = int(command.split()[1]) - 1
                if index < 0:
                    raise IndexError(index)
                result = session.batch_run.results[index]
            except (IndexError, ValueError):
                click.echo(f"Pick a rank between 1 and {len(session.batch_run.results)}")
                continue
            session.refocus(result.id)
            click.echo(f"Now discussing {result.display_name} (conversation cleared)")
            continue

        try:
            turn = await session.ask(text, credential)
        except SprintFitError as e:
            click.echo(f"Error: {e}")
            continue
        label = "assistant" if turn.speaker is Speaker.ASSISTANT else "you"
        click.echo(f"{label}: {turn.text}")


@click.command()
@click.option(
    "--topology",
    "-t",
    type=click.Choice([t.value for t in Topology]),
    default=Topology.ONE_TO_ONE.value,
    help="How resumes and job descriptions are paired (default: one-to-one)",
)
@click.option(
    "--candidate",
    "-c",
    "candidate_paths",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    help="Resume file (PDF, YAML or text); repeat for many-to-one",
)
@click.option(
    "--description",
    "-d",
    "description_paths",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    help="Job description file (PDF, YAML or text); repeat for one-to-many",
)
@click.option(
    "--api-key",
    envvar="SPRINTFIT_API_KEY",
    default=None,
    help="OpenAI API key (falls back to OPENAI_API_KEY)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print results as JSON",
)
@click.option(
    "--chat",
    is_flag=True,
    help="Open a recruiter chat about the results",
)
def main(
    topology: str,
    candidate_paths: tuple[Path, ...],
    description_paths: tuple[Path, ...],
    api_key: Optional[str],
    as_json: bool,
    chat: bool,
):
    """SprintFit - hybrid resume / job description matcher."""
    settings = get_settings()
    setup_logging(settings)

    async def run() -> None:
        session = MatchSession(Topology(topology), settings=settings)
        session.upload_candidates(load_documents(candidate_paths))
        session.upload_descriptions(load_documents(description_paths))

        batch_run = await session.run(api_key)
        if batch_run is None:
            return

        if as_json:
            click.echo(
                json.dumps(
                    {
                        "topology": batch_run.topology.value,
                        "focus_id": batch_run.focus_id,
                        "results": [r.model_dump(mode="json") for r in batch_run.results],
                    },
                    indent=2,
                )
            )
        else:
            click.echo(format_leaderboard(batch_run))

        if chat and batch_run.results:
            await chat_loop(session, api_key)

    try:
        asyncio.run(run())
    except SprintFitError as e:
        logger.debug(f"Aborted: {e!r}")
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
