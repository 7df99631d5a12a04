"""Command-line interface for Hireflow."""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from hireflow.config import settings
from hireflow.core.errors import DocumentUnreadable
from hireflow.jobs.analyzer import ResumeAnalyzer
from hireflow.jobs.experience import find_mentions
from hireflow.jobs.extractor import TextExtractor

app = typer.Typer(
    name="hireflow",
    help="Hireflow - resume evaluation and application lifecycle engine",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Host to bind to"),
    port: int = typer.Option(settings.api_port, help="Port to bind to"),
    reload: bool = typer.Option(settings.reload, help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print(f"Starting Hireflow on {host}:{port}")
    uvicorn.run(
        "hireflow.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="Hireflow Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Storage", "SQL" if settings.database_url else "in-memory")
    table.add_row("Resume Directory", settings.resume_dir)
    table.add_row("Max Resume Size", f"{settings.max_resume_bytes} bytes")
    table.add_row("Min Skill Match", f"{settings.admission_min_skill_match}%")
    table.add_row("Experience Required", str(settings.admission_requires_experience))

    console.print(table)


@app.command()
def evaluate(
    resume: Path = typer.Argument(..., exists=True, dir_okay=False, help="Resume file (PDF or text)"),
    skill: List[str] = typer.Option([], "--skill", "-s", help="Required skill; repeat for several"),
    experience_months: int = typer.Option(0, "--experience-months", "-e", min=0, help="Required experience in months"),
    show_mentions: bool = typer.Option(False, "--mentions", help="List every experience mention found"),
) -> None:
    """Score a resume against a set of job requirements."""
    try:
        text = TextExtractor().extract(resume.read_bytes())
    except DocumentUnreadable as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=1)

    evaluation = ResumeAnalyzer().evaluate(text, skill, experience_months)

    table = Table(title=f"Evaluation of {resume.name}")
    table.add_column("Measure", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Skill Match", f"{evaluation.skill_match_percent}%")
    table.add_row("Matched Skills", ", ".join(evaluation.matched_skills) or "-")
    table.add_row("Extracted Experience", f"{evaluation.extracted_experience_years} year(s)")
    table.add_row("Experience Match", str(evaluation.experience_match))
    table.add_row("Priority", str(evaluation.priority))
    console.print(table)

    if show_mentions:
        mentions = Table(title="Experience Mentions")
        mentions.add_column("Offset", justify="right")
        mentions.add_column("Mention")
        mentions.add_column("Months", justify="right")
        for mention in find_mentions(text):
            mentions.add_row(str(mention.start), f"{mention.value} {mention.unit}", str(mention.months))
        console.print(mentions)


@app.command()
def version() -> None:
    """Show version information."""
    from hireflow import __version__
    console.print(f"Hireflow v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
