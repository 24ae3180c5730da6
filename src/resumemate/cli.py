"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from resumemate.config import load_config
from resumemate.models.document import TailoredDocument
from resumemate.models.gateway import Provenance
from resumemate.models.profile import CandidateProfile, TargetProfile
from resumemate.models.scoring import ScoreBreakdown
from resumemate.pipeline.gateway import ResilienceGateway
from resumemate.pipeline.generation_source import LLMGenerationSource
from resumemate.pipeline.quality_gate import repair as repair_document
from resumemate.pipeline.scorer import score_candidate, score_document

app = typer.Typer(
    name="resumemate",
    help="Tailor a resume to a job description with scoring and deterministic repair.",
    no_args_is_help=True,
)
console = Console()

LABEL_COLORS = {"Strong": "green", "Moderate": "yellow", "Weak": "red"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_model(path: Path, model, what: str):
    if not path.exists():
        console.print(f"[red]{what} file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]Invalid {what} file {path}:[/red]\n{e}")
        raise typer.Exit(1)


def _read_text(path: Path | None) -> str:
    if path is None:
        return ""
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _score_table(breakdown: ScoreBreakdown, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Category")
    table.add_column("Score", justify="right")
    for name, value in breakdown.categories.model_dump().items():
        table.add_row(name.replace("_", " ").title(), str(value))
    color = LABEL_COLORS[breakdown.label.value]
    table.add_row("[bold]Overall[/bold]", f"[bold {color}]{breakdown.score} ({breakdown.label.value})[/bold {color}]")
    return table


def _print_blockers(breakdown: ScoreBreakdown) -> None:
    for blocker in breakdown.blockers:
        body = f"{blocker.why}\n[dim]{blocker.how}[/dim]"
        if blocker.before_after:
            body += f"\n\n[red]- {blocker.before_after.before}[/red]\n[green]+ {blocker.before_after.after}[/green]"
        console.print(Panel(body, title=blocker.title))


@app.command()
def generate(
    candidate: Path = typer.Option(..., "--candidate", "-c", help="Candidate profile JSON"),
    target: Path = typer.Option(..., "--target", "-t", help="Target role profile JSON"),
    resume_text: Path = typer.Option(None, "--resume-text", help="Raw resume text file"),
    job_text: Path = typer.Option(None, "--job-text", help="Raw job description text file"),
    output: Path = typer.Option(None, "--output", "-o", help="Where to write the document JSON"),
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
    timeout: float = typer.Option(None, "--timeout", help="Per-attempt timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Generate a tailored resume and cover letter."""
    _setup_logging(verbose)
    config = load_config(config_path)
    candidate_profile = _load_model(candidate, CandidateProfile, "candidate")
    target_profile = _load_model(target, TargetProfile, "target")

    gateway = ResilienceGateway(LLMGenerationSource.from_env(config.llm), config=config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Generating tailored documents...", total=None)
        result = asyncio.run(
            gateway.generate(
                candidate_profile,
                target_profile,
                _read_text(resume_text),
                _read_text(job_text),
                timeout=timeout,
            )
        )

    if output is None:
        name = (target_profile.company or "tailored").replace(" ", "_")
        output = Path(f"./output/{name}_resume.json")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.document.model_dump_json(indent=2), encoding="utf-8")
    console.print(f"\n[green]Document saved: {output}[/green]")

    source = "AI" if result.provenance is Provenance.LLM else "fast draft"
    console.print(
        Panel(
            f"Score: {result.score_before.score} → [bold]{result.score_after.score}[/bold] "
            f"({result.score_after.label.value})\n"
            f"Source: {source}"
            + (f"\n[yellow]{result.reason}[/yellow]" if result.reason else "")
            + f"\nQuality fixes: {len(result.issues)} | Boost actions: {len(result.boost_actions)}"
            + f"\nElapsed: {result.elapsed_seconds:.1f}s",
            title="Result",
        )
    )
    if verbose:
        for action in result.boost_actions:
            console.print(f"[dim]- {action}[/dim]")


@app.command()
def score(
    target: Path = typer.Option(..., "--target", "-t", help="Target role profile JSON"),
    candidate: Path = typer.Option(None, "--candidate", "-c", help="Candidate profile JSON"),
    document: Path = typer.Option(None, "--document", "-d", help="Tailored document JSON"),
    as_json: bool = typer.Option(False, "--json", help="Print the breakdown as JSON"),
) -> None:
    """Score a candidate profile or a tailored document against a target role."""
    if (candidate is None) == (document is None):
        console.print("[red]Pass exactly one of --candidate or --document[/red]")
        raise typer.Exit(1)

    target_profile = _load_model(target, TargetProfile, "target")
    if candidate is not None:
        breakdown = score_candidate(_load_model(candidate, CandidateProfile, "candidate"), target_profile)
    else:
        breakdown = score_document(_load_model(document, TailoredDocument, "document"), target_profile)

    if as_json:
        console.print_json(breakdown.model_dump_json())
        return
    console.print(_score_table(breakdown, "Match score"))
    _print_blockers(breakdown)


@app.command()
def repair(
    document: Path = typer.Argument(help="Tailored document JSON"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the repaired document here"),
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """Run the quality gate on a tailored document and list what it fixed."""
    config = load_config(config_path)
    doc = _load_model(document, TailoredDocument, "document")
    fixed, issues = repair_document(doc, config.quality)

    if not issues:
        console.print("[green]No issues found[/green]")
    else:
        table = Table(title=f"{len(issues)} issue(s) fixed")
        table.add_column("Kind")
        table.add_column("Location")
        table.add_column("Detail")
        for issue in issues:
            table.add_row(issue.kind.value, issue.location, issue.detail)
        console.print(table)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(fixed.model_dump(), indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"[green]Repaired document saved: {output}[/green]")


if __name__ == "__main__":
    app()
