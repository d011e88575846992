"""Command-line interface for the appreciation prompt pipeline."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from appreciation_prompts.analysis.evolution import category_label, classify_evolutions
from appreciation_prompts.analysis.periods import periods_for, resolve_period_sequence, window_up_to
from appreciation_prompts.config import settings
from appreciation_prompts.errors import AppreciationPromptError
from appreciation_prompts.journal.synthesis import (
    aggregated_counts,
    count_tags,
    entries_for_period,
    is_isolated,
    resolve_threshold,
    synthesize
)
from appreciation_prompts.journal.tags import tag_label
from appreciation_prompts.loaders import load_student_record, load_style_config
from appreciation_prompts.prompts.builder import PromptAssembler
from appreciation_prompts.prompts.refinement import RefinementKind, build_refinement_prompt
from appreciation_prompts.prompts.templates import TemplateManager

app = typer.Typer(
    name="appreciation-prompts",
    help="Appreciation Prompts - Anonymized prompt construction for student appreciations",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)


class PromptChoice(str, Enum):
    """Which prompt of the bundle to print."""
    ALL = "all"
    APPRECIATION = "appreciation"
    STRENGTHS_WEAKNESSES = "sw"
    NEXT_STEPS = "ns"


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def _fail(message: str):
    console.print(f"[red]❌ {escape(message)}[/red]")
    raise typer.Exit(code=1)


def _load_record(path: Path):
    try:
        return load_student_record(path)
    except FileNotFoundError:
        _fail(f"Record file not found: {path}")
    except AppreciationPromptError as e:
        _fail(e.user_message())
    except (ValidationError, ValueError) as e:
        _fail(f"Invalid student record in {path}: {e}")


def _sequence_for(current_period: str):
    sequence = periods_for(settings.app.period_system)
    if current_period in sequence:
        return sequence
    logger.debug(f"{current_period} is not a {settings.app.period_system.value} period, resolving its own sequence")
    return resolve_period_sequence(current_period)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        settings.app.log_level,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
):
    setup_logging(log_level)


@app.command()
def version():
    """Show version information."""
    from appreciation_prompts import __version__

    console.print(Panel.fit(
        f"[bold blue]Appreciation Prompts[/bold blue]\n"
        f"Version: [green]{__version__}[/green]",
        title="Version Info"
    ))


@app.command()
def prompts(
    record_path: Path = typer.Argument(..., help="Student record (YAML or JSON)"),
    style_path: Optional[Path] = typer.Option(None, "--style", "-s", help="Style settings file (YAML or JSON)"),
    only: PromptChoice = typer.Option(PromptChoice.ALL, "--only", help="Print a single prompt"),
    threshold: Optional[int] = typer.Option(None, "--threshold", "-t", min=1, max=5, help="Journal significance threshold"),
    as_json: bool = typer.Option(False, "--json", help="Print the prompt bundle as JSON"),
):
    """Build the anonymized prompts for a student record."""
    record = _load_record(record_path)

    try:
        style = load_style_config(style_path) if style_path else settings.style.to_style()
    except FileNotFoundError:
        _fail(f"Style file not found: {style_path}")
    except (ValidationError, ValueError) as e:
        _fail(f"Invalid style settings in {style_path}: {e}")

    journal_threshold = threshold or resolve_threshold(
        record.class_id, settings.journal.class_thresholds, settings.journal.default_threshold
    )

    assembler = PromptAssembler(
        style=style,
        policy=settings.evolution.to_policy(),
        journal_threshold=journal_threshold,
        template_manager=TemplateManager.from_directory(settings.app.templates_dir)
    )

    try:
        bundle = assembler.assemble(record, _sequence_for(record.current_period))
    except AppreciationPromptError as e:
        _fail(e.user_message())

    if as_json:
        typer.echo(bundle.model_dump_json(indent=2))
        return

    sections = [
        (PromptChoice.APPRECIATION, "Appréciation", bundle.appreciation_prompt),
        (PromptChoice.STRENGTHS_WEAKNESSES, "Points forts / faibles", bundle.strengths_weaknesses_prompt),
        (PromptChoice.NEXT_STEPS, "Pistes d'amélioration", bundle.next_steps_prompt),
    ]
    for choice, title, text in sections:
        if only in (PromptChoice.ALL, choice):
            console.print(Panel(Text(text), title=title))


@app.command()
def evolution(
    record_path: Path = typer.Argument(..., help="Student record (YAML or JSON)"),
):
    """Show classified grade evolutions up to the record's current period."""
    record = _load_record(record_path)

    try:
        sequence = _sequence_for(record.current_period)
        window = window_up_to(sequence, record.current_period)
        evolutions = [
            e for e in classify_evolutions(sequence, record.periods, settings.evolution.to_policy())
            if e.to_period in window
        ]
    except AppreciationPromptError as e:
        _fail(e.user_message())

    if not evolutions:
        console.print("[yellow]No evolution to show (fewer than two graded periods).[/yellow]")
        return

    table = Table(title="Évolutions")
    table.add_column("Périodes")
    table.add_column("Évolution")
    table.add_column("Écart", justify="right")
    for e in evolutions:
        sign = "+" if e.delta > 0 else ""
        table.add_row(e.span, category_label(e.category), f"{sign}{e.delta:.1f}")
    console.print(table)


@app.command()
def journal(
    record_path: Path = typer.Argument(..., help="Student record (YAML or JSON)"),
    threshold: Optional[int] = typer.Option(None, "--threshold", "-t", min=1, max=5, help="Significance threshold"),
):
    """Show tag counts and the observation synthesis for the current period."""
    record = _load_record(record_path)
    limit = threshold or resolve_threshold(
        record.class_id, settings.journal.class_thresholds, settings.journal.default_threshold
    )

    entries = entries_for_period(record.journal, record.current_period)
    if not entries:
        console.print(f"[yellow]No observations for {record.current_period}.[/yellow]")
        return

    table = Table(title=f"Observations {record.current_period} (seuil {limit})")
    table.add_column("Tag")
    table.add_column("Catégorie")
    table.add_column("Nombre", justify="right")
    for row in aggregated_counts(entries):
        table.add_row(row.label, row.category.value, str(row.count))
    console.print(table)

    counts = count_tags(entries)
    isolated = [entry for entry in entries if is_isolated(entry, counts, limit)]
    if isolated:
        console.print(
            f"[dim]{len(isolated)} isolated entries ignored: "
            f"{', '.join(sorted({tag_label(t) for e in isolated for t in e.tags})) or 'notes only'}[/dim]"
        )

    synthesis = synthesize(entries, limit)
    console.print(Panel(Text(synthesis or "(rien de significatif)"), title="Synthèse"))


@app.command()
def refine(
    kind: str = typer.Argument(
        ..., help="Refinement kind: " + ", ".join(k.value for k in RefinementKind) + " or context-merge"
    ),
    text: Optional[str] = typer.Option(None, "--text", help="Appreciation text to refine"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File holding the appreciation text"),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Context to merge (context kind)"),
):
    """Print a refinement prompt for an existing appreciation."""
    if text is None and file is None:
        _fail("Provide the appreciation with --text or --file")
    if file is not None:
        try:
            text = file.read_text(encoding="utf-8")
        except FileNotFoundError:
            _fail(f"File not found: {file}")

    try:
        prompt = build_refinement_prompt(
            RefinementKind.parse(kind),
            text,
            context=context,
            detailed_factor=settings.refinement.detailed_factor,
            template_manager=TemplateManager.from_directory(settings.app.templates_dir)
        )
    except ValueError as e:
        _fail(str(e))

    typer.echo(prompt)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
