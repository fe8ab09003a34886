"""CLI interface for magic-ideas."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from magic_ideas.config import load_config
from magic_ideas.errors import LibraryLoadError
from magic_ideas.library import (
    SECTION_TITLES,
    SortMode,
    filter_ideas,
    group_sections,
    sort_ideas,
)
from magic_ideas.loaders import load_ideas, load_usage, write_result
from magic_ideas.models import OrganizationResult, UsageContext
from magic_ideas.organizer import organize
from magic_ideas.scoring import priority_score

app = typer.Typer(
    name="magic-ideas",
    help="Organize a saved-ideas library: clusters, duplicates, tag suggestions.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from magic_ideas import __version__

        console.print(f"magic-ideas {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Magic Ideas - organize a performer's saved-idea library."""
    pass


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _load_inputs(
    library: Path, usage_file: Path | None
) -> tuple[list, dict[str, UsageContext]]:
    """Load ideas and usage, exiting with an error message on failure."""
    try:
        ideas = load_ideas(library)
        usage = load_usage(usage_file) if usage_file else {}
    except LibraryLoadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    return ideas, usage


def _print_result(result: OrganizationResult, titles: dict[str, str]) -> None:
    def name(idea_id: str) -> str:
        return titles.get(idea_id) or idea_id

    table = Table(title="Clusters")
    table.add_column("Label")
    table.add_column("Ideas", justify="right")
    table.add_column("Members")
    for cluster in result.clusters:
        members = ", ".join(name(i) for i in cluster.idea_ids[:5])
        if len(cluster.idea_ids) > 5:
            members += ", ..."
        table.add_row(cluster.label, str(len(cluster.idea_ids)), members)
    console.print(table)

    if result.duplicates:
        table = Table(title="Possible duplicates")
        table.add_column("Idea A")
        table.add_column("Idea B")
        table.add_column("Score", justify="right")
        for pair in result.duplicates:
            table.add_row(name(pair.a), name(pair.b), f"{pair.score:.2f}")
        console.print(table)
    else:
        console.print("[green]No likely duplicates found.[/green]")

    if result.tag_suggestions:
        table = Table(title="Tag suggestions")
        table.add_column("Idea")
        table.add_column("Suggested tags")
        for suggestion in result.tag_suggestions:
            table.add_row(name(suggestion.idea_id), ", ".join(suggestion.suggested))
        console.print(table)


@app.command(name="organize")
def organize_cmd(
    library: Annotated[
        Path,
        typer.Argument(help="JSON file with the saved ideas."),
    ],
    usage_file: Annotated[
        Optional[Path],
        typer.Option(
            "--usage",
            "-u",
            help="JSON object of usage context keyed by idea id.",
        ),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to a .magic-ideas.toml file.",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON."),
    ] = False,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Also write the JSON result to this file.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
) -> None:
    """Cluster, de-duplicate and suggest tags for a library."""
    _setup_logging(verbose)
    config = load_config(config_path)
    ideas, usage = _load_inputs(library, usage_file)

    result = organize(ideas, usage, config=config)

    if output is not None:
        write_result(result, output)
        if not as_json:
            console.print(f"Result written to: {output}")

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    if not ideas:
        console.print("[yellow]No ideas found.[/yellow]")
        raise typer.Exit(0)

    console.print(f"[green]Organized {len(ideas)} idea(s)[/green]")
    _print_result(result, {idea.id: idea.title for idea in ideas})


@app.command(name="list")
def list_cmd(
    library: Annotated[
        Path,
        typer.Argument(help="JSON file with the saved ideas."),
    ],
    usage_file: Annotated[
        Optional[Path],
        typer.Option(
            "--usage",
            "-u",
            help="JSON object of usage context keyed by idea id.",
        ),
    ] = None,
    sort_by: Annotated[
        SortMode,
        typer.Option("--sort", "-s", help="Sort order."),
    ] = SortMode.RECENT,
    idea_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Only ideas of this type."),
    ] = None,
    tag: Annotated[
        Optional[str],
        typer.Option("--tag", help="Only ideas with this tag."),
    ] = None,
    query: Annotated[
        str,
        typer.Option("--query", "-q", help="Search title, content and tags."),
    ] = "",
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to a .magic-ideas.toml file.",
        ),
    ] = None,
) -> None:
    """List the library by section with priority scores."""
    config = load_config(config_path)
    ideas, usage = _load_inputs(library, usage_file)
    now = datetime.now(tz=UTC)

    shown = sort_ideas(
        filter_ideas(ideas, idea_type=idea_type, tag=tag, query=query),
        sort_by,
        usage,
        now=now,
        config=config,
    )
    if not shown:
        console.print("[yellow]No matching ideas.[/yellow]")
        raise typer.Exit(0)

    for section, members in group_sections(shown).items():
        if not members:
            continue
        table = Table(title=f"{SECTION_TITLES[section]} ({len(members)})")
        table.add_column("ID")
        table.add_column("Title")
        table.add_column("Type")
        table.add_column("Tags")
        table.add_column("Score", justify="right")
        for idea in members:
            table.add_row(
                idea.id,
                idea.title or "Untitled",
                idea.type or "-",
                ", ".join(idea.tags),
                str(priority_score(idea, usage.get(idea.id), now=now, config=config)),
            )
        console.print(table)


if __name__ == "__main__":
    app()
