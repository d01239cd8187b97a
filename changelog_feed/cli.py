"""
Command-line interface for the changelog feed.

Uses Typer to expose the regeneration run and a helper that prints the
newest release's permalink. Supports loading .env files for CHANGELOG_SOURCE.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
import typer

from .config import AppConfig, load_config
from .output.pagination import latest_entry, load_entries
from .runner import run_pipeline

app = typer.Typer(add_completion=False)
console = Console()


def _load(
    config: Path | None,
    source: str | None,
    generate_dir: Path | None,
) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if source:
        cfg.source.path = source
    if generate_dir is not None:
        cfg.output.generate_dir = str(generate_dir)
    return cfg


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    source: str | None = typer.Option(
        None, "--source", "-s", help="Changelog file path or URL (overrides config)."
    ),
    generate_dir: Path | None = typer.Option(
        None, "--output", "-o", help="Directory regenerated with one entry per release."
    ),
    page_size: int | None = typer.Option(None, "--page-size", min=1, help="Entries per list page."),
    progress: bool = typer.Option(False, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Regenerate the changelog entries from the source document.

    A source that cannot be read leaves the existing entries in place and
    the command still succeeds, so a site build is never broken by it.
    """
    cfg = _load(config, source, generate_dir)
    if page_size is not None:
        cfg.pagination.page_size = page_size
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    result = run_pipeline(cfg, show_progress=progress, console=console)

    if result.fallback:
        console.print(f"[yellow]Source unavailable, kept {len(result.entries)} existing entries[/yellow]")
        console.print(result.error, style="dim", markup=False)
        return

    table = Table(title="Changelog entries")
    table.add_column("Date")
    table.add_column("Version")
    table.add_column("Authors")
    table.add_column("List page")
    for entry in result.entries:
        table.add_row(entry.date, entry.version, ", ".join(entry.authors), entry.list_page_link or "")
    console.print(table)
    console.print(
        f"Wrote {len(result.written)} entries to {cfg.output.generate_dir} "
        f"({len(result.skipped)} sections skipped)"
    )


@app.command()
def latest(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    generate_dir: Path | None = typer.Option(None, "--output", "-o"),
):
    """Print the permalink of the newest generated release."""
    cfg = _load(config, None, generate_dir)
    entry = latest_entry(load_entries(Path(cfg.output.generate_dir), cfg.pagination.route_base_path))
    if entry is None:
        console.print("[red]No changelog entries found[/red]")
        raise typer.Exit(code=1)
    console.print(entry.permalink)


if __name__ == "__main__":
    app()
