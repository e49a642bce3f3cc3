# ABOUTME: The `bookmirror sync` command for a single reconciliation pass.
# ABOUTME: Links new books, prunes stale mirrored files, and prints a summary.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bookmirror.cli.options import source_option, target_option
from bookmirror.config import ConfigurationError, load_config
from bookmirror.core.reconciler import sync_library

console = Console()


@click.command("sync")
@source_option
@target_option
def sync(source_dir: Path | None, target_dir: Path | None) -> None:
    """Run one sync pass from the source library to the mirror."""
    try:
        config = load_config(source_dir, target_dir)
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    result = sync_library(config)

    parts = [
        f"[green]{result.linked} linked[/green]",
        f"{result.unchanged} unchanged",
        f"[yellow]{result.pruned} pruned[/yellow]",
    ]
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")
    console.print(", ".join(parts))

    if result.collisions:
        console.print(
            f"[yellow]{result.collisions} book(s) share a target name with another book "
            f"and were not mirrored separately.[/yellow]"
        )

    if result.error_details:
        console.print(f"\n[yellow]{result.errors} path(s) could not be synced:[/yellow]")
        for path, msg in result.error_details:
            console.print(f"  [dim]{escape(str(path))}:[/dim] {escape(msg)}")
