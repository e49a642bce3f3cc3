# ABOUTME: The `bookmirror inspect` command for viewing a book's sidecar metadata.
# ABOUTME: Shows the parsed metadata.opf fields and where the book would be mirrored.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookmirror.core.naming import relative_target
from bookmirror.core.scanner import SIDECAR_NAME
from bookmirror.formats.opf import MetadataFormatError, read_opf

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def inspect(path: Path) -> None:
    """Show metadata from a metadata.opf file or a book folder containing one."""
    opf_path = path / SIDECAR_NAME if path.is_dir() else path
    try:
        meta = read_opf(opf_path)
    except MetadataFormatError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    table = Table(title=escape(str(opf_path)), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", escape(meta.title or "") or "[dim]unknown[/dim]")
    table.add_row("Creator", escape(meta.creator or "") or "[dim]unknown[/dim]")
    table.add_row("Identifier", escape(meta.id or "") or "[dim]none[/dim]")
    table.add_row("Series", escape(meta.series or "") or "[dim]none[/dim]")
    if meta.series_index is not None:
        table.add_row("Series Index", str(meta.series_index))
    if meta.title:
        table.add_row("Target", escape(relative_target(meta)))
    else:
        table.add_row("Target", "[yellow]not mirrored (no title)[/yellow]")

    console.print(table)
