# ABOUTME: CLI package for bookmirror, built on Click.
# ABOUTME: Defines the root command group, configures logging, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from bookmirror.cli.commands import inspect_cmd, sync_cmd, watch_cmd


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(package_name="bookmirror")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """bookmirror - mirror a Calibre library into a flat, series-aware layout."""
    _configure_logging(verbose)


cli.add_command(sync_cmd.sync)
cli.add_command(watch_cmd.watch)
cli.add_command(inspect_cmd.inspect)
