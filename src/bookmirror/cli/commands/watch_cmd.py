# ABOUTME: The `bookmirror watch` command for continuous mirroring.
# ABOUTME: Syncs once, then re-syncs on source changes until SIGINT or SIGTERM.

import logging
import signal
import threading
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bookmirror.cli.options import source_option, target_option
from bookmirror.config import ConfigurationError, load_config
from bookmirror.core.watcher import watch_library

logger = logging.getLogger(__name__)

console = Console()


def _install_stop_handlers(stop_event: threading.Event) -> None:
    def _request_stop(signum, frame):
        logger.info("Received %s", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)


@click.command("watch")
@source_option
@target_option
@click.option(
    "--settle",
    "settle_seconds",
    type=click.FloatRange(min=0.0),
    default=1.0,
    show_default=True,
    help="Seconds to wait after a change before re-syncing.",
)
def watch(source_dir: Path | None, target_dir: Path | None, settle_seconds: float) -> None:
    """Mirror the source library and keep the mirror in sync as it changes."""
    try:
        config = load_config(source_dir, target_dir)
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    stop_event = threading.Event()
    _install_stop_handlers(stop_event)

    passes = watch_library(config, stop_event, settle_seconds=settle_seconds)
    console.print(f"[dim]Stopped after {passes} sync pass(es).[/dim]")
