# ABOUTME: Shared Click options for bookmirror CLI commands.
# ABOUTME: Provides the --source and --target options with environment variable fallback.

from pathlib import Path

import click

from bookmirror.config import SOURCE_ENV, TARGET_ENV

source_option = click.option(
    "--source",
    "source_dir",
    type=click.Path(path_type=Path),
    envvar=SOURCE_ENV,
    default=None,
    help=f"Root of the Calibre-style source library (env: {SOURCE_ENV}).",
)

target_option = click.option(
    "--target",
    "target_dir",
    type=click.Path(path_type=Path),
    envvar=TARGET_ENV,
    default=None,
    help=f"Root of the mirrored library (env: {TARGET_ENV}).",
)
