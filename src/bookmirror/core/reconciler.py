# ABOUTME: One reconciliation pass: scan both trees, link every source book, prune the rest.
# ABOUTME: Failures are isolated per book and per stale file; the pass always runs to the end.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bookmirror.config import MirrorConfig
from bookmirror.core.linker import link_book
from bookmirror.core.remover import safe_unlink
from bookmirror.core.scanner import scan_source, scan_target

logger = logging.getLogger(__name__)


class PruneError(Exception):
    """Raised when a stale target file cannot be removed."""


@dataclass
class SyncResult:
    """Summary of one reconciliation pass."""

    linked: int = 0
    unchanged: int = 0
    skipped: int = 0
    pruned: int = 0
    collisions: int = 0
    errors: int = 0
    error_details: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def changes(self) -> int:
        """Number of filesystem changes made to the target tree."""
        return self.linked + self.pruned


def _prune(target_dir: Path, relative: str) -> None:
    """Remove one stale mirrored file, and its directory if that leaves it empty.

    Raises:
        PruneError: If the file is refused or cannot be removed.
    """
    path = target_dir / relative
    try:
        removed = safe_unlink(path)
    except OSError as exc:
        raise PruneError(f"Cannot remove {path}: {exc}") from exc
    if not removed:
        raise PruneError(f"Refused to remove {path}")

    directory = path.parent
    try:
        if not any(directory.iterdir()):
            directory.rmdir()
            logger.debug("Removed empty directory %s", directory)
    except OSError as exc:
        logger.warning("Could not remove directory %s: %s", directory, exc)


def sync_library(config: MirrorConfig) -> SyncResult:
    """Bring the target tree in line with the source library.

    1. Scan the source books and the currently mirrored files.
    2. Link every source book; each target it confirms is kept.
    3. Prune every mirrored file no source book confirmed.

    Running it twice with an unchanged source makes no changes the
    second time: every target already carries two links and every
    mirrored file is confirmed again.

    Args:
        config: The source and target roots.

    Returns:
        SyncResult with per-step counts and error details.

    Raises:
        OSError: If either root directory cannot be listed.
    """
    result = SyncResult()

    entries = scan_source(config.source_dir)
    stale = scan_target(config.target_dir)

    claimed: dict[str, Path] = {}
    for entry in entries:
        link = link_book(entry.path, entry.metadata, config.target_dir)
        if link.error is not None:
            result.errors += 1
            result.error_details.append((entry.path, link.error))
            continue
        if link.target is None:
            result.skipped += 1
            continue

        if link.target in claimed:
            logger.warning(
                "%s and %s both map to %s; keeping the first",
                claimed[link.target],
                entry.path,
                link.target,
            )
            result.collisions += 1
        else:
            claimed[link.target] = entry.path

        if link.created:
            result.linked += 1
        else:
            result.unchanged += 1
        stale.discard(link.target)

    for relative in sorted(stale):
        try:
            _prune(config.target_dir, relative)
        except PruneError as exc:
            logger.error("Failed to prune %s: %s", relative, exc)
            result.errors += 1
            result.error_details.append((config.target_dir / relative, str(exc)))
            continue
        result.pruned += 1

    logger.info(
        "Sync complete: %d linked, %d unchanged, %d pruned, %d skipped, %d error(s)",
        result.linked,
        result.unchanged,
        result.pruned,
        result.skipped,
        result.errors,
    )
    return result
