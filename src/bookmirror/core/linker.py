# ABOUTME: Hardlink placement for a single source book in the target tree.
# ABOUTME: Idempotent: targets that already carry extra links are left alone.

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from bookmirror.core.naming import target_path_for
from bookmirror.core.remover import safe_unlink
from bookmirror.metadata.types import BookMetadata

logger = logging.getLogger(__name__)


class LinkError(Exception):
    """Raised when a book's hardlink cannot be placed in the target tree."""


@dataclass
class LinkResult:
    """Outcome of linking one source book."""

    source: Path
    target: str | None = None
    created: bool = False
    error: str | None = None

    @property
    def skipped(self) -> bool:
        """Whether the book was passed over without being attempted."""
        return self.target is None and self.error is None


def _links_to(source: Path, existing: os.stat_result) -> bool:
    try:
        source_stat = source.stat()
    except OSError as exc:
        logger.debug("Cannot inspect %s: %s", source, exc)
        return False
    return os.path.samestat(source_stat, existing)


def _place_link(source: Path, target: Path) -> bool:
    """Ensure target is a hardlink mirroring a source file.

    Returns:
        True if a new link was created, False if the target was already
        mirrored (link count of 2 or more).

    Raises:
        LinkError: On any filesystem failure, or a stray file that can't be removed.
    """
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise LinkError(f"Cannot create directory {target.parent}: {exc}") from exc

    try:
        existing = target.stat()
    except FileNotFoundError:
        existing = None
    except OSError as exc:
        raise LinkError(f"Cannot inspect {target}: {exc}") from exc

    if existing is not None:
        if not stat.S_ISREG(existing.st_mode):
            raise LinkError(f"{target} exists and is not a regular file")
        if existing.st_nlink >= 2:
            if _links_to(source, existing):
                logger.debug("Already mirrored: %s", target)
            else:
                logger.debug("%s is linked to a file other than %s, leaving it", target, source)
            return False

        # A single-link file is no longer tied to any source book
        logger.info("Replacing stray file %s", target)
        try:
            removed = safe_unlink(target)
        except OSError as exc:
            raise LinkError(f"Cannot remove stray file {target}: {exc}") from exc
        if not removed:
            raise LinkError(f"Refused to remove stray file {target}")

    try:
        target.hardlink_to(source)
    except OSError as exc:
        raise LinkError(f"Cannot link {source} to {target}: {exc}") from exc

    logger.info("Linked %s -> %s", source, target)
    return True


def link_book(source: Path, metadata: BookMetadata, target_dir: Path) -> LinkResult:
    """Mirror one source EPUB into the target tree as a hardlink.

    Books without a title are skipped: a missing title means the sidecar
    is too sparse to name the book sensibly.

    Args:
        source: Absolute path of the source EPUB.
        metadata: The book's parsed sidecar metadata.
        target_dir: Root of the target tree.

    Returns:
        LinkResult carrying the relative target path on success, or the
        error message on failure. Never raises for filesystem errors.
    """
    if not metadata.title:
        logger.warning("No title in metadata for %s, skipping", source)
        return LinkResult(source=source)

    directory, file_name = target_path_for(metadata)
    target = target_dir / directory / file_name

    try:
        created = _place_link(source, target)
    except LinkError as exc:
        logger.error("Failed to mirror %s: %s", source, exc)
        return LinkResult(source=source, error=str(exc))

    return LinkResult(source=source, target=f"{directory}/{file_name}", created=created)
