# ABOUTME: Directory scanners for the source library and the mirrored target tree.
# ABOUTME: Pairs each book's EPUB with its metadata.opf and lists already-mirrored files.

import logging
from dataclasses import dataclass
from pathlib import Path

from bookmirror.core.naming import EBOOK_EXTENSION
from bookmirror.formats.opf import MetadataFormatError, read_opf
from bookmirror.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

SIDECAR_NAME = "metadata.opf"


@dataclass(frozen=True)
class SourceEntry:
    """One book in the source library: its EPUB file and parsed sidecar."""

    path: Path
    metadata: BookMetadata


def _subdirectories(directory: Path) -> list[Path]:
    """Sorted immediate subdirectories; an unlistable directory yields none."""
    try:
        return sorted(child for child in directory.iterdir() if child.is_dir())
    except OSError as exc:
        # Folders can vanish while Calibre is reorganizing the library
        logger.warning("Cannot list %s: %s", directory, exc)
        return []


def _read_book_dir(book_dir: Path) -> SourceEntry | None:
    """Build a SourceEntry for a book directory, or None if it doesn't qualify."""
    try:
        files = sorted(child for child in book_dir.iterdir() if child.is_file())
    except OSError as exc:
        logger.warning("Cannot list %s: %s", book_dir, exc)
        return None

    epubs = [f for f in files if f.suffix.lower() == EBOOK_EXTENSION]
    sidecar = book_dir / SIDECAR_NAME
    if not epubs or sidecar not in files:
        return None

    try:
        metadata = read_opf(sidecar)
    except MetadataFormatError as exc:
        logger.warning("Skipping %s: %s", book_dir, exc)
        return None

    return SourceEntry(path=epubs[0], metadata=metadata)


def scan_source(source_dir: Path) -> list[SourceEntry]:
    """Walk an Author/Book library and collect every qualifying book.

    A book directory qualifies when it holds an .epub file and a
    metadata.opf sidecar. Directories without both are skipped silently;
    sidecars that fail to parse are logged and skipped.

    Args:
        source_dir: Root of the source library.

    Returns:
        SourceEntry list in sorted directory order.

    Raises:
        OSError: If the source root itself cannot be listed.
    """
    author_dirs = sorted(child for child in source_dir.iterdir() if child.is_dir())

    entries: list[SourceEntry] = []
    for author_dir in author_dirs:
        for book_dir in _subdirectories(author_dir):
            entry = _read_book_dir(book_dir)
            if entry is not None:
                entries.append(entry)

    logger.debug("Found %d book(s) in %s", len(entries), source_dir)
    return entries


def scan_target(target_dir: Path) -> set[str]:
    """List mirrored EPUBs one level below the target root.

    Files directly in the target root are never part of the mirror and
    are not reported.

    Returns:
        Relative paths of the form "directory/file.epub".

    Raises:
        OSError: If the target root itself cannot be listed.
    """
    found: set[str] = set()
    for directory in sorted(child for child in target_dir.iterdir() if child.is_dir()):
        try:
            children = list(directory.iterdir())
        except OSError as exc:
            logger.warning("Cannot list %s: %s", directory, exc)
            continue
        for child in children:
            if child.name.endswith(EBOOK_EXTENSION) and child.is_file():
                found.add(f"{directory.name}/{child.name}")
    return found
