# ABOUTME: Target naming policy for the mirrored library.
# ABOUTME: Maps BookMetadata to a deterministic (directory, file name) pair.

import re

from bookmirror.metadata.types import BookMetadata

EBOOK_EXTENSION = ".epub"

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_CREATOR = "Unknown Creator"

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9 ]")


def sanitize(text: str) -> str:
    """Collapse whitespace runs, then drop everything but ASCII letters, digits and spaces."""
    return _UNSAFE_CHARS_RE.sub("", _WHITESPACE_RE.sub(" ", text))


def format_series_index(index: float) -> str:
    """Render a series position as a label zero-padded to at least two characters.

    Whole numbers drop their decimal part (1.0 -> "01"); fractional
    positions keep it (1.5 -> "1.5").
    """
    label = str(int(index)) if index.is_integer() else str(index)
    return label.rjust(2, "0")


def _standalone_stem(metadata: BookMetadata) -> str:
    title = sanitize(metadata.title or "") or UNKNOWN_TITLE
    creator = sanitize(metadata.creator or "") or UNKNOWN_CREATOR
    return f"{title} - {creator}"


def target_path_for(metadata: BookMetadata) -> tuple[str, str]:
    """Compute where a book lives in the target tree.

    Books in a series share one directory named after the series and are
    named by position: ("Books", "Books - 01.epub"). Everything else gets
    its own directory: ("A Book - Jane Doe", "A Book - Jane Doe.epub").

    Returns:
        (directory, file_name) relative to the target root.
    """
    series = sanitize(metadata.series) if metadata.has_series else ""
    if not series:
        stem = _standalone_stem(metadata)
        return stem, f"{stem}{EBOOK_EXTENSION}"

    label = format_series_index(metadata.series_index)
    return series, f"{series} - {label}{EBOOK_EXTENSION}"


def relative_target(metadata: BookMetadata) -> str:
    """The target path as a 'directory/file' string."""
    directory, file_name = target_path_for(metadata)
    return f"{directory}/{file_name}"
