# ABOUTME: Shared pytest fixtures for bookmirror tests.
# ABOUTME: Provides a Calibre-style source library, an empty target root, and their config.

from pathlib import Path

import pytest

from bookmirror.config import MirrorConfig
from tests.fixtures.library import add_book, write_epub


@pytest.fixture
def source_library(tmp_path: Path) -> Path:
    """Create a Calibre-style source library with known books.

    Layout:
        source/
            README.txt
            Jane Doe/
                A Book/                  A Book.epub, metadata.opf
                Another  Book/           Another_Book.epub, metadata.opf
            John Smith/
                notes.txt
                First Book/              series "Books", index 1
                Third Book/              series "Books", index 3
                Just a Book/             no series
                No Sidecar/              EPUB only, skipped
    """
    root = tmp_path / "source"
    root.mkdir()
    (root / "README.txt").write_text("not a book")

    add_book(
        root, "Jane Doe", "A Book",
        title="A Book", creator="Jane Doe", uuid="00000000-0000-0000-0001",
    )
    add_book(
        root, "Jane Doe", "Another  Book",
        epub_name="Another_Book.epub",
        title="Another  Book", creator="Jane Doe", uuid="00000000-0000-0000-0002",
    )
    add_book(
        root, "John Smith", "First Book",
        title="First Book", creator="John Smith", uuid="00000000-0000-0000-0003",
        series="Books", series_index="1",
    )
    add_book(
        root, "John Smith", "Third Book",
        title="Third Book", creator="John Smith", uuid="00000000-0000-0000-0004",
        series="Books", series_index="3",
    )
    add_book(
        root, "John Smith", "Just a Book",
        title="Just a Book", creator="John Smith", uuid="00000000-0000-0000-0005",
    )
    (root / "John Smith" / "notes.txt").write_text("loose file")
    write_epub(root / "John Smith" / "No Sidecar" / "No Sidecar.epub", "No Sidecar", "John Smith")

    return root


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """An empty target root on the same filesystem as the source library."""
    root = tmp_path / "target"
    root.mkdir()
    return root


@pytest.fixture
def mirror_config(source_library: Path, target_dir: Path) -> MirrorConfig:
    """MirrorConfig pointing at the source library and the empty target."""
    return MirrorConfig(source_dir=source_library, target_dir=target_dir)


EXPECTED_TARGETS = {
    "A Book - Jane Doe/A Book - Jane Doe.epub",
    "Another Book - Jane Doe/Another Book - Jane Doe.epub",
    "Books/Books - 01.epub",
    "Books/Books - 03.epub",
    "Just a Book - John Smith/Just a Book - John Smith.epub",
}


@pytest.fixture
def expected_targets() -> set[str]:
    """Relative target paths one pass over source_library should produce."""
    return set(EXPECTED_TARGETS)
