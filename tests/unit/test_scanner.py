# ABOUTME: Unit tests for the source and target directory scanners.
# ABOUTME: Tests book folder qualification, sidecar parsing failures, and target listing.

import logging
from pathlib import Path

import pytest

from bookmirror.core.scanner import SIDECAR_NAME, SourceEntry, scan_source, scan_target
from bookmirror.metadata import BookMetadata
from tests.fixtures.library import add_book, write_epub


class TestScanSource:
    """scan_source pairs EPUBs with their metadata.opf sidecars."""

    def test_finds_all_qualifying_books(self, source_library: Path) -> None:
        entries = scan_source(source_library)
        assert len(entries) == 5

    def test_series_book_entry(self, source_library: Path) -> None:
        entries = scan_source(source_library)
        assert SourceEntry(
            path=source_library / "John Smith" / "First Book" / "First Book.epub",
            metadata=BookMetadata(
                id="00000000-0000-0000-0003",
                title="First Book",
                creator="John Smith",
                series="Books",
                series_index=1.0,
            ),
        ) in entries

    def test_standalone_book_entry(self, source_library: Path) -> None:
        entries = scan_source(source_library)
        assert SourceEntry(
            path=source_library / "Jane Doe" / "A Book" / "A Book.epub",
            metadata=BookMetadata(
                id="00000000-0000-0000-0001",
                title="A Book",
                creator="Jane Doe",
            ),
        ) in entries

    def test_epub_name_need_not_match_folder(self, source_library: Path) -> None:
        entries = scan_source(source_library)
        paths = {entry.path for entry in entries}
        assert source_library / "Jane Doe" / "Another  Book" / "Another_Book.epub" in paths

    def test_skips_folder_without_sidecar(self, source_library: Path) -> None:
        entries = scan_source(source_library)
        assert all(entry.path.parent.name != "No Sidecar" for entry in entries)

    def test_skips_folder_without_epub(self, tmp_path: Path) -> None:
        book_dir = tmp_path / "Author" / "Book"
        book_dir.mkdir(parents=True)
        (book_dir / SIDECAR_NAME).write_text("<package><metadata/></package>")
        (book_dir / "Book.mobi").write_bytes(b"fake mobi")

        assert scan_source(tmp_path) == []

    def test_uppercase_extension_qualifies(self, tmp_path: Path) -> None:
        book_dir = tmp_path / "Author" / "Book"
        write_epub(book_dir / "Book.EPUB", "Book", "Author")
        (book_dir / SIDECAR_NAME).write_text(
            "<package><metadata/></package>", encoding="utf-8"
        )

        entries = scan_source(tmp_path)
        assert [entry.path.name for entry in entries] == ["Book.EPUB"]

    def test_sidecar_name_is_exact(self, tmp_path: Path) -> None:
        book_dir = tmp_path / "Author" / "Book"
        write_epub(book_dir / "Book.epub", "Book", "Author")
        (book_dir / "Metadata.opf").write_text("<package><metadata/></package>")

        assert scan_source(tmp_path) == []

    def test_ignores_books_directly_under_author_level(self, tmp_path: Path) -> None:
        """Only Author/Book/ folders are books, not Author/ itself."""
        author_dir = tmp_path / "Author"
        write_epub(author_dir / "Loose.epub", "Loose", "Author")
        (author_dir / SIDECAR_NAME).write_text("<package><metadata/></package>")

        assert scan_source(tmp_path) == []

    def test_invalid_sidecar_is_skipped_and_logged(
        self, source_library: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        broken = source_library / "Jane Doe" / "Broken"
        write_epub(broken / "Broken.epub", "Broken", "Jane Doe")
        (broken / SIDECAR_NAME).write_text("<invalid>content</invalid>")

        with caplog.at_level(logging.WARNING):
            entries = scan_source(source_library)

        assert len(entries) == 5
        assert "Broken" in caplog.text

    def test_results_in_sorted_order(self, source_library: Path) -> None:
        entries = scan_source(source_library)
        paths = [entry.path for entry in entries]
        assert paths == sorted(paths)

    def test_empty_library(self, tmp_path: Path) -> None:
        assert scan_source(tmp_path) == []

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            scan_source(tmp_path / "missing")

    def test_duplicate_titles_across_authors(self, tmp_path: Path) -> None:
        add_book(tmp_path, "Ann", "Same Title", title="Same Title", creator="Ann")
        add_book(tmp_path, "Bob", "Same Title", title="Same Title", creator="Bob")

        entries = scan_source(tmp_path)
        assert {entry.metadata.creator for entry in entries} == {"Ann", "Bob"}


class TestScanTarget:
    """scan_target lists mirrored EPUBs one level below the root."""

    def test_empty_target(self, target_dir: Path) -> None:
        assert scan_target(target_dir) == set()

    def test_ignores_files_at_root(self, target_dir: Path) -> None:
        (target_dir / "dummy.epub").write_text("Dummy content")
        assert scan_target(target_dir) == set()

    def test_lists_files_in_subdirectories(self, target_dir: Path) -> None:
        subdir = target_dir / "subdir"
        subdir.mkdir()
        (subdir / "dummy.epub").write_text("Dummy content")

        assert scan_target(target_dir) == {"subdir/dummy.epub"}

    def test_only_epub_files(self, target_dir: Path) -> None:
        subdir = target_dir / "subdir"
        subdir.mkdir()
        (subdir / "dummy.epub").write_text("Dummy content")
        (subdir / "dummy.txt").write_text("Dummy content")

        assert scan_target(target_dir) == {"subdir/dummy.epub"}

    def test_does_not_descend_further(self, target_dir: Path) -> None:
        nested = target_dir / "subdir" / "nested"
        nested.mkdir(parents=True)
        (nested / "deep.epub").write_text("Dummy content")

        assert scan_target(target_dir) == set()
