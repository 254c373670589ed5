"""Tests for the downloaded text loader."""

from pathlib import Path

import pytest

from reading_companion.ingestion.loader import (
    SUPPORTED_FORMATS,
    NoTextVersionError,
    TextLoader,
    find_text_file,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "sample_texts"


@pytest.fixture
def loader() -> TextLoader:
    return TextLoader()


class TestTextLoaderTxt:
    """Tests for plain text loading."""

    def test_load_utf8_file(self, loader: TextLoader, tmp_path: Path) -> None:
        f = tmp_path / "book.txt"
        f.write_text("CHAPTER I\nIt was a dark and stormy night.", encoding="utf-8")
        assert loader.load(f).startswith("CHAPTER I")

    def test_load_non_utf8_file(self, loader: TextLoader, tmp_path: Path) -> None:
        content = "The café on the corner served crème brûlée every evening. " * 20
        f = tmp_path / "book.txt"
        f.write_bytes(content.encode("cp1252"))

        result = loader.load(f)
        assert "The caf" in result
        assert "corner served" in result

    def test_load_empty_file(self, loader: TextLoader, tmp_path: Path) -> None:
        f = tmp_path / "empty.txt"
        f.write_text("", encoding="utf-8")
        assert loader.load(f) == ""

    def test_load_fixture(self, loader: TextLoader) -> None:
        result = loader.load(FIXTURES_DIR / "sample_chapters.txt")
        assert "CHAPTER III" in result


class TestTextLoaderHtml:
    """Tests for HTML loading."""

    def test_strips_tags(self, loader: TextLoader, tmp_path: Path) -> None:
        html = "<html><body><h2>CHAPTER I</h2><p>The lamp was lit.</p></body></html>"
        f = tmp_path / "book.html"
        f.write_text(html, encoding="utf-8")

        result = loader.load(f)
        assert "The lamp was lit." in result
        assert "<p>" not in result

    def test_heading_stays_on_own_line(self, loader: TextLoader, tmp_path: Path) -> None:
        html = "<html><body><h2>CHAPTER I</h2><p>The lamp was lit.</p></body></html>"
        f = tmp_path / "book.htm"
        f.write_text(html, encoding="utf-8")

        lines = [line.strip() for line in loader.load(f).splitlines()]
        assert "CHAPTER I" in lines

    def test_removes_scripts(self, loader: TextLoader, tmp_path: Path) -> None:
        html = (
            "<html><head><script>track()</script></head>"
            "<body><style>.x{}</style><p>Story text</p></body></html>"
        )
        f = tmp_path / "book.html"
        f.write_text(html, encoding="utf-8")

        result = loader.load(f)
        assert "Story text" in result
        assert "track" not in result
        assert ".x{}" not in result


class TestDetectFormat:
    def test_supported_extensions(self, loader: TextLoader) -> None:
        for ext, fmt in SUPPORTED_FORMATS.items():
            assert loader._detect_format(Path(f"book{ext}")) == fmt

    def test_case_insensitive(self, loader: TextLoader) -> None:
        assert loader._detect_format(Path("book.TXT")) == "txt"
        assert loader._detect_format(Path("book.Html")) == "html"

    def test_unsupported_extension_raises(self, loader: TextLoader) -> None:
        with pytest.raises(ValueError, match="Unsupported file format"):
            loader._detect_format(Path("book.epub"))


class TestLoaderErrors:
    def test_nonexistent_file_raises(self, loader: TextLoader) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load("/nonexistent/book.txt")

    def test_unsupported_format_raises(self, loader: TextLoader, tmp_path: Path) -> None:
        f = tmp_path / "book.pdf"
        f.touch()
        with pytest.raises(ValueError, match="Unsupported file format"):
            loader.load(f)


class TestFindTextFile:
    def test_prefers_djvu_text(self, tmp_path: Path) -> None:
        (tmp_path / "dracula.txt").write_text("plain")
        (tmp_path / "dracula_djvu.txt").write_text("ocr")
        assert find_text_file(tmp_path, "dracula").name == "dracula_djvu.txt"

    def test_plain_text_before_alternate(self, tmp_path: Path) -> None:
        (tmp_path / "dracula_text.txt").write_text("alt")
        (tmp_path / "dracula.txt").write_text("plain")
        assert find_text_file(tmp_path, "dracula").name == "dracula.txt"

    def test_alternate_naming(self, tmp_path: Path) -> None:
        (tmp_path / "dracula_text.txt").write_text("alt")
        assert find_text_file(tmp_path, "dracula").name == "dracula_text.txt"

    def test_no_text_version(self, tmp_path: Path) -> None:
        (tmp_path / "dracula.pdf").touch()
        with pytest.raises(NoTextVersionError, match="No downloadable text version") as exc:
            find_text_file(tmp_path, "dracula")
        assert exc.value.archive_id == "dracula"
