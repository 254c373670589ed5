"""Loader for downloaded archive text files (plain text and HTML)."""

import logging
from pathlib import Path

import chardet

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".txt": "txt",
    ".html": "html",
    ".htm": "html",
}

# Text variants an archive item may carry, most common first
TEXT_FILE_SUFFIXES: tuple[str, ...] = ("_djvu.txt", ".txt", "_text.txt")


class NoTextVersionError(Exception):
    """Raised when an archive item has no downloadable text version."""

    def __init__(self, archive_id: str) -> None:
        super().__init__(
            f"No downloadable text version for '{archive_id}'. "
            "Passages can still be scanned or entered manually."
        )
        self.archive_id = archive_id


def find_text_file(directory: str | Path, archive_id: str) -> Path:
    """Locate the downloaded text file for an archive item.

    Checks ``<id>_djvu.txt`` (OCR output), ``<id>.txt`` and
    ``<id>_text.txt`` in that order.

    Args:
        directory: Directory holding downloaded archive files.
        archive_id: The archive item identifier.

    Returns:
        Path to the first variant that exists.

    Raises:
        NoTextVersionError: If none of the variants exist.
    """
    base = Path(directory)
    for suffix in TEXT_FILE_SUFFIXES:
        candidate = base / f"{archive_id}{suffix}"
        if candidate.is_file():
            return candidate
    raise NoTextVersionError(archive_id)


class TextLoader:
    """Reads downloaded book text into a single string."""

    def load(self, file_path: str | Path) -> str:
        """Read a text or HTML file.

        Args:
            file_path: Path to the downloaded file.

        Returns:
            The book text.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file format is not supported.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        file_format = self._detect_format(path)
        if file_format == "html":
            return self._load_html(path)
        return self._load_txt(path)

    def _detect_format(self, file_path: Path) -> str:
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def _load_txt(self, file_path: Path) -> str:
        """Read a plain text file with encoding detection.

        Tries UTF-8 first, then uses chardet, then Latin-1 which
        decodes any byte sequence.

        Args:
            file_path: Path to the text file.

        Returns:
            The file content as a string.
        """
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            pass

        raw_bytes = file_path.read_bytes()
        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence") or 0

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode %s as %s, using latin-1", file_path, encoding)
            return raw_bytes.decode("latin-1")

    def _load_html(self, file_path: Path) -> str:
        """Extract text from an HTML file using BeautifulSoup.

        Strips scripts and styles; block boundaries become newlines so
        chapter headings stay on their own lines.

        Args:
            file_path: Path to the HTML file.

        Returns:
            Clean extracted text.
        """
        from bs4 import BeautifulSoup

        try:
            raw = self._load_txt(file_path)
            soup = BeautifulSoup(raw, "lxml")

            for tag in soup(["script", "style"]):
                tag.decompose()

            return soup.get_text(separator="\n")
        except Exception:
            logger.exception("Failed to parse HTML: %s", file_path)
            return ""
