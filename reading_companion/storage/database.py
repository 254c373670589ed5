"""SQLite storage for segmented documents."""

import hashlib
import logging
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from reading_companion.ingestion.segmenter import ChapterSegmenter
from reading_companion.models.document import Document

logger = logging.getLogger(__name__)


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def initialize_database(db_path: str | Path) -> None:
    """Create the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS documents (
                book_id TEXT PRIMARY KEY,
                source_hash TEXT NOT NULL,
                chapter_count INTEGER NOT NULL,
                total_word_count INTEGER NOT NULL,
                document_json TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


def hash_text(raw_text: str) -> str:
    """SHA-256 hex digest identifying a raw text version."""
    return hashlib.sha256(raw_text.encode("utf-8")).hexdigest()


class DocumentCache:
    """Caller-owned cache of segmented documents, keyed by book id.

    Each entry remembers the hash of the raw text it was built from; a
    lookup with different raw text drops the stale entry.

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def get(self, book_id: str, raw_text: str) -> Document | None:
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT source_hash, document_json FROM documents WHERE book_id = ?",
                (book_id,),
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            logger.debug("Cache miss for %s", book_id)
            return None

        if row["source_hash"] != hash_text(raw_text):
            logger.debug("Raw text of %s changed, invalidating cached document", book_id)
            self.invalidate(book_id)
            return None

        try:
            return Document.model_validate_json(row["document_json"])
        except ValidationError:
            logger.exception("Discarding unreadable cached document for %s", book_id)
            self.invalidate(book_id)
            return None

    def put(self, book_id: str, raw_text: str, document: Document) -> None:
        conn = get_connection(self._db_path)
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO documents
                    (book_id, source_hash, chapter_count, total_word_count, document_json)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    book_id,
                    hash_text(raw_text),
                    len(document.chapters),
                    document.total_word_count,
                    document.model_dump_json(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def invalidate(self, book_id: str) -> None:
        conn = get_connection(self._db_path)
        try:
            conn.execute("DELETE FROM documents WHERE book_id = ?", (book_id,))
            conn.commit()
        finally:
            conn.close()

    def get_or_segment(
        self,
        book_id: str,
        raw_text: str,
        segmenter: ChapterSegmenter,
        title: str | None = None,
        author: str | None = None,
    ) -> Document:
        """Return the cached Document, segmenting and storing it on a miss.

        Args:
            book_id: Owning book identifier, also used as the document id.
            raw_text: Current raw text of the book.
            segmenter: Segmenter used on a miss.
            title: Optional title passed to the segmenter.
            author: Optional author passed to the segmenter.

        Returns:
            The Document for this exact raw text.
        """
        document = self.get(book_id, raw_text)
        if document is not None:
            logger.debug("Cache hit for %s", book_id)
            return document

        document = segmenter.segment(raw_text, book_id, title=title, author=author)
        self.put(book_id, raw_text, document)
        return document
