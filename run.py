"""Command-line entry point for the Reading Companion engine."""

import argparse
import logging
import sys
from pathlib import Path

from reading_companion.config import AppConfig, load_config
from reading_companion.ingestion import (
    ChapterSegmenter,
    NoTextVersionError,
    TextLoader,
    find_text_file,
)
from reading_companion.models import Document, ReadingPosition
from reading_companion.retrieval import build_context
from reading_companion.storage.database import DocumentCache, initialize_database

logger = logging.getLogger(__name__)


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("file", type=Path, nargs="?", help="Downloaded text file")
    source.add_argument(
        "--archive-id",
        help="Archive item id, looked up in the configured texts directory",
    )
    parser.add_argument(
        "--id", dest="book_id", help="Book id (default: archive id or file stem)"
    )


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reading-companion",
        description="Segment downloaded book text and build spoiler-free context",
    )
    parser.add_argument("--config", type=Path, default=Path("config.yaml"))
    parser.add_argument("-v", "--verbose", action="store_true")

    subparsers = parser.add_subparsers(dest="command", required=True)

    segment = subparsers.add_parser("segment", help="List the chapters of a book text")
    _add_source_arguments(segment)

    context = subparsers.add_parser("context", help="Print context up to a position")
    _add_source_arguments(context)
    context.add_argument("--page", type=int, default=0)
    context.add_argument("--total-pages", type=int, default=None)
    context.add_argument("--chapter", type=int, default=None)

    return parser


def _resolve_source(
    config: AppConfig, args: argparse.Namespace
) -> tuple[Path, str]:
    """Return the text file to read and the book id it is cached under.

    Raises:
        NoTextVersionError: If an archive id has no downloaded text variant.
    """
    if args.archive_id:
        path = find_text_file(config.storage.texts_dir, args.archive_id)
        return path, args.book_id or args.archive_id
    return args.file, args.book_id or args.file.stem


def _load_document(config: AppConfig, file_path: Path, book_id: str) -> Document:
    raw_text = TextLoader().load(file_path)
    initialize_database(config.storage.sqlite_path)
    cache = DocumentCache(config.storage.sqlite_path)
    segmenter = ChapterSegmenter(config.segmentation)
    return cache.get_or_segment(book_id, raw_text, segmenter)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = _create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    config = load_config(args.config)

    try:
        file_path, book_id = _resolve_source(config, args)
        document = _load_document(config, file_path, book_id)
    except (NoTextVersionError, FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    if args.command == "segment":
        for chapter in document.ordered_chapters():
            print(f"{chapter.order_index:>4}  {chapter.title}  ({chapter.word_count} words)")
        print(f"Total: {len(document.chapters)} chapters, {document.total_word_count} words")
        return 0

    try:
        position = ReadingPosition(
            current_page=args.page,
            total_pages=args.total_pages,
            current_chapter=args.chapter,
        )
    except ValueError as exc:
        logger.error("Invalid reading position: %s", exc)
        return 1

    print(f"Context up to {position.describe()}:")
    print(build_context(document, position, fragments=[]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
