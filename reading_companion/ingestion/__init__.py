"""Book text ingestion: loading and chapter segmentation."""

from reading_companion.ingestion.loader import (
    NoTextVersionError,
    TextLoader,
    find_text_file,
)
from reading_companion.ingestion.segmenter import MARKER_PATTERNS, ChapterSegmenter

__all__ = [
    "MARKER_PATTERNS",
    "ChapterSegmenter",
    "NoTextVersionError",
    "TextLoader",
    "find_text_file",
]
