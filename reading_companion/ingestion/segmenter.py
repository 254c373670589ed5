"""Layered chapter segmenter for raw book text."""

import logging
import re
from collections.abc import Callable

from reading_companion.config import SegmentationConfig
from reading_companion.models.chapter import Chapter
from reading_companion.models.document import Document, title_from_identifier

logger = logging.getLogger(__name__)

# Chapter marker patterns in priority order. Only the first pattern with
# any match is used; matches of later patterns are never mixed in.
MARKER_PATTERNS: dict[str, re.Pattern[str]] = {
    "chapter_upper": re.compile(r"^CHAPTER[ \t]+(?:[IVXLCDM]+|\d+)\b", re.MULTILINE),
    # Only the word is case-insensitive; lowercase numerals would match
    # prose such as "chapter did not"
    "chapter_any_case": re.compile(
        r"^(?i:chapter)[ \t]+(?:[IVXLCDM]+|\d+)\b", re.MULTILINE
    ),
    "book_upper": re.compile(r"^BOOK[ \t]+(?:[IVXLCDM]+|\d+)\b", re.MULTILINE),
    "asterisk_divider": re.compile(r"^\*\*\*[ \t]*$", re.MULTILINE),
}

FALLBACK_TITLE = "Full Text"

Strategy = Callable[[str, str], list[Chapter] | None]


def normalize_text(raw_text: str) -> str:
    """Drop carriage returns so CRLF and LF inputs scan identically."""
    return raw_text.replace("\r", "")


class ChapterSegmenter:
    """Splits raw book text into an ordered Document of chapters.

    Segmentation strategy (priority order, first tier with a result wins):
    1. Markers: split on the highest-priority chapter marker pattern
       that occurs in the text (CHAPTER / Chapter / BOOK / ``***``)
    2. Blank runs: split on runs of blank lines when that yields more
       than five substantial sections
    3. Fixed size: consecutive word chunks of ``chunk_words`` words
    4. Whole text: a single "Full Text" chapter

    Args:
        config: SegmentationConfig with chunk size and blank-run thresholds.
    """

    def __init__(self, config: SegmentationConfig | None = None) -> None:
        self._config = config or SegmentationConfig()
        self._strategies: list[tuple[str, Strategy]] = [
            ("markers", self._split_on_markers),
            ("blank_runs", self._split_on_blank_runs),
            ("fixed_size", self._split_into_parts),
        ]

    def segment(
        self,
        raw_text: str,
        document_id: str,
        title: str | None = None,
        author: str | None = None,
    ) -> Document:
        """Segment raw text into a Document.

        Never fails: text without usable structure degrades to weaker
        tiers and ultimately to a single whole-text chapter.

        Args:
            raw_text: The full downloaded book text.
            document_id: Identifier used to namespace chapter ids.
            title: Optional title; derived from ``document_id`` if omitted.
            author: Optional author passed through to the Document.

        Returns:
            A Document with at least one chapter.
        """
        text = normalize_text(raw_text)

        chapters: list[Chapter] = []
        for tier, strategy in self._strategies:
            result = strategy(text, document_id)
            if result:
                logger.debug(
                    "Segmented %s with tier '%s' into %d chapters",
                    document_id,
                    tier,
                    len(result),
                )
                chapters = result
                break

        if not chapters:
            logger.debug("No structure found in %s, using whole text", document_id)
            chapters = [
                Chapter(
                    id=f"{document_id}_0",
                    title=FALLBACK_TITLE,
                    content=text.strip(),
                    order_index=0,
                )
            ]

        return Document(
            document_id=document_id,
            title=title if title is not None else title_from_identifier(document_id),
            author=author,
            chapters=tuple(chapters),
        )

    def _split_on_markers(self, text: str, document_id: str) -> list[Chapter] | None:
        """Split text at the matches of the first marker pattern that occurs.

        Each chapter runs from the end of its marker to the start of the
        next one; the marker text is the title. Text before the first
        marker is discarded. Empty chapters are kept.

        Args:
            text: Normalized book text.
            document_id: Namespace for chapter ids.

        Returns:
            Chapters, or None if no marker pattern matches anywhere.
        """
        for name, pattern in MARKER_PATTERNS.items():
            matches = list(pattern.finditer(text))
            if not matches:
                continue

            logger.debug("Marker pattern '%s' matched %d times", name, len(matches))
            chapters: list[Chapter] = []
            for i, match in enumerate(matches):
                end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
                chapters.append(
                    Chapter(
                        id=f"{document_id}_{i}",
                        title=match.group().strip(),
                        content=text[match.end() : end].strip(),
                        order_index=i,
                    )
                )
            return chapters

        return None

    def _split_on_blank_runs(self, text: str, document_id: str) -> list[Chapter] | None:
        """Split text on runs of consecutive newlines.

        Segments of ``min_section_chars`` characters or fewer (after
        trimming) are ignored. The split only counts when at least
        ``min_sections`` substantial segments remain.

        Args:
            text: Normalized book text.
            document_id: Namespace for chapter ids.

        Returns:
            "Section N" chapters, or None if there are too few segments.
        """
        separator = re.compile(r"\n{%d,}" % self._config.blank_run_newlines)
        segments = [segment.strip() for segment in separator.split(text)]
        sections = [s for s in segments if len(s) > self._config.min_section_chars]

        if len(sections) < self._config.min_sections:
            return None

        return [
            Chapter(
                id=f"{document_id}_{i}",
                title=f"Section {i + 1}",
                content=section,
                order_index=i,
            )
            for i, section in enumerate(sections)
        ]

    def _split_into_parts(self, text: str, document_id: str) -> list[Chapter] | None:
        """Split text into consecutive chunks of ``chunk_words`` words.

        Words are rejoined with single spaces, so original line breaks
        are not preserved in this tier.

        Args:
            text: Normalized book text.
            document_id: Namespace for chapter ids.

        Returns:
            "Part N" chapters, or None if the text has no words.
        """
        words = text.split()
        if not words:
            return None

        size = self._config.chunk_words
        chapters: list[Chapter] = []
        for i, start in enumerate(range(0, len(words), size)):
            chapters.append(
                Chapter(
                    id=f"{document_id}_{i}",
                    title=f"Part {i + 1}",
                    content=" ".join(words[start : start + size]),
                    order_index=i,
                )
            )
        return chapters
