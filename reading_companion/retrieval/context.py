"""Spoiler-bounded context assembly."""

import logging
from collections.abc import Iterable

from reading_companion.models.document import Document
from reading_companion.models.fragment import ContextFragment
from reading_companion.models.position import ReadingPosition
from reading_companion.retrieval.position import resolve_chapter

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = "\n\n"


def fragments_up_to_page(
    fragments: Iterable[ContextFragment], current_page: int
) -> list[ContextFragment]:
    """Return fragments on or before ``current_page``, ordered by page.

    Fragments without a page number count as page 0, so they are always
    included and come first. Fragments on the same page keep their input
    order.
    """
    visible = [f for f in fragments if f.effective_page <= current_page]
    return sorted(visible, key=lambda f: f.effective_page)


def assemble_context(
    document: Document | None,
    current_chapter: int | None,
    fragments: Iterable[ContextFragment],
    current_page: int,
) -> str:
    """Build the text an AI query is allowed to see.

    Downloaded chapter text wins whenever it yields anything up to the
    current chapter; only otherwise are the reader's own fragments used.
    The two sources are never combined.

    Args:
        document: Segmented book text, or None if nothing was downloaded.
        current_chapter: Reader's chapter ordinal; None means chapter 0.
        fragments: Passages the reader captured.
        current_page: Reader's current page, bounding the fragments.

    Returns:
        The spoiler-bounded context, possibly empty.
    """
    if document is not None:
        chapter = current_chapter if current_chapter is not None else 0
        text = document.text_up_to_chapter(chapter)
        if text.strip():
            logger.debug(
                "Using chapter text of %s up to chapter %d", document.document_id, chapter
            )
            return text

    visible = fragments_up_to_page(fragments, current_page)
    logger.debug("Using %d fragments up to page %d", len(visible), current_page)
    return FRAGMENT_SEPARATOR.join(f.text for f in visible)


def build_context(
    document: Document | None,
    position: ReadingPosition,
    fragments: Iterable[ContextFragment],
) -> str:
    """Assemble context for a reading position.

    The chapter is taken from ``position.current_chapter`` when set, or
    estimated from the page and total page count when the document is
    available.
    """
    chapter = position.current_chapter
    if document is not None and chapter is None:
        chapter = resolve_chapter(document, position.to_query())
    return assemble_context(document, chapter, fragments, position.current_page)
