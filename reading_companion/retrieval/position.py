"""Map a linear reading position onto a chapter ordinal."""

from reading_companion.models.document import Document
from reading_companion.models.position import PositionQuery


def chapter_for_page(document: Document, current_page: int, total_pages: int) -> int:
    """Estimate which chapter a page falls in.

    Reading progress (``current_page / total_pages``, clamped to 0..1)
    is converted into a target word offset, and chapters are walked in
    order until their cumulative word count reaches it. The comparison
    is done in integers so an exact chapter boundary is never overshot
    by rounding. Word count
    stands in for page layout, so the result is an approximation; it is
    monotonic in ``current_page``.

    Args:
        document: The segmented book.
        current_page: Page the reader is on.
        total_pages: Page count of the reader's edition.

    Returns:
        A valid chapter order index. 0 when ``total_pages`` is not
        positive; the last index once the reader reaches the final page.
    """
    chapters = document.ordered_chapters()
    if total_pages <= 0 or not chapters:
        return 0

    page = min(max(current_page, 0), total_pages)
    if page == total_pages:
        return document.last_index

    # cumulative / total_words >= page / total_pages, kept in integers
    target = page * document.total_word_count
    cumulative = 0
    for chapter in chapters:
        cumulative += chapter.word_count
        if cumulative * total_pages >= target:
            return chapter.order_index
    return document.last_index


def resolve_chapter(document: Document, query: PositionQuery) -> int:
    """Turn a position query into a chapter ordinal within ``document``.

    A direct chapter ordinal wins and is clamped into range. Otherwise
    the page pair goes through :func:`chapter_for_page`. With neither,
    the reader is at chapter 0.
    """
    if query.chapter is not None:
        return min(max(query.chapter, 0), document.last_index)
    if query.total_pages:
        return chapter_for_page(document, query.page, query.total_pages)
    return 0
