"""Data models for the Reading Companion engine."""

from reading_companion.models.chapter import Chapter, count_words
from reading_companion.models.document import Document, title_from_identifier
from reading_companion.models.fragment import ContextFragment
from reading_companion.models.position import PositionQuery, ReadingPosition

__all__ = [
    "Chapter",
    "ContextFragment",
    "Document",
    "PositionQuery",
    "ReadingPosition",
    "count_words",
    "title_from_identifier",
]
