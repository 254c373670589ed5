"""Spoiler-safe retrieval: position mapping and context assembly."""

from reading_companion.retrieval.context import (
    assemble_context,
    build_context,
    fragments_up_to_page,
)
from reading_companion.retrieval.position import chapter_for_page, resolve_chapter

__all__ = [
    "assemble_context",
    "build_context",
    "chapter_for_page",
    "fragments_up_to_page",
    "resolve_chapter",
]
