"""Tests for spoiler-bounded context assembly."""

import pytest

from reading_companion.ingestion.segmenter import ChapterSegmenter
from reading_companion.models import (
    Chapter,
    ContextFragment,
    Document,
    ReadingPosition,
)
from reading_companion.retrieval.context import (
    assemble_context,
    build_context,
    fragments_up_to_page,
)


@pytest.fixture
def document() -> Document:
    text = (
        "CHAPTER I\nThe keeper lit the lamp.\n"
        "CHAPTER II\nA ship appeared.\n"
        "CHAPTER III\nThe stranger was the keeper's son."
    )
    return ChapterSegmenter().segment(text, "lighthouse")


@pytest.fixture
def fragments() -> list[ContextFragment]:
    return [
        ContextFragment(page_number=5, text="A"),
        ContextFragment(page_number=1, text="B"),
    ]


class TestDocumentPath:
    def test_document_text_up_to_chapter(self, document: Document) -> None:
        result = assemble_context(document, 1, [], current_page=0)
        assert result == "The keeper lit the lamp.\n\nA ship appeared."

    def test_never_includes_later_chapters(self, document: Document) -> None:
        result = assemble_context(document, 1, [], current_page=0)
        assert "stranger" not in result

    def test_unset_chapter_defaults_to_first(self, document: Document) -> None:
        assert assemble_context(document, None, [], 0) == "The keeper lit the lamp."

    def test_document_wins_over_fragments(
        self, document: Document, fragments: list[ContextFragment]
    ) -> None:
        result = assemble_context(document, 0, fragments, current_page=10)
        assert result == "The keeper lit the lamp."
        assert "B" not in result.split()

    def test_negative_chapter_falls_back_to_fragments(
        self, document: Document, fragments: list[ContextFragment]
    ) -> None:
        assert assemble_context(document, -1, fragments, current_page=5) == "B\n\nA"


class TestFragmentPath:
    def test_fragments_sorted_by_page(self, fragments: list[ContextFragment]) -> None:
        assert assemble_context(None, None, fragments, current_page=5) == "B\n\nA"

    def test_fragments_past_current_page_excluded(
        self, fragments: list[ContextFragment]
    ) -> None:
        assert assemble_context(None, None, fragments, current_page=4) == "B"

    def test_empty_document_text_falls_back(
        self, fragments: list[ContextFragment]
    ) -> None:
        empty = Document(
            document_id="blank",
            chapters=(Chapter(id="blank_0", title="Full Text", content="", order_index=0),),
        )
        assert assemble_context(empty, 0, fragments, current_page=5) == "B\n\nA"

    def test_unplaced_fragment_treated_as_page_zero(self) -> None:
        fragments = [
            ContextFragment(page_number=3, text="later"),
            ContextFragment(text="unplaced"),
        ]
        assert assemble_context(None, None, fragments, 0) == "unplaced"
        assert assemble_context(None, None, fragments, 3) == "unplaced\n\nlater"

    def test_nothing_available_is_empty_string(self) -> None:
        assert assemble_context(None, None, [], current_page=100) == ""


class TestFragmentsUpToPage:
    def test_same_page_keeps_input_order(self) -> None:
        fragments = [
            ContextFragment(page_number=2, text="first"),
            ContextFragment(page_number=1, text="zero"),
            ContextFragment(page_number=2, text="second"),
        ]
        visible = fragments_up_to_page(fragments, 2)
        assert [f.text for f in visible] == ["zero", "first", "second"]

    def test_does_not_mutate_input(self, fragments: list[ContextFragment]) -> None:
        fragments_up_to_page(fragments, 10)
        assert [f.text for f in fragments] == ["A", "B"]


class TestBuildContext:
    def test_explicit_chapter(self, document: Document) -> None:
        position = ReadingPosition(current_page=1, total_pages=300, current_chapter=2)
        result = build_context(document, position, [])
        assert "stranger" in result

    def test_chapter_estimated_from_page(self, document: Document) -> None:
        position = ReadingPosition(current_page=1, total_pages=300)
        assert build_context(document, position, []) == "The keeper lit the lamp."

    def test_page_on_chapter_boundary_excludes_next_chapter(self) -> None:
        first = " ".join(f"a{i}" for i in range(63))
        second = " ".join(f"b{i}" for i in range(14))
        doc = ChapterSegmenter().segment(f"CHAPTER I\n{first}\nCHAPTER II\n{second}", "b")
        position = ReadingPosition(current_page=9, total_pages=11)

        result = build_context(doc, position, [])
        assert result == first
        assert "b0" not in result

    def test_last_page_gives_whole_book(self, document: Document) -> None:
        position = ReadingPosition(current_page=300, total_pages=300)
        assert build_context(document, position, []) == document.text_up_to_chapter(2)

    def test_without_document_uses_fragments(
        self, fragments: list[ContextFragment]
    ) -> None:
        position = ReadingPosition(current_page=5)
        assert build_context(None, position, fragments) == "B\n\nA"
