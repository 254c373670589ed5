"""Segmented book document: the queryable chapter index."""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    PrivateAttr,
    computed_field,
    model_validator,
)

from reading_companion.models.chapter import Chapter

CHAPTER_SEPARATOR = "\n\n"


def title_from_identifier(document_id: str) -> str:
    """Derive a display title from an archive identifier.

    Underscores become spaces and every word is capitalized, e.g.
    ``"pride_and_prejudice"`` becomes ``"Pride And Prejudice"``.
    """
    return " ".join(word.capitalize() for word in document_id.replace("_", " ").split())


class Document(BaseModel):
    """The complete segmented result for one book.

    Holds the chapters in reading order together with the precomputed
    total word count. A Document always has at least one chapter and its
    order indices run 0..n-1 without gaps.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    title: str = ""
    author: str | None = None
    chapters: tuple[Chapter, ...]

    _ordered: tuple[Chapter, ...] = PrivateAttr(default=())
    _total_word_count: int = PrivateAttr(default=0)

    @model_validator(mode="after")
    def _check_chapters(self) -> "Document":
        if not self.chapters:
            raise ValueError("Document must contain at least one chapter")
        indices = sorted(chapter.order_index for chapter in self.chapters)
        if indices != list(range(len(indices))):
            raise ValueError(
                f"Chapter order indices must be contiguous from 0, got {indices}"
            )
        return self

    def model_post_init(self, __context: Any) -> None:
        self._ordered = tuple(sorted(self.chapters, key=lambda c: c.order_index))
        self._total_word_count = sum(c.word_count for c in self._ordered)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_word_count(self) -> int:
        return self._total_word_count

    @property
    def last_index(self) -> int:
        """Order index of the final chapter."""
        return len(self._ordered) - 1

    def ordered_chapters(self) -> list[Chapter]:
        """Return every chapter sorted by order index."""
        return list(self._ordered)

    def text_up_to_chapter(self, index: int) -> str:
        """Concatenate the content of all chapters up to and including ``index``.

        Chapters are joined in reading order with a blank line between
        them. A negative index yields an empty string; an index past the
        last chapter yields the whole document.

        Args:
            index: Highest chapter order index to include.

        Returns:
            The text a reader at chapter ``index`` has already seen.
        """
        if index < 0:
            return ""
        return CHAPTER_SEPARATOR.join(
            chapter.content for chapter in self._ordered if chapter.order_index <= index
        )
