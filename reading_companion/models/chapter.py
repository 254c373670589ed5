"""Chapter data model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens in a text string.

    Args:
        text: The text to count.

    Returns:
        Number of words.
    """
    return len(text.split())


class Chapter(BaseModel):
    """A contiguous, titled span of a book's text.

    Chapters are produced in bulk by the segmenter and never edited;
    ``order_index`` is the zero-based reading-order position.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""
    order_index: int = Field(ge=0)

    _word_count: int = PrivateAttr(default=0)

    def model_post_init(self, __context: Any) -> None:
        self._word_count = count_words(self.content)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def word_count(self) -> int:
        return self._word_count
