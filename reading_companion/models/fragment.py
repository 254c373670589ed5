"""Context fragment data model."""

from pydantic import BaseModel, ConfigDict

# Fragments without a page number are placed at the very start of the book
UNPLACED_PAGE = 0

PREVIEW_LENGTH = 100


class ContextFragment(BaseModel):
    """A passage the reader scanned or typed in, stamped with its page."""

    model_config = ConfigDict(frozen=True)

    text: str
    page_number: int | None = None

    @property
    def effective_page(self) -> int:
        """Page used for spoiler filtering and ordering."""
        if self.page_number is None:
            return UNPLACED_PAGE
        return self.page_number

    @property
    def text_preview(self) -> str:
        """First 100 characters of the text, with an ellipsis if cut."""
        if len(self.text) <= PREVIEW_LENGTH:
            return self.text
        return self.text[:PREVIEW_LENGTH] + "..."
