"""Reading position data models."""

from pydantic import BaseModel, Field


class PositionQuery(BaseModel):
    """Input to the position mapper.

    Either a (page, total_pages) pair or a direct chapter ordinal. When
    ``chapter`` is set it takes precedence over the page pair.
    """

    page: int = Field(default=0, ge=0)
    total_pages: int | None = Field(default=None, ge=0)
    chapter: int | None = None


class ReadingPosition(BaseModel):
    """Where a reader currently is in a book."""

    current_page: int = Field(default=0, ge=0)
    total_pages: int | None = Field(default=None, ge=0)
    current_chapter: int | None = None

    @property
    def progress_description(self) -> str:
        """Human readable progress, e.g. ``"Page 50 of 200 (25%)"``."""
        if self.total_pages is not None and self.total_pages > 0:
            percent = int(self.current_page / self.total_pages * 100)
            return f"Page {self.current_page} of {self.total_pages} ({percent}%)"
        if self.current_page > 0:
            return f"Page {self.current_page}"
        return "Not started"

    def describe(self) -> str:
        """Label for the position the assembled context stops at."""
        if self.current_chapter is not None and self.current_chapter > 0:
            return f"Chapter {self.current_chapter}"
        if self.current_page > 0:
            return f"Page {self.current_page}"
        return "the beginning"

    def to_query(self) -> PositionQuery:
        return PositionQuery(
            page=self.current_page,
            total_pages=self.total_pages,
            chapter=self.current_chapter,
        )
