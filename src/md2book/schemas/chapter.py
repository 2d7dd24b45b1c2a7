"""Chapter metadata models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChapterMetadata(BaseModel):
    """Title and numbered section titles collected while numbering a chapter."""

    chapter_title: str | None = None
    sections: list[str] = Field(default_factory=list)


class ChapterEntry(BaseModel):
    """A rendered chapter, as listed in the table of contents."""

    number: int = Field(..., ge=1)
    filename: str
    title: str | None = None
    sections: list[str] = Field(default_factory=list)
