"""Build output model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from md2book.schemas.chapter import ChapterEntry


class BuildResult(BaseModel):
    """Files written by a build step and the chapters it rendered."""

    outputs: list[Path] = Field(default_factory=list)
    chapters: list[ChapterEntry] = Field(default_factory=list)
