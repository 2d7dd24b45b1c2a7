"""Shared schemas for md2book."""

from md2book.schemas.build import BuildResult
from md2book.schemas.chapter import ChapterEntry, ChapterMetadata

__all__ = ["BuildResult", "ChapterEntry", "ChapterMetadata"]
