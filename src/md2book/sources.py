"""Locate book sources and read/write documents."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from md2book.document import Document, parse_markdown
from md2book.exceptions import SourceNotFoundError

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML processing (pip install beautifulsoup4)."
    ) from exc

INDEX_FILENAME = "index.md"
_CHAPTER_RE = re.compile(r"^chapter([0-9]+)\.md$")


def chapter_number(path: Path) -> int:
    """Parse the chapter number out of a ``chapterNN.md`` file name.

    Raises:
        SourceNotFoundError: If the name does not follow the convention.
    """
    match = _CHAPTER_RE.match(path.name)
    if not match:
        raise SourceNotFoundError(f"Not a chapter file name: {path.name}")
    return int(match.group(1))


def find_chapter_files(source_dir: Path) -> list[Path]:
    """List ``chapterNN.md`` files in chapter order.

    Files are ordered by their parsed number, so ``chapter10.md`` follows
    ``chapter9.md`` even without zero padding.

    Raises:
        SourceNotFoundError: If the directory holds no chapter files.
    """
    chapters = [path for path in source_dir.glob("chapter*.md") if _CHAPTER_RE.match(path.name)]
    if not chapters:
        raise SourceNotFoundError(f"No chapter*.md files found in {source_dir}")
    return sorted(chapters, key=chapter_number)


def find_index_file(source_dir: Path) -> Path:
    index = source_dir / INDEX_FILENAME
    if not index.is_file():
        raise SourceNotFoundError(f"No {INDEX_FILENAME} found in {source_dir}")
    return index


async def read_text_async(path: Path, encoding: str = "utf-8") -> str:
    """Read text from a file asynchronously using a thread pool."""
    return await asyncio.to_thread(path.read_text, encoding=encoding)


async def write_text_async(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to a file asynchronously using a thread pool."""
    await asyncio.to_thread(path.write_text, content, encoding=encoding)


async def mkdir_async(path: Path, parents: bool = False, exist_ok: bool = False) -> None:
    await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=exist_ok)


async def read_markdown(path: Path) -> Document:
    """Read and parse a Markdown file."""
    return await asyncio.to_thread(parse_markdown, await read_text_async(path))


async def write_html(path: Path, view: BeautifulSoup) -> None:
    """Serialize a rendered view to ``path``."""
    await write_text_async(path, str(view))
