"""Build pipeline: Markdown chapters -> HTML pages, EPUB and PDF."""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from md2book.config import (
    MD2BOOK_BOOK_NAME,
    MD2BOOK_BOOK_TITLE,
    MD2BOOK_DIST_DIR,
    MD2BOOK_MAX_CONCURRENCY,
    MD2BOOK_PANDOC_PATH,
    MD2BOOK_PDF_ENGINE,
    MD2BOOK_RESOURCE_DIR,
    MD2BOOK_SOURCE_DIR,
)
from md2book.document import parse_markdown
from md2book.layout import append_toc, apply_page_head
from md2book.pandoc import convert_html_to_pdf, convert_to_epub
from md2book.schemas import BuildResult, ChapterEntry
from md2book.sources import (
    chapter_number,
    find_chapter_files,
    find_index_file,
    mkdir_async,
    read_markdown,
    read_text_async,
    write_html,
)
from md2book.transform import (
    RenderOptions,
    chapter_filename,
    concat_htmls,
    insert_page_break,
    number_headings,
    render_markdown,
)

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML processing (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

_ASSET_PATTERNS = ("*.css", "*.png")
_CLEAN_PATTERNS = ("*.html", "*.png", "*.css", "*.epub", "*.pdf")
_EPUB_STYLESHEET = "github-markdown.css"
_EPUB_METADATA = "metadata.xml"
_EPUB_COVER = "cover.png"
_EPUB_TEMPLATE = "template.epub"


@dataclass
class BuildOptions:
    """Options for a book build.

    Attributes:
        source_dir: Directory holding ``index.md`` and ``chapterNN.md``.
        dist_dir: Output directory.
        resource_dir: Stylesheets, images and EPUB metadata to ship.
        book_name: Base file name of the concatenated HTML, EPUB and PDF.
        title: Book title used in page heads and EPUB metadata.
        max_concurrency: Chapters rendered at the same time.
        pandoc_path: pandoc executable.
        pdf_engine: PDF engine pandoc prints the HTML book with.
    """

    source_dir: Path = MD2BOOK_SOURCE_DIR
    dist_dir: Path = MD2BOOK_DIST_DIR
    resource_dir: Path = MD2BOOK_RESOURCE_DIR
    book_name: str = MD2BOOK_BOOK_NAME
    title: str = MD2BOOK_BOOK_TITLE
    max_concurrency: int = MD2BOOK_MAX_CONCURRENCY
    pandoc_path: str = MD2BOOK_PANDOC_PATH
    pdf_engine: str = MD2BOOK_PDF_ENGINE

    @property
    def book_html(self) -> Path:
        return self.dist_dir / f"{self.book_name}.html"

    @property
    def book_epub(self) -> Path:
        return self.dist_dir / f"{self.book_name}.epub"

    @property
    def book_pdf(self) -> Path:
        return self.dist_dir / f"{self.book_name}.pdf"


async def build_html(options: BuildOptions | None = None) -> BuildResult:
    """Render the index, every chapter page, and the single-file book.

    Chapter pages get home links and a link to the next chapter. The
    single-file book concatenates every chapter without navigation,
    separated by page breaks.

    Raises:
        SourceNotFoundError: If ``index.md`` or chapter files are missing.
    """
    opts = options or BuildOptions()
    index_path = find_index_file(opts.source_dir)
    chapter_files = find_chapter_files(opts.source_dir)
    last_chapter = chapter_number(chapter_files[-1])

    await mkdir_async(opts.dist_dir, parents=True, exist_ok=True)
    stylesheets = await asyncio.to_thread(_copy_assets, opts.resource_dir, opts.dist_dir)

    semaphore = asyncio.Semaphore(opts.max_concurrency)
    rendered = await asyncio.gather(
        *(
            _build_chapter(path, last_chapter, opts, stylesheets, semaphore)
            for path in chapter_files
        )
    )
    entries = [entry for entry, _ in rendered]
    outputs = [opts.dist_dir / entry.filename for entry in entries]

    index_view = await asyncio.to_thread(render_markdown, await read_markdown(index_path))
    append_toc(index_view, entries)
    apply_page_head(index_view, title=opts.title or None, stylesheets=stylesheets)
    index_output = opts.dist_dir / "index.html"
    await write_html(index_output, index_view)
    logger.info("Wrote %s", index_output)

    book_view = await asyncio.to_thread(concat_htmls, [section for _, section in rendered])
    apply_page_head(book_view, title=opts.title or None, stylesheets=stylesheets)
    await write_html(opts.book_html, book_view)
    logger.info("Wrote %s", opts.book_html)

    return BuildResult(outputs=[index_output, *outputs, opts.book_html], chapters=entries)


async def _build_chapter(
    path: Path,
    last_chapter: int,
    opts: BuildOptions,
    stylesheets: list[str],
    semaphore: asyncio.Semaphore,
) -> tuple[ChapterEntry, BeautifulSoup]:
    async with semaphore:
        number = chapter_number(path)
        source = await read_text_async(path)
        entry, page, section = await asyncio.to_thread(
            _render_chapter, source, number, last_chapter
        )
        title = " - ".join(part for part in (entry.title, opts.title) if part)
        apply_page_head(page, title=title or None, stylesheets=stylesheets)
        output = opts.dist_dir / entry.filename
        await write_html(output, page)
        logger.info("Wrote %s", output)
        return entry, section


def _render_chapter(
    source: str, number: int, last_chapter: int
) -> tuple[ChapterEntry, BeautifulSoup, BeautifulSoup]:
    """Render a chapter as a standalone page and as a section of the book."""
    document = parse_markdown(source)
    metadata = number_headings(document, number)
    page = render_markdown(
        document,
        RenderOptions(chapter=number, last_chapter=last_chapter, home_links=True),
    )

    book_document = parse_markdown(source)
    number_headings(book_document, number)
    section = render_markdown(book_document)
    insert_page_break(section)

    entry = ChapterEntry(
        number=number,
        filename=chapter_filename(number),
        title=metadata.chapter_title,
        sections=metadata.sections,
    )
    return entry, page, section


def _copy_assets(resource_dir: Path, dist_dir: Path) -> list[str]:
    """Copy stylesheets and images; return the stylesheet names."""
    if not resource_dir.is_dir():
        logger.debug("No resource directory at %s", resource_dir)
        return []
    stylesheets: list[str] = []
    for pattern in _ASSET_PATTERNS:
        for asset in sorted(resource_dir.glob(pattern)):
            shutil.copy2(asset, dist_dir / asset.name)
            if asset.suffix == ".css":
                stylesheets.append(asset.name)
    return stylesheets


async def build_epub(options: BuildOptions | None = None) -> BuildResult:
    """Package every chapter into an EPUB with pandoc."""
    opts = options or BuildOptions()
    chapter_files = find_chapter_files(opts.source_dir)
    await mkdir_async(opts.dist_dir, parents=True, exist_ok=True)

    output = await asyncio.to_thread(
        convert_to_epub,
        chapter_files,
        opts.book_epub,
        stylesheet=opts.resource_dir / _EPUB_STYLESHEET,
        metadata=opts.resource_dir / _EPUB_METADATA,
        cover_image=opts.resource_dir / _EPUB_COVER,
        template=opts.resource_dir / _EPUB_TEMPLATE,
        title=opts.title or None,
        pandoc_path=opts.pandoc_path,
    )
    logger.info("Wrote %s", output)
    return BuildResult(outputs=[output])


async def build_pdf(options: BuildOptions | None = None) -> BuildResult:
    """Print the single-file HTML book to PDF, building it first if needed."""
    opts = options or BuildOptions()
    result = BuildResult()
    if not opts.book_html.is_file():
        result = await build_html(opts)

    output = await asyncio.to_thread(
        convert_html_to_pdf,
        opts.book_html,
        opts.book_pdf,
        stylesheets=sorted(opts.dist_dir.glob("*.css")),
        pdf_engine=opts.pdf_engine,
        pandoc_path=opts.pandoc_path,
    )
    logger.info("Wrote %s", output)
    return BuildResult(outputs=[*result.outputs, output], chapters=result.chapters)


async def build_all(options: BuildOptions | None = None) -> BuildResult:
    opts = options or BuildOptions()
    html = await build_html(opts)
    epub = await build_epub(opts)
    pdf = await build_pdf(opts)
    return BuildResult(
        outputs=[*html.outputs, *epub.outputs, *pdf.outputs], chapters=html.chapters
    )


def clean(options: BuildOptions | None = None) -> list[Path]:
    """Remove generated files from the output directory."""
    opts = options or BuildOptions()
    if not opts.dist_dir.is_dir():
        return []
    removed: list[Path] = []
    for pattern in _CLEAN_PATTERNS:
        for path in sorted(opts.dist_dir.glob(pattern)):
            path.unlink()
            removed.append(path)
    logger.info("Removed %d file(s) from %s", len(removed), opts.dist_dir)
    return removed
