"""md2book: publish Markdown chapters as HTML, EPUB and PDF books."""

from md2book.document import Document, Node, NodeKind, parse_markdown
from md2book.exceptions import (
    ConcatenationError,
    ConfigError,
    ConversionError,
    MalformedDocumentError,
    Md2bookError,
    RenderError,
    SourceNotFoundError,
)
from md2book.schemas import BuildResult, ChapterEntry, ChapterMetadata
from md2book.transform import (
    RenderOptions,
    concat_htmls,
    highlight_codes,
    insert_link_to_home,
    insert_next_chapter_link,
    insert_page_break,
    markdown_to_html,
    number_headings,
    render_markdown,
    transform_exercise,
)

__all__ = [
    "BuildResult",
    "ChapterEntry",
    "ChapterMetadata",
    "ConcatenationError",
    "ConfigError",
    "ConversionError",
    "Document",
    "MalformedDocumentError",
    "Md2bookError",
    "Node",
    "NodeKind",
    "RenderError",
    "RenderOptions",
    "SourceNotFoundError",
    "concat_htmls",
    "highlight_codes",
    "insert_link_to_home",
    "insert_next_chapter_link",
    "insert_page_break",
    "markdown_to_html",
    "number_headings",
    "parse_markdown",
    "render_markdown",
    "transform_exercise",
]
