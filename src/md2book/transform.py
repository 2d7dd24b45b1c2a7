"""Book-specific edits applied to parsed chapters and their rendered views.

Tree-level operations (numbering, navigation) work on a :class:`Document`
before rendering; view-level operations (highlighting, exercises, page
breaks, concatenation) work on the BeautifulSoup view afterwards. None of
them keep state between calls.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Sequence

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import HaskellLexer, JavascriptLexer
from pygments.token import Error, Keyword

from md2book.document import MARKDOWN, Document, Node, NodeKind, html_block, text
from md2book.exceptions import ConcatenationError, MalformedDocumentError, RenderError
from md2book.html_utils import body_elements, find_body, is_heading, load_view
from md2book.schemas import ChapterMetadata

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML processing (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

SUMMARY_MARKER = "まとめ"
EXERCISE_MARKER = "演習"

HOME_LINK_HTML = '<p class="home"><a href="index.html">目次に戻る</a></p>'
NEXT_CHAPTER_LINK_HTML = '<a href="{filename}"><div class="next">次の第{number}章を読む</div></a>'
PAGE_BREAK_CLASS = "pagebreak"
EXERCISE_CLASS = "exercise"

HIGHLIGHT_CLASSES = frozenset({"language-haskell", "language-purescript", "language-javascript"})
# PureScript blocks are highlighted with these grammars too; Haskell wins ties.
_HIGHLIGHT_LEXERS = (HaskellLexer(), JavascriptLexer())
_DECLARED_LEXERS = {"language-haskell": HaskellLexer, "language-javascript": JavascriptLexer}
_HIGHLIGHT_FORMATTER = HtmlFormatter(nowrap=True)


@dataclass
class RenderOptions:
    """Options for rendering a single document.

    Attributes:
        chapter: 1-based number of the chapter being rendered.
        last_chapter: Number of the final chapter of the book.
        home_links: If True, add links back to the index above and below.
    """

    chapter: int | None = None
    last_chapter: int | None = None
    home_links: bool = False


def chapter_filename(number: int) -> str:
    """Output file name for a chapter, e.g. ``chapter06.html``."""
    return f"chapter{number:02d}.html"


def number_headings(document: Document, chapter: int) -> ChapterMetadata:
    """Prefix chapter and section numbers onto the document's headings.

    Only top-level headings are considered. The level-1 heading gets
    ``第{chapter}章 `` and each level-2 heading gets ``{chapter}.{n} ``,
    except summary and exercise headings, which are left unnumbered and
    are not listed in the returned sections.

    Raises:
        ValueError: If ``chapter`` is not a positive integer.
        MalformedDocumentError: If a level-1 or level-2 heading does not
            start with a text run.
    """
    if isinstance(chapter, bool) or not isinstance(chapter, int) or chapter < 1:
        raise ValueError(f"Chapter number must be a positive integer, got {chapter!r}")

    chapter_title: str | None = None
    sections: list[str] = []
    counter = 1

    for node in document.children:
        if node.kind is not NodeKind.HEADING:
            continue
        if node.level == 1:
            chapter_title = _first_text(node)
            node.children.insert(0, text(f"第{chapter}章 "))
            counter = 1
        elif node.level == 2:
            title = _first_text(node).strip()
            if title == SUMMARY_MARKER or EXERCISE_MARKER in title:
                continue
            sections.append(title)
            node.children.insert(0, text(f"{chapter}.{counter} "))
            counter += 1

    return ChapterMetadata(chapter_title=chapter_title, sections=sections)


def _first_text(node: Node) -> str:
    if not node.children:
        raise MalformedDocumentError(f"Level-{node.level} heading has no content")
    first = node.children[0]
    if first.kind is not NodeKind.TEXT:
        raise MalformedDocumentError(
            f"Level-{node.level} heading must start with text, found {first.kind.value}"
        )
    return first.literal or ""


def insert_next_chapter_link(
    document: Document, chapter: int | None, last_chapter: int | None
) -> None:
    """Append a link to the following chapter unless this is the last one."""
    if chapter is None or last_chapter is None or chapter >= last_chapter:
        return
    following = chapter + 1
    document.append(
        html_block(
            NEXT_CHAPTER_LINK_HTML.format(filename=chapter_filename(following), number=following)
        )
    )


def insert_link_to_home(document: Document) -> None:
    """Add a link back to the index both above and below the content."""
    document.append(html_block(HOME_LINK_HTML))
    document.prepend(html_block(HOME_LINK_HTML))


def markdown_to_html(document: Document) -> BeautifulSoup:
    """Render a document and load the result into a mutable HTML view.

    Raises:
        RenderError: If the renderer fails.
    """
    try:
        rendered = MARKDOWN.renderer.render(document.to_tokens(), MARKDOWN.options, {})
    except Exception as exc:
        raise RenderError(f"Failed to render document: {exc}") from exc
    return load_view(rendered)


def highlight_codes(view: BeautifulSoup) -> None:
    """Replace Haskell/PureScript/JavaScript code with highlighted markup."""
    for code in view.select("pre > code"):
        language = " ".join(code.get("class", []))
        if language not in HIGHLIGHT_CLASSES:
            continue
        source = code.get_text()
        try:
            markup = highlight(source, _detect_lexer(source, language), _HIGHLIGHT_FORMATTER)
        except Exception as exc:
            logger.warning("Leaving code block unhighlighted: %s", exc)
            continue
        code.clear()
        for child in list(BeautifulSoup(markup, "html.parser").contents):
            code.append(child.extract())


def _detect_lexer(source: str, language: str = ""):
    """Pick the lexer that reads ``source`` best.

    Fewer error tokens wins, then more keyword tokens. A remaining tie goes
    to the block's declared language, or to Haskell when it has none.
    """
    declared = _DECLARED_LEXERS.get(language, HaskellLexer)

    def score(lexer) -> tuple[int, int, bool]:
        errors = keywords = 0
        for token_type, _ in lexer.get_tokens(source):
            if token_type in Error:
                errors += 1
            elif token_type in Keyword:
                keywords += 1
        return errors, -keywords, not isinstance(lexer, declared)

    return min(_HIGHLIGHT_LEXERS, key=score)


def transform_exercise(view: BeautifulSoup) -> None:
    """Wrap each exercise section in a ``<div class="exercise">``.

    The section is the exercise heading plus every following sibling up to,
    but not including, the next heading of any rank.
    """
    for heading_tag in view.find_all("h2"):
        if heading_tag.get_text().strip() != EXERCISE_MARKER:
            continue
        container = view.new_tag("div", attrs={"class": EXERCISE_CLASS})
        container.append(copy.copy(heading_tag))

        sibling = heading_tag.next_sibling
        while sibling is not None and not is_heading(sibling):
            following = sibling.next_sibling
            container.append(sibling.extract())
            sibling = following

        heading_tag.replace_with(container)


def insert_page_break(view: BeautifulSoup) -> None:
    """Append a page-break hint for concatenated renditions."""
    find_body(view).append(view.new_tag("div", attrs={"class": PAGE_BREAK_CLASS}))


def concat_htmls(views: Sequence[BeautifulSoup]) -> BeautifulSoup:
    """Move the body elements of every view into the first one.

    Raises:
        ConcatenationError: If ``views`` is empty.
    """
    if not views:
        raise ConcatenationError("Cannot concatenate an empty sequence of views")
    head = views[0]
    body = find_body(head)
    for view in views[1:]:
        for element in body_elements(view):
            body.append(element.extract())
    return head


def render_markdown(document: Document, options: RenderOptions | None = None) -> BeautifulSoup:
    """Insert navigation, render, then apply the view-level edits."""
    opts = options or RenderOptions()

    insert_next_chapter_link(document, opts.chapter, opts.last_chapter)
    if opts.home_links:
        insert_link_to_home(document)

    view = markdown_to_html(document)
    highlight_codes(view)
    transform_exercise(view)
    return view
