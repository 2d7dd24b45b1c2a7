"""Index table of contents and page head for rendered views."""

from __future__ import annotations

from html import escape
from typing import Iterable

from md2book.html_utils import find_body
from md2book.schemas import ChapterEntry

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML processing (pip install beautifulsoup4)."
    ) from exc


def render_toc(entries: Iterable[ChapterEntry]) -> str:
    """Render chapters and their numbered sections as a nested list."""
    lines = ['<nav class="toc">', "<ol>"]
    for entry in entries:
        label = f"第{entry.number}章"
        if entry.title:
            label += f" {entry.title}"
        lines.append(f'<li><a href="{escape(entry.filename)}">{escape(label)}</a>')
        if entry.sections:
            lines.append("<ol>")
            for position, section in enumerate(entry.sections, start=1):
                lines.append(f"<li>{entry.number}.{position} {escape(section)}</li>")
            lines.append("</ol>")
        lines.append("</li>")
    lines.extend(["</ol>", "</nav>"])
    return "\n".join(lines)


def append_toc(view: BeautifulSoup, entries: Iterable[ChapterEntry]) -> None:
    fragment = BeautifulSoup(render_toc(entries), "html.parser")
    body = find_body(view)
    for child in list(fragment.contents):
        body.append(child.extract())


def apply_page_head(
    view: BeautifulSoup, *, title: str | None = None, stylesheets: Iterable[str] = ()
) -> None:
    """Fill in charset, title and stylesheet links of the view's ``<head>``."""
    head = view.head
    if head is None:
        head = view.new_tag("head")
        root = view.find("html")
        (root or view).insert(0, head)

    head.append(view.new_tag("meta", attrs={"charset": "utf-8"}))
    if title:
        title_tag = view.new_tag("title")
        title_tag.string = title
        head.append(title_tag)
    for href in stylesheets:
        head.append(view.new_tag("link", attrs={"rel": "stylesheet", "href": href}))
