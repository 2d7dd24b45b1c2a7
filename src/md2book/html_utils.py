"""Shared HTML view utilities."""

from __future__ import annotations

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML processing (pip install beautifulsoup4)."
    ) from exc

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


def load_view(body_html: str) -> BeautifulSoup:
    """Load an HTML body fragment into a full document view.

    The fragment is wrapped in ``<html><head></head><body>`` so every view
    has a body to append to, even when the fragment is empty.
    """
    return BeautifulSoup(f"<html><head></head><body>{body_html}</body></html>", "lxml")


def find_body(view: BeautifulSoup) -> Tag:
    """Return the ``<body>`` of a view, creating one when it is missing."""
    if view.body:
        return view.body
    body = view.new_tag("body")
    root = view.find("html")
    (root or view).append(body)
    return body


def body_elements(view: BeautifulSoup) -> list[Tag]:
    """Top-level element children of the body, in document order."""
    return [child for child in find_body(view).children if isinstance(child, Tag)]


def is_heading(node: object) -> bool:
    return isinstance(node, Tag) and node.name in HEADING_TAGS
