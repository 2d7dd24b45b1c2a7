"""Local configuration for md2book."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, TypeVar

from md2book.exceptions import ConfigError


DEFAULT_SOURCE_DIR = "src"
DEFAULT_DIST_DIR = "dist"
DEFAULT_RESOURCE_DIR = "res"
DEFAULT_BOOK_NAME = "book"
DEFAULT_PANDOC_PATH = "pandoc"
DEFAULT_PDF_ENGINE = "weasyprint"
DEFAULT_PANDOC_TIMEOUT_S = 300.0
DEFAULT_MAX_CONCURRENCY = 4


_Number = TypeVar("_Number", int, float)


def _env_number(name: str, default: _Number, cast: Callable[[str], _Number]) -> _Number:
    raw = os.getenv(name, str(default))
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


# Book layout: sources (index.md, chapterNN.md), output, and static assets.
MD2BOOK_SOURCE_DIR = Path(os.getenv("MD2BOOK_SOURCE_DIR", DEFAULT_SOURCE_DIR)).expanduser()
MD2BOOK_DIST_DIR = Path(os.getenv("MD2BOOK_DIST_DIR", DEFAULT_DIST_DIR)).expanduser()
MD2BOOK_RESOURCE_DIR = Path(os.getenv("MD2BOOK_RESOURCE_DIR", DEFAULT_RESOURCE_DIR)).expanduser()
MD2BOOK_BOOK_NAME = os.getenv("MD2BOOK_BOOK_NAME", DEFAULT_BOOK_NAME)
MD2BOOK_BOOK_TITLE = os.getenv("MD2BOOK_BOOK_TITLE", "")
MD2BOOK_PANDOC_PATH = os.getenv("MD2BOOK_PANDOC_PATH", DEFAULT_PANDOC_PATH)
MD2BOOK_PDF_ENGINE = os.getenv("MD2BOOK_PDF_ENGINE", DEFAULT_PDF_ENGINE)
MD2BOOK_PANDOC_TIMEOUT_S = _env_number("MD2BOOK_PANDOC_TIMEOUT_S", DEFAULT_PANDOC_TIMEOUT_S, float)
MD2BOOK_MAX_CONCURRENCY = _env_number("MD2BOOK_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY, int)
