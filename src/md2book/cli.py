"""Command-line entry point for md2book."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Sequence

from md2book.build import BuildOptions, build_all, build_epub, build_html, build_pdf, clean
from md2book.exceptions import Md2bookError
from md2book.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

_BUILDERS = {
    "html": build_html,
    "epub": build_epub,
    "pdf": build_pdf,
    "all": build_all,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md2book", description="Build HTML, EPUB and PDF renditions of a Markdown book."
    )
    parser.add_argument("command", choices=[*_BUILDERS, "clean"], help="What to build")
    parser.add_argument("--source", type=Path, help="Directory with index.md and chapterNN.md")
    parser.add_argument("--dist", type=Path, help="Output directory")
    parser.add_argument("--resources", type=Path, help="Stylesheets, images and EPUB metadata")
    parser.add_argument("--name", help="Base file name of the book outputs")
    parser.add_argument("--title", help="Book title")
    parser.add_argument("--jobs", type=int, help="Chapters rendered concurrently")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    """Override configured defaults with the flags that were given."""
    opts = BuildOptions()
    overrides = {
        "source_dir": args.source,
        "dist_dir": args.dist,
        "resource_dir": args.resources,
        "book_name": args.name,
        "title": args.title,
        "max_concurrency": args.jobs,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(opts, name, value)
    return opts


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.jobs is not None and args.jobs < 1:
        parser.error("--jobs must be at least 1")

    configure_logging(args.verbose)
    opts = options_from_args(args)

    try:
        if args.command == "clean":
            clean(opts)
        else:
            result = asyncio.run(_BUILDERS[args.command](opts))
            logger.info("Built %d file(s)", len(result.outputs))
    except Md2bookError as exc:
        logger.error("%s", exc)
        return 1
    return 0
