"""Run pandoc to produce EPUB and PDF renditions."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from md2book.config import MD2BOOK_PANDOC_PATH, MD2BOOK_PANDOC_TIMEOUT_S, MD2BOOK_PDF_ENGINE
from md2book.exceptions import ConversionError

logger = logging.getLogger(__name__)


def run_pandoc(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    pandoc_path: str = MD2BOOK_PANDOC_PATH,
    timeout: float = MD2BOOK_PANDOC_TIMEOUT_S,
) -> str:
    """Invoke pandoc and return its stdout.

    Uses subprocess with an explicit cwd parameter so relative resource
    paths resolve without changing the process working directory.

    Raises:
        ConversionError: If pandoc is missing, times out, or exits non-zero.
    """
    command = [pandoc_path, *args]
    logger.debug("Running %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise ConversionError(f"pandoc not found at {pandoc_path!r}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ConversionError(f"pandoc timed out after {timeout:g}s") from exc

    if result.returncode != 0:
        raise ConversionError(f"Pandoc conversion failed: {result.stderr}")
    if result.stderr:
        logger.warning("pandoc: %s", result.stderr.strip())
    return result.stdout


def convert_to_epub(
    chapter_files: Sequence[Path],
    output: Path,
    *,
    stylesheet: Path | None = None,
    metadata: Path | None = None,
    cover_image: Path | None = None,
    template: Path | None = None,
    title: str | None = None,
    pandoc_path: str = MD2BOOK_PANDOC_PATH,
) -> Path:
    """Package chapter Markdown files into an EPUB 3 book.

    Optional resources are passed to pandoc only when they exist on disk.
    """
    if not chapter_files:
        raise ConversionError("No chapter files to convert to EPUB")

    args = ["--from=markdown", "--to=epub3", f"--output={output}"]
    if stylesheet and stylesheet.is_file():
        args.extend(["--css", str(stylesheet)])
    if metadata and metadata.is_file():
        args.append(f"--epub-metadata={metadata}")
    if cover_image and cover_image.is_file():
        args.append(f"--epub-cover-image={cover_image}")
    if template and template.is_file():
        args.append(f"--template={template}")
    if title:
        args.extend(["--metadata", f"title={title}"])
    args.extend(str(path) for path in chapter_files)

    run_pandoc(args, pandoc_path=pandoc_path)
    return output


def convert_html_to_pdf(
    html_file: Path,
    output: Path,
    *,
    stylesheets: Sequence[Path] = (),
    pdf_engine: str = MD2BOOK_PDF_ENGINE,
    paper_size: str = "a4",
    pandoc_path: str = MD2BOOK_PANDOC_PATH,
) -> Path:
    """Print a rendered HTML book to PDF through pandoc's PDF engine.

    pandoc's HTML reader drops the book's stylesheet links, so every sheet
    is passed again with ``--css``.
    """
    if not html_file.is_file():
        raise ConversionError(f"HTML file not found: {html_file}")

    args = [
        "--from=html",
        f"--output={output.resolve()}",
        f"--pdf-engine={pdf_engine}",
        "--variable",
        f"papersize={paper_size}",
    ]
    for sheet in stylesheets:
        args.extend(["--css", str(sheet.resolve())])
    args.append(html_file.name)
    # Relative image and stylesheet references resolve against the HTML file.
    run_pandoc(args, cwd=html_file.parent, pandoc_path=pandoc_path)
    return output
