"""Tests for the pandoc module."""

from __future__ import annotations

import subprocess
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from md2book.exceptions import ConversionError
from md2book.pandoc import convert_html_to_pdf, convert_to_epub, run_pandoc


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


class TestRunPandoc:
    """Tests for run_pandoc function."""

    def test_returns_stdout(self) -> None:
        """Returns pandoc's stdout on success."""
        with patch("md2book.pandoc.subprocess.run", return_value=_completed(stdout="ok")) as run:
            result = run_pandoc(["--version"], pandoc_path="pandoc")

        assert result == "ok"
        command = run.call_args.args[0]
        assert command == ["pandoc", "--version"]
        assert run.call_args.kwargs["check"] is False

    def test_raises_on_failure(self) -> None:
        """A non-zero exit raises ConversionError with stderr."""
        with patch(
            "md2book.pandoc.subprocess.run",
            return_value=_completed(returncode=64, stderr="unknown option"),
        ):
            with pytest.raises(ConversionError, match="unknown option"):
                run_pandoc(["--bogus"])

    def test_raises_when_missing(self) -> None:
        """A missing executable raises ConversionError."""
        with patch("md2book.pandoc.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ConversionError, match="not found"):
                run_pandoc(["--version"], pandoc_path="/nowhere/pandoc")

    def test_raises_on_timeout(self) -> None:
        """A timeout raises ConversionError."""
        with patch(
            "md2book.pandoc.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="pandoc", timeout=1),
        ):
            with pytest.raises(ConversionError, match="timed out"):
                run_pandoc(["--version"], timeout=1)


class TestConvertToEpub:
    """Tests for convert_to_epub function."""

    def test_builds_command(self, tmp_path: Path) -> None:
        """Chapters and existing resources are passed to pandoc."""
        chapters = [tmp_path / "chapter01.md", tmp_path / "chapter02.md"]
        stylesheet = tmp_path / "book.css"
        stylesheet.write_text("body {}")
        output = tmp_path / "book.epub"

        with patch("md2book.pandoc.subprocess.run", return_value=_completed()) as run:
            result = convert_to_epub(
                chapters,
                output,
                stylesheet=stylesheet,
                metadata=tmp_path / "missing.xml",
                title="本",
            )

        assert result == output
        command = run.call_args.args[0]
        assert "--to=epub3" in command
        assert f"--output={output}" in command
        assert ["--css", str(stylesheet)] == command[command.index("--css") : command.index("--css") + 2]
        assert not any(arg.startswith("--epub-metadata") for arg in command)
        assert "title=本" in command
        assert command[-2:] == [str(path) for path in chapters]

    def test_requires_chapters(self, tmp_path: Path) -> None:
        """An empty chapter list is rejected."""
        with pytest.raises(ConversionError, match="No chapter files"):
            convert_to_epub([], tmp_path / "book.epub")

    @pytest.mark.integration
    def test_real_pandoc(self, tmp_path: Path, pandoc_available: bool) -> None:
        """Produces a valid EPUB archive with a real pandoc."""
        if not pandoc_available:
            pytest.skip("pandoc is not installed")
        chapter = tmp_path / "chapter01.md"
        chapter.write_text("# はじめに\n\n本文。\n", encoding="utf-8")
        output = tmp_path / "book.epub"

        convert_to_epub([chapter], output, title="Test")

        assert zipfile.is_zipfile(output)


class TestConvertHtmlToPdf:
    """Tests for convert_html_to_pdf function."""

    def test_runs_in_html_directory(self, tmp_path: Path) -> None:
        """pandoc runs next to the HTML file with an absolute output path."""
        html_file = tmp_path / "book.html"
        html_file.write_text("<html><body><p>x</p></body></html>")
        output = tmp_path / "book.pdf"

        with patch("md2book.pandoc.subprocess.run", return_value=_completed()) as run:
            convert_html_to_pdf(html_file, output, pdf_engine="weasyprint")

        command = run.call_args.args[0]
        assert run.call_args.kwargs["cwd"] == tmp_path
        assert f"--output={output.resolve()}" in command
        assert "--pdf-engine=weasyprint" in command
        assert command[-1] == "book.html"

    def test_passes_stylesheets(self, tmp_path: Path) -> None:
        """Each stylesheet is handed to pandoc by absolute path before the input."""
        html_file = tmp_path / "book.html"
        html_file.write_text("<html><body><div class=\"pagebreak\"></div></body></html>")
        sheets = [tmp_path / "github-markdown.css", tmp_path / "style.css"]

        with patch("md2book.pandoc.subprocess.run", return_value=_completed()) as run:
            convert_html_to_pdf(html_file, tmp_path / "book.pdf", stylesheets=sheets)

        command = run.call_args.args[0]
        css = [command[i + 1] for i, arg in enumerate(command) if arg == "--css"]
        assert css == [str(sheet.resolve()) for sheet in sheets]
        assert command[-1] == "book.html"

    def test_missing_html(self, tmp_path: Path) -> None:
        """A missing input file raises ConversionError."""
        with pytest.raises(ConversionError, match="not found"):
            convert_html_to_pdf(tmp_path / "book.html", tmp_path / "book.pdf")
