"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from md2book.cli import build_parser, main, options_from_args


class TestOptionsFromArgs:
    """Tests for options_from_args function."""

    def test_overrides_given_flags(self, tmp_path: Path) -> None:
        """Flags that were given replace configured defaults."""
        args = build_parser().parse_args(
            ["html", "--source", str(tmp_path), "--name", "purescript-book", "--jobs", "2"]
        )

        opts = options_from_args(args)

        assert opts.source_dir == tmp_path
        assert opts.book_name == "purescript-book"
        assert opts.max_concurrency == 2

    def test_keeps_defaults(self) -> None:
        """Flags left out keep the configured values."""
        args = build_parser().parse_args(["clean"])

        opts = options_from_args(args)

        assert opts.dist_dir == Path("dist")


class TestMain:
    """Tests for main function."""

    def test_builds_html(self, book_dir: Path) -> None:
        """The html command writes the pages and exits 0."""
        exit_code = main(
            [
                "html",
                "--source",
                str(book_dir / "src"),
                "--dist",
                str(book_dir / "dist"),
                "--resources",
                str(book_dir / "res"),
            ]
        )

        assert exit_code == 0
        assert (book_dir / "dist" / "chapter01.html").is_file()

    def test_reports_errors(self, tmp_path: Path) -> None:
        """Build errors exit 1 instead of raising."""
        exit_code = main(["html", "--source", str(tmp_path), "--dist", str(tmp_path / "dist")])

        assert exit_code == 1

    def test_clean(self, tmp_path: Path) -> None:
        """The clean command empties the output directory."""
        dist = tmp_path / "dist"
        dist.mkdir()
        (dist / "index.html").write_text("x")

        assert main(["clean", "--dist", str(dist)]) == 0
        assert not (dist / "index.html").exists()

    def test_epub_uses_pandoc(self, book_dir: Path) -> None:
        """The epub command hands off to pandoc."""
        epub = book_dir / "dist" / "book.epub"
        with patch("md2book.build.convert_to_epub", return_value=epub) as convert:
            exit_code = main(["epub", "--source", str(book_dir / "src"), "--dist", str(book_dir / "dist")])

        assert exit_code == 0
        convert.assert_called_once()

    def test_rejects_zero_jobs(self) -> None:
        """A concurrency of zero is a usage error."""
        with pytest.raises(SystemExit):
            main(["html", "--jobs", "0"])
