"""Test setup for md2book."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (invoke a real pandoc)",
    )


@pytest.fixture
def pandoc_available() -> bool:
    return shutil.which("pandoc") is not None


@pytest.fixture
def book_dir(tmp_path: Path) -> Path:
    """A minimal book: index, three chapters and a resource directory."""
    source = tmp_path / "src"
    source.mkdir()
    (source / "index.md").write_text("# 目次\n\nようこそ。\n", encoding="utf-8")
    (source / "chapter01.md").write_text(
        "# はじめに\n\n本書について。\n\n## 対象読者\n\n誰でも。\n\n## まとめ\n\n以上。\n",
        encoding="utf-8",
    )
    (source / "chapter02.md").write_text(
        "# 関数\n\n## 定義\n\n```haskell\nmain = putStrLn \"hi\"\n```\n\n"
        "## 演習\n\n1. 試してみよう。\n\n",
        encoding="utf-8",
    )
    (source / "chapter03.md").write_text("# おわりに\n\nお疲れさまでした。\n", encoding="utf-8")

    resources = tmp_path / "res"
    resources.mkdir()
    (resources / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (resources / "logo.png").write_bytes(b"\x89PNG fake")
    return tmp_path
