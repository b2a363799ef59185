"""Reading and writing rendered spec pages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from specref.errors import ErrorCode, SpecRefError
from specref.normalize import HTML_PARSER

if TYPE_CHECKING:
    from pathlib import Path


def load_page(path: Path) -> BeautifulSoup:
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecRefError(
            code=ErrorCode.FILE_READ_FAILED,
            message=f"Could not read page {path}: {exc}",
            suggestion="Check that the rendered page exists (e.g. docs/index.html).",
            recoverable=False,
        ) from exc
    return BeautifulSoup(source, HTML_PARSER)


def write_page(document: BeautifulSoup, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(str(document), encoding="utf-8")
    except OSError as exc:
        raise SpecRefError(
            code=ErrorCode.FILE_WRITE_FAILED,
            message=f"Could not write page {path}: {exc}",
            suggestion="Check write permissions for the output location.",
            recoverable=False,
        ) from exc
