"""Filesystem operations for documents.

Documents are read and written as UTF-8 with their line endings preserved,
so expansion never rewrites content it does not own.
"""

from __future__ import annotations

import sys
from pathlib import Path

STDIO_PATH = "-"


def read_document(path: Path) -> str:
    """Read a document, keeping ``\\r\\n`` line endings intact."""
    with path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def read_stdin() -> str:
    return sys.stdin.read()


def write_document(path: Path, markdown: str) -> None:
    """Write *markdown* to *path*.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(markdown)
