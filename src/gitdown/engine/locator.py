"""Locator — path resolution handed to helpers through the context."""

from __future__ import annotations

from pathlib import Path

from gitdown.infrastructure.git import run_git


class Locator:
    """Resolves document-relative paths and repository locations."""

    def __init__(self, base_directory: Path | None = None) -> None:
        self._base_directory = (base_directory or Path.cwd()).resolve()

    @property
    def base_directory(self) -> Path:
        return self._base_directory

    def resolve(self, path: str | Path) -> Path:
        """Resolve *path* against the base directory (absolute paths pass through)."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self._base_directory / candidate
        return candidate.resolve()

    def repository_path(self) -> Path:
        """Top-level directory of the git repository holding the base directory.

        Raises:
            GitCommandError: The base directory is not inside a repository.
        """
        output = run_git(self._base_directory, "rev-parse", "--show-toplevel")
        return Path(output)

    @staticmethod
    def package_path() -> Path:
        """Directory of the installed ``gitdown`` package."""
        return Path(__file__).resolve().parent.parent
