"""Built-in helpers, contributed through the same hook as third-party plugins."""

from __future__ import annotations

from gitdown.plugins.builtins.date import DateHelper
from gitdown.plugins.builtins.filesize import FilesizeHelper
from gitdown.plugins.builtins.gitinfo import GitinfoHelper
from gitdown.plugins.builtins.include import IncludeHelper
from gitdown.plugins.hookspecs import hookimpl


class BuiltinHelpersPlugin:
    """Registers ``date``, ``filesize``, ``gitinfo`` and ``include``."""

    @hookimpl
    def register_helpers(self) -> dict[str, object]:
        return {
            "date": DateHelper(),
            "filesize": FilesizeHelper(),
            "gitinfo": GitinfoHelper(),
            "include": IncludeHelper(),
        }


__all__ = [
    "BuiltinHelpersPlugin",
    "DateHelper",
    "FilesizeHelper",
    "GitinfoHelper",
    "IncludeHelper",
]
