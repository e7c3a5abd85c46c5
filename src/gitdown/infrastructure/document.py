"""Gitdown — the document driver.

Owns one document and the settings it is rendered with. Helpers reach the
settings through ``context.gitdown.get_config()``.

Usage::

    doc = Gitdown.read_file(Path("README.gitdown.md"))
    doc.write_file_sync(Path("README.md"))
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from gitdown.config.settings import GitdownSettings
from gitdown.engine.locator import Locator
from gitdown.engine.parser import Parser, ParserState
from gitdown.engine.registry import HelperRegistry, RegisteredHelper
from gitdown.infrastructure.filesystem import read_document, write_document

logger = logging.getLogger(__name__)


class Gitdown:
    """A Markdown document with embedded Gitdown directives.

    Args:
        markdown: The source document.
        settings: Settings to render with. Discovered from the working
            directory when omitted.
        registry: Helper registry to share with other documents. Built from
            the built-in and plugin helpers when omitted.
    """

    def __init__(
        self,
        markdown: str,
        settings: GitdownSettings | None = None,
        *,
        registry: HelperRegistry | None = None,
    ) -> None:
        self._markdown = markdown
        self._settings = settings or GitdownSettings.from_cli()
        if registry is None:
            from gitdown.plugins.manager import build_registry

            registry = build_registry(
                local_dir=self._settings.plugin_dir,
                discover=self._settings.plugins.enabled,
            )
        self._registry = registry
        self._parser: Parser | None = None
        self._last_state: ParserState | None = None

    @classmethod
    def read_file(
        cls,
        path: Path,
        settings: GitdownSettings | None = None,
        *,
        registry: HelperRegistry | None = None,
    ) -> Gitdown:
        """Load *path*; relative directive paths resolve against its directory."""
        base_directory = path.resolve().parent
        if settings is None:
            settings = GitdownSettings.from_cli(base_directory=base_directory)
        else:
            settings = settings.model_copy(update={"base_directory": base_directory})
        return cls(read_document(path), settings, registry=registry)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_config(self) -> GitdownSettings:
        return self._settings

    def set_config(self, **overrides: Any) -> GitdownSettings:
        """Override settings fields; the parser is rebuilt on next use.

        A dict given for a section (``engine={"max_passes": 3}``) updates
        that section instead of replacing it.
        """
        update: dict[str, Any] = {}
        for key, value in overrides.items():
            current = getattr(self._settings, key)
            if isinstance(current, BaseModel) and isinstance(value, dict):
                value = current.model_copy(update=value)
            update[key] = value
        self._settings = self._settings.model_copy(update=update)
        self._parser = None
        return self._settings

    @property
    def markdown(self) -> str:
        return self._markdown

    @property
    def registry(self) -> HelperRegistry:
        return self._registry

    @property
    def parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(
                self,
                registry=self._registry,
                locator=Locator(self._settings.base_directory),
                max_passes=self._settings.engine.max_passes,
            )
        return self._parser

    @property
    def last_state(self) -> ParserState | None:
        """Final state of the most recent render, for reporting."""
        return self._last_state

    def register_helper(
        self, name: str, helper: object, *, weight: int | None = None
    ) -> RegisteredHelper:
        return self.parser.register_helper(name, helper, weight=weight)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def get(self) -> str:
        """Return the fully expanded document."""
        state = await self.parser.play(self._markdown)
        self._last_state = state
        logger.debug(
            "Rendered document in %d pass(es), %d command(s)",
            state.passes,
            len(state.commands),
        )
        return state.markdown

    def render(self) -> str:
        """Synchronous :meth:`get`.

        Runs its own event loop with :func:`asyncio.run`, so it raises
        ``RuntimeError`` when called while a loop is running. Async callers,
        including async helpers holding ``context.gitdown``, must
        ``await get()`` instead.
        """
        return asyncio.run(self.get())

    async def write_file(self, path: Path) -> None:
        write_document(path, await self.get())

    def write_file_sync(self, path: Path) -> None:
        """Synchronous :meth:`write_file`; same event-loop caveat as :meth:`render`."""
        asyncio.run(self.write_file(path))
