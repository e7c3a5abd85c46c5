"""RenderService — expand documents and introspect the helper registry."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from gitdown.config.logging import bind_document, unbind_document
from gitdown.config.settings import GitdownSettings
from gitdown.engine.errors import (
    ConvergenceTimeoutError,
    DuplicateHelperError,
    GitdownError,
    InvalidDirectiveError,
    UnknownHelperError,
)
from gitdown.engine.registry import HelperRegistry
from gitdown.infrastructure.document import Gitdown
from gitdown.infrastructure.filesystem import read_document, write_document
from gitdown.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _error_detail(exc: GitdownError) -> dict[str, Any]:
    if isinstance(exc, InvalidDirectiveError):
        return {"directive": exc.directive}
    if isinstance(exc, UnknownHelperError | DuplicateHelperError):
        return {"helper": exc.name}
    if isinstance(exc, ConvergenceTimeoutError):
        return {"max_passes": exc.max_passes}
    return {}


class RenderService:
    """Renders documents with one shared helper registry.

    The registry is built on first use (built-in helpers plus plugins) and
    reused for every document this service renders.
    """

    def __init__(
        self,
        settings: GitdownSettings,
        *,
        registry: HelperRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry

    @property
    def registry(self) -> HelperRegistry:
        if self._registry is None:
            from gitdown.plugins.manager import build_registry

            self._registry = build_registry(
                local_dir=self._settings.plugin_dir,
                discover=self._settings.plugins.enabled,
            )
        return self._registry

    def render_file(
        self,
        source: Path,
        destination: Path | None = None,
        *,
        max_passes: int | None = None,
    ) -> ServiceResult:
        """Expand *source*, writing to *destination* when given."""
        op = "render"
        try:
            markdown = read_document(source)
        except OSError as exc:
            return ServiceResult.failure(
                op, "FILE_ERROR", f"Cannot read {source}: {exc}", {"path": str(source)}
            )

        settings = self._settings.model_copy(
            update={"base_directory": source.resolve().parent}
        )
        result = self._render(markdown, settings, source=str(source), max_passes=max_passes)
        return self._write(result, destination)

    def render_text(
        self,
        markdown: str,
        destination: Path | None = None,
        *,
        max_passes: int | None = None,
    ) -> ServiceResult:
        """Expand *markdown* relative to the configured base directory."""
        result = self._render(markdown, self._settings, source="-", max_passes=max_passes)
        return self._write(result, destination)

    def list_helpers(self) -> ServiceResult:
        try:
            registry = self.registry
        except GitdownError as exc:
            return ServiceResult.failure("helpers", exc.code, str(exc), _error_detail(exc))
        items = [
            {"name": helper.name, "weight": helper.weight, "origin": helper.origin}
            for helper in sorted(registry.list(), key=lambda h: (h.weight, h.name))
        ]
        return ServiceResult(ok=True, op="helpers", data={"items": items, "count": len(items)})

    # ------------------------------------------------------------------

    @staticmethod
    def _write(result: ServiceResult, destination: Path | None) -> ServiceResult:
        if not result.ok or destination is None:
            return result
        try:
            write_document(destination, result.data["markdown"])
        except OSError as exc:
            return ServiceResult.failure(
                result.op,
                "FILE_ERROR",
                f"Cannot write {destination}: {exc}",
                {"path": str(destination)},
            )
        return result.model_copy(update={"data": {**result.data, "destination": str(destination)}})

    def _render(
        self,
        markdown: str,
        settings: GitdownSettings,
        *,
        source: str,
        max_passes: int | None,
    ) -> ServiceResult:
        op = "render"
        if max_passes is not None:
            engine = settings.engine.model_copy(update={"max_passes": max_passes})
            settings = settings.model_copy(update={"engine": engine})

        bind_document(source)
        started = time.perf_counter()
        try:
            document = Gitdown(markdown, settings, registry=self.registry)
            output = document.render()
        except GitdownError as exc:
            logger.debug("Render failed: %s", exc)
            return ServiceResult.failure(op, exc.code, str(exc), _error_detail(exc))
        finally:
            unbind_document()

        state = document.last_state
        assert state is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source": source,
                "destination": None,
                "passes": state.passes,
                "commands": len(state.commands),
                "markdown": output,
            },
            meta={"duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
