"""Parser — the convergence driver.

Matches every Gitdown JSON directive in a document and invokes the
associated helpers, lowest weight first. Each helper receives the document
in its current state (with the output of preceding helpers already
substituted) and the directive's config. Scanning and executing repeat until
a pass finds no pending command, i.e. no helper has emitted a directive that
still needs expanding.

The loop is a fixed point with no built-in guarantee of termination: a
helper that re-emits its own directive never converges. ``max_passes``
turns that into :class:`ConvergenceTimeoutError`; ``None`` leaves the loop
unbounded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from gitdown.engine.errors import ConvergenceTimeoutError
from gitdown.engine.executor import TieredExecutor
from gitdown.engine.locator import Locator
from gitdown.engine.registry import HelperRegistry, RegisteredHelper
from gitdown.engine.scanner import Command, DirectiveScanner

logger = logging.getLogger(__name__)


@dataclass
class ParserState:
    """Document text and commands flowing between scan and execute."""

    markdown: str
    commands: list[Command] = field(default_factory=list)
    done: bool = False
    passes: int = 0


class Parser:
    """Drives Scan -> Execute cycles over one document at a time.

    Args:
        gitdown: Document driver exposed to helpers as ``context.gitdown``.
        registry: Helper registry. A new, empty registry when omitted.
        locator: Exposed to helpers as ``context.locator``.
        max_passes: Scan/Execute passes allowed before giving up.
    """

    def __init__(
        self,
        gitdown: Any = None,
        *,
        registry: HelperRegistry | None = None,
        locator: Locator | None = None,
        max_passes: int | None = None,
    ) -> None:
        if max_passes is not None and max_passes < 1:
            msg = f"max_passes must be positive, got {max_passes}"
            raise ValueError(msg)
        self._registry = registry if registry is not None else HelperRegistry()
        self._locator = locator or Locator()
        self._max_passes = max_passes
        self._scanner = DirectiveScanner(self._registry)
        self._executor = TieredExecutor(self, gitdown=gitdown, locator=self._locator)

    @property
    def registry(self) -> HelperRegistry:
        return self._registry

    @property
    def locator(self) -> Locator:
        return self._locator

    @property
    def max_passes(self) -> int | None:
        return self._max_passes

    def register_helper(
        self, name: str, helper: object, *, weight: int | None = None
    ) -> RegisteredHelper:
        """Register *helper* under *name* on this parser's registry."""
        return self._registry.register(name, helper, weight=weight, origin="custom")

    def helpers(self) -> dict[str, RegisteredHelper]:
        return self._registry.as_dict()

    async def play(self, markdown: str, commands: list[Command] | None = None) -> ParserState:
        """Expand *markdown* until no command is left pending.

        Args:
            markdown: Document text.
            commands: Commands carried over from an earlier run. A fresh list
                when omitted.

        Returns:
            The final state; ``state.markdown`` is the expanded document.
        """
        state = ParserState(markdown=markdown, commands=[] if commands is None else commands)
        passes = 0

        while True:
            if self._max_passes is not None and passes >= self._max_passes:
                raise ConvergenceTimeoutError(self._max_passes)
            passes += 1

            state = self.parse(state.markdown, state.commands)
            state = await self.execute(state)
            logger.debug("Pass %d complete (done=%s)", passes, state.done)

            if state.done:
                state.passes = passes
                return state

    def parse(self, markdown: str, commands: list[Command]) -> ParserState:
        """Swap directives for placeholders, appending new commands."""
        result = self._scanner.scan(markdown, commands)
        return ParserState(markdown=result.markdown, commands=result.commands)

    async def execute(self, state: ParserState) -> ParserState:
        """Execute the lowest-weight tier of pending commands."""
        return await self._executor.execute(state)
