"""Tiered executor — runs the lowest-weight tier of pending commands.

Commands of a tier run one after another in binding order. Each helper sees
the document as left by the helpers before it, so side effects on shared
collaborators (the locator, the filesystem) are observed in document order.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from gitdown.engine.errors import InvalidHelperError

if TYPE_CHECKING:
    from gitdown.engine.locator import Locator
    from gitdown.engine.parser import Parser, ParserState
    from gitdown.engine.scanner import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HelperContext:
    """Everything a helper may look at besides its own config.

    Attributes:
        gitdown: The document driver; ``gitdown.get_config()`` returns the
            active settings. May be None when a parser runs standalone.
        locator: Location registry for resolving paths.
        markdown: The document text at the moment the helper is called.
        parser: The running parser, for helpers that expand fetched content
            with ``await context.parser.play(text)``.
    """

    gitdown: Any
    locator: Locator
    markdown: str
    parser: Parser


async def resolve_output(value: Any) -> Any:
    """Await a helper's return value if it is awaitable or a future."""
    if isinstance(value, Future):
        return await asyncio.wrap_future(value)
    if inspect.isawaitable(value):
        return await value
    return value


class TieredExecutor:
    """Executes one weight tier per call."""

    def __init__(self, parser: Parser, *, gitdown: Any = None, locator: Locator) -> None:
        self._parser = parser
        self._gitdown = gitdown
        self._locator = locator

    async def execute(self, state: ParserState) -> ParserState:
        """Execute every pending command sharing the lowest weight.

        Sets ``state.done`` when nothing is pending. Helper errors propagate
        unchanged and leave the failing command unexecuted.
        """
        pending = [command for command in state.commands if not command.executed]
        if not pending:
            state.done = True
            return state

        lowest_weight = min(command.weight for command in pending)
        tier = sorted(
            (command for command in pending if command.weight == lowest_weight),
            key=lambda command: command.binding_index,
        )
        logger.debug("Executing %d command(s) of weight %d", len(tier), lowest_weight)

        for command in tier:
            value = await self._run(command, state.markdown)
            state.markdown = state.markdown.replace(command.token, value, 1)
            command.executed = True

        return state

    async def _run(self, command: Command, markdown: str) -> str:
        context = HelperContext(
            gitdown=self._gitdown,
            locator=self._locator,
            markdown=markdown,
            parser=self._parser,
        )
        logger.debug("Invoking helper %s for command %d", command.name, command.binding_index)
        value = await resolve_output(command.helper.compile(command.config, context))
        if value is None:
            msg = f'Helper "{command.name}" produced no output.'
            raise InvalidHelperError(msg)
        if not isinstance(value, str):
            value = str(value)
        return value
