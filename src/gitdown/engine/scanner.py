"""Directive scanner — protected zones, directive discovery, placeholders.

Each scan works on the whole text in three passes:

1. Protect zones: ``<!-- gitdown: off -->`` up to the nearest
   ``<!-- gitdown: on -->`` (or end of text) is swapped for a zone token.
2. Discover directives: every ``{"gitdown" ...}`` object is parsed, turned
   into a :class:`Command` and swapped for a command token.
3. Unprotect zones: zone tokens are swapped back for the saved text.

Directive matching is a conservative approximation: a directive runs from
``{"gitdown"`` to the first ``}``. Payloads therefore cannot contain a
literal ``}`` (no nested objects, no ``}`` inside string values).

Tokens carry a random per-scanner nonce, so text that merely looks like a
token (``⊂⊂C:1⊃⊃`` typed into a document) is never mistaken for one.

INVARIANT: Binding indexes are never reused. The counter lives on the
scanner instance and is never reset.
"""

from __future__ import annotations

import json
import logging
import re
import secrets
from dataclasses import dataclass, field
from typing import Any

from gitdown.engine.errors import InvalidDirectiveError
from gitdown.engine.registry import HelperRegistry, RegisteredHelper

logger = logging.getLogger(__name__)

DIRECTIVE_KEY = "gitdown"

IGNORE_SECTION_PATTERN = re.compile(
    r"<!--\sgitdown:\soff\s-->[\s\S]*?(?:\Z|<!--\sgitdown:\son\s-->)"
)
DIRECTIVE_PATTERN = re.compile(r'\{"gitdown"[^}]+\}')


def ignore_token(nonce: str, index: int) -> str:
    """Placeholder standing in for the *index*-th protected zone (1-based)."""
    return f"⊂⊂I:{nonce}:{index}⊃⊃"


def command_token(nonce: str, binding_index: int) -> str:
    """Placeholder standing in for the command with *binding_index*."""
    return f"⊂⊂C:{nonce}:{binding_index}⊃⊃"


@dataclass
class Command:
    """A directive waiting for (or done with) its helper."""

    binding_index: int
    name: str
    helper: RegisteredHelper
    config: dict[str, Any] = field(default_factory=dict)
    executed: bool = False
    nonce: str = ""

    @property
    def weight(self) -> int:
        return self.helper.weight

    @property
    def token(self) -> str:
        return command_token(self.nonce, self.binding_index)


@dataclass
class ScanResult:
    markdown: str
    commands: list[Command]


class DirectiveScanner:
    """Turns directives into commands and placeholder tokens."""

    def __init__(self, registry: HelperRegistry) -> None:
        self._registry = registry
        self._binding_index = 0
        self._nonce = secrets.token_hex(4)
        self._ignore_token_pattern = re.compile(rf"⊂⊂I:{self._nonce}:(\d+)⊃⊃")

    @property
    def binding_index(self) -> int:
        """Last binding index handed out."""
        return self._binding_index

    @property
    def nonce(self) -> str:
        return self._nonce

    def scan(self, markdown: str, commands: list[Command]) -> ScanResult:
        """Replace directives in *markdown* with command tokens.

        New commands are appended to *commands* (the list is mutated and
        returned). Protected zones come back byte for byte.

        Raises:
            InvalidDirectiveError: A directive is not valid JSON.
            UnknownHelperError: A directive names an unregistered helper.
        """
        ignored: list[str] = []

        def protect(match: re.Match[str]) -> str:
            ignored.append(match.group(0))
            return ignore_token(self._nonce, len(ignored))

        def discover(match: re.Match[str]) -> str:
            command = self._build_command(match.group(0))
            commands.append(command)
            return command.token

        def unprotect(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if not 1 <= index <= len(ignored):
                return match.group(0)
            return ignored[index - 1]

        output = IGNORE_SECTION_PATTERN.sub(protect, markdown)
        output = DIRECTIVE_PATTERN.sub(discover, output)
        output = self._ignore_token_pattern.sub(unprotect, output)

        if ignored:
            logger.debug("Protected %d ignored section(s)", len(ignored))
        return ScanResult(markdown=output, commands=commands)

    def _build_command(self, raw: str) -> Command:
        try:
            directive = json.loads(raw)
        except json.JSONDecodeError:
            raise InvalidDirectiveError(raw) from None

        name = directive.get(DIRECTIVE_KEY)
        if not isinstance(name, str):
            raise InvalidDirectiveError(raw)

        config = {key: value for key, value in directive.items() if key != DIRECTIVE_KEY}

        self._binding_index += 1
        helper = self._registry.resolve(name)

        logger.debug("Found directive %s as command %d", name, self._binding_index)
        return Command(
            binding_index=self._binding_index,
            name=name,
            helper=helper,
            config=config,
            nonce=self._nonce,
        )
