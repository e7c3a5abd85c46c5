"""Helper registry — name to ``{compile, weight}`` mapping.

The helper contract is checked once, at registration time, so the executor
can call ``compile`` without further duck-typing.

INVARIANT: Populated before any run and read-only afterwards. A registry may
be shared by independent parsers.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator
from concurrent.futures import Future
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from gitdown.engine.errors import DuplicateHelperError, InvalidHelperError, UnknownHelperError

if TYPE_CHECKING:
    from gitdown.engine.executor import HelperContext

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 10

HelperOutput = str | Awaitable[str] | Future[str]
CompileFn = Callable[..., HelperOutput]


@runtime_checkable
class Helper(Protocol):
    """Structural type of a helper plugin object.

    ``weight`` is optional on the object itself; the registry falls back to
    :data:`DEFAULT_WEIGHT`.
    """

    def compile(self, config: dict[str, Any], context: HelperContext) -> HelperOutput: ...


@dataclass(frozen=True)
class RegisteredHelper:
    """A helper accepted by the registry."""

    name: str
    compile: CompileFn
    weight: int
    origin: str = "builtin"


def _resolve_weight(name: str, helper: object, weight: int | None) -> int:
    if weight is None:
        weight = getattr(helper, "weight", None)
    if weight is None:
        return DEFAULT_WEIGHT
    if isinstance(weight, bool) or not isinstance(weight, int):
        msg = f'Helper "{name}" weight must be an integer, got {weight!r}.'
        raise InvalidHelperError(msg)
    return weight


class HelperRegistry:
    """Registered helpers keyed by name, in registration order."""

    def __init__(self) -> None:
        self._helpers: dict[str, RegisteredHelper] = {}

    def register(
        self,
        name: str,
        helper: object,
        *,
        weight: int | None = None,
        origin: str = "builtin",
    ) -> RegisteredHelper:
        """Register *helper* under *name*.

        Raises:
            DuplicateHelperError: *name* is already taken.
            InvalidHelperError: *helper* has no callable ``compile`` or an
                invalid weight.
        """
        if name in self._helpers:
            raise DuplicateHelperError(name)

        compile_fn = getattr(helper, "compile", None)
        if compile_fn is None or not callable(compile_fn):
            raise InvalidHelperError('Helper object must define "compile" property.')

        registered = RegisteredHelper(
            name=name,
            compile=compile_fn,
            weight=_resolve_weight(name, helper, weight),
            origin=origin,
        )
        self._helpers[name] = registered
        logger.debug("Registered helper %s (weight %d)", name, registered.weight)
        return registered

    def resolve(self, name: str) -> RegisteredHelper:
        """Return the helper registered under *name*."""
        try:
            return self._helpers[name]
        except KeyError:
            raise UnknownHelperError(name) from None

    def list(self) -> list[RegisteredHelper]:
        """Return all registered helpers."""
        return list(self._helpers.values())

    def as_dict(self) -> dict[str, RegisteredHelper]:
        return dict(self._helpers)

    def __contains__(self, name: object) -> bool:
        return name in self._helpers

    def __iter__(self) -> Iterator[str]:
        return iter(self._helpers)

    def __len__(self) -> int:
        return len(self._helpers)
