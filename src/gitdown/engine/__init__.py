"""Expansion engine — directive scanning, tiered execution, convergence.

INVARIANT: The engine never wraps helper errors. Whatever a helper raises
reaches the caller of ``Parser.play()`` unchanged.
"""

from gitdown.engine.errors import (
    ConvergenceTimeoutError,
    DuplicateHelperError,
    GitdownError,
    HelperError,
    InvalidDirectiveError,
    InvalidHelperError,
    UnknownHelperError,
)
from gitdown.engine.executor import HelperContext, TieredExecutor
from gitdown.engine.parser import Parser, ParserState
from gitdown.engine.registry import DEFAULT_WEIGHT, HelperRegistry, RegisteredHelper
from gitdown.engine.scanner import Command, DirectiveScanner

__all__ = [
    "DEFAULT_WEIGHT",
    "Command",
    "ConvergenceTimeoutError",
    "DirectiveScanner",
    "DuplicateHelperError",
    "GitdownError",
    "HelperContext",
    "HelperError",
    "HelperRegistry",
    "InvalidDirectiveError",
    "InvalidHelperError",
    "Parser",
    "ParserState",
    "RegisteredHelper",
    "TieredExecutor",
    "UnknownHelperError",
]
