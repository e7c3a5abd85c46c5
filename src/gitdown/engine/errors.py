"""Exception hierarchy for the expansion engine.

Every error carries a stable ``code`` so the service layer can turn it into
a structured :class:`~gitdown.services.result.ServiceError` without string
matching. All of them abort the current run; none are recovered internally.
"""

from __future__ import annotations


class GitdownError(Exception):
    """Base class for errors raised by gitdown itself."""

    code = "GITDOWN_ERROR"


class InvalidDirectiveError(GitdownError):
    """A directive-shaped substring is not valid JSON."""

    code = "INVALID_DIRECTIVE"

    def __init__(self, directive: str) -> None:
        super().__init__(f'Invalid Gitdown JSON ("{directive}").')
        self.directive = directive


class UnknownHelperError(GitdownError):
    """A directive names a helper that is not registered."""

    code = "UNKNOWN_HELPER"

    def __init__(self, name: str) -> None:
        super().__init__(f'Unknown helper "{name}".')
        self.name = name


class DuplicateHelperError(GitdownError):
    """A helper name was registered twice."""

    code = "DUPLICATE_HELPER"

    def __init__(self, name: str) -> None:
        super().__init__(f'There is already a helper with a name "{name}".')
        self.name = name


class InvalidHelperError(GitdownError, TypeError):
    """A helper object does not honour the helper contract."""

    code = "INVALID_HELPER"


class ConvergenceTimeoutError(GitdownError):
    """The document did not stabilise within the configured number of passes."""

    code = "CONVERGENCE_TIMEOUT"

    def __init__(self, max_passes: int) -> None:
        super().__init__(
            f"Document did not converge after {max_passes} passes. "
            "A helper is probably re-emitting its own directive."
        )
        self.max_passes = max_passes


class HelperError(GitdownError):
    """A built-in helper rejected its configuration or input."""

    code = "HELPER_ERROR"
