"""``date`` helper — the current date, formatted with strftime.

Without a ``format`` the output is the Unix timestamp in seconds.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from gitdown.engine.errors import HelperError

if TYPE_CHECKING:
    from gitdown.engine.executor import HelperContext


class DateHelper:
    weight = 10

    def compile(self, config: dict[str, Any], context: HelperContext) -> str:
        now = datetime.now(UTC)
        fmt = config.get("format")
        if fmt is None:
            return str(int(now.timestamp()))
        if not isinstance(fmt, str):
            msg = f"config.format must be a string, got {fmt!r}."
            raise HelperError(msg)
        return now.strftime(fmt)
