"""``filesize`` helper — human-readable size of a file, optionally gzipped."""

from __future__ import annotations

import gzip
from typing import TYPE_CHECKING, Any

from gitdown.engine.errors import HelperError

if TYPE_CHECKING:
    from gitdown.engine.executor import HelperContext

_UNITS = ("B", "kB", "MB", "GB", "TB")


def format_size(size: int) -> str:
    """Format *size* bytes with decimal (1000-based) units.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1536)
        '1.54 kB'
        >>> format_size(2_000_000)
        '2 MB'
        >>> format_size(999_999)
        '1 MB'
    """
    if size < 1000:
        return f"{size} B"
    value = float(size)
    unit = _UNITS[0]
    for unit in _UNITS[1:]:
        value /= 1000
        # Compare the rounded value: 999.999 kB is 1 MB.
        if round(value, 2) < 1000 or unit == _UNITS[-1]:
            break
    return f"{value:.2f}".rstrip("0").rstrip(".") + f" {unit}"


class FilesizeHelper:
    weight = 10

    def compile(self, config: dict[str, Any], context: HelperContext) -> str:
        file = config.get("file")
        if not file:
            msg = "config.file must be provided."
            raise HelperError(msg)

        path = context.locator.resolve(file)
        if not path.is_file():
            msg = "Input file does not exist."
            raise HelperError(msg)

        try:
            data = path.read_bytes()
        except OSError as exc:
            msg = f'Cannot read input file "{path}": {exc}'
            raise HelperError(msg) from exc
        if config.get("gzip"):
            data = gzip.compress(data)
        return format_size(len(data))
