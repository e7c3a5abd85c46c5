"""``include`` helper — inline the content of another file.

The included text is returned verbatim, so directives inside it are picked
up by the next scan. Weight 20 lets lighter helpers in the host document
run first.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gitdown.engine.errors import HelperError
from gitdown.infrastructure.filesystem import read_document

if TYPE_CHECKING:
    from gitdown.engine.executor import HelperContext

logger = logging.getLogger(__name__)


class IncludeHelper:
    weight = 20

    def compile(self, config: dict[str, Any], context: HelperContext) -> str:
        file = config.get("file")
        if not file:
            msg = "config.file must be provided."
            raise HelperError(msg)

        path = context.locator.resolve(file)
        if not path.is_file():
            msg = "Input file does not exist."
            raise HelperError(msg)

        logger.debug("Including %s", path)
        try:
            return read_document(path)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f'Cannot read input file "{path}": {exc}'
            raise HelperError(msg) from exc
