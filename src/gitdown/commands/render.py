"""Command: expand the directives of a document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from gitdown.commands._base import GitdownCommand
from gitdown.infrastructure.filesystem import STDIO_PATH, read_stdin

if TYPE_CHECKING:
    from gitdown.commands._context import AppContext


@click.command(
    cls=GitdownCommand,
    examples="""\
  gitdown render README.gitdown.md
  gitdown render README.gitdown.md -o README.md
  cat README.gitdown.md | gitdown render -
  gitdown --json render README.gitdown.md -o README.md
  gitdown render README.gitdown.md --max-passes 10""",
)
@click.argument("source", default=STDIO_PATH)
@click.option(
    "-o",
    "--output",
    "destination",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the expanded document here instead of stdout.",
)
@click.option(
    "--max-passes",
    type=click.IntRange(min=1),
    default=None,
    help="Fail if the document has not converged after N passes.",
)
@click.pass_obj
def render(
    app: AppContext,
    source: str,
    destination: Path | None,
    max_passes: int | None,
) -> None:
    """Expand Gitdown directives in SOURCE (``-`` for stdin)."""
    svc = app.service

    if source == STDIO_PATH:
        result = svc.render_text(read_stdin(), destination, max_passes=max_passes)
    else:
        result = svc.render_file(Path(source), destination, max_passes=max_passes)

    if result.ok and destination is None and not app.settings.json_output:
        click.echo(result.data["markdown"], nl=False)
        return
    app.emit(result)

