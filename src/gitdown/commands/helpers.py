"""Command: list registered helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gitdown.commands._base import GitdownCommand

if TYPE_CHECKING:
    from gitdown.commands._context import AppContext


@click.command(
    cls=GitdownCommand,
    examples="""\
  gitdown helpers
  gitdown -v helpers
  gitdown --json helpers""",
)
@click.pass_obj
def helpers(app: AppContext) -> None:
    """List registered helpers, lightest weight first."""
    app.emit(app.service.list_helpers())
