"""Subcommand modules for gitdown.

Provides register_commands() which uses deferred imports to keep
``gitdown --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from gitdown.commands.helpers import helpers
    from gitdown.commands.render import render

    cli.add_command(render)
    cli.add_command(helpers)
