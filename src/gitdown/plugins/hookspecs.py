"""Pluggy hook specifications for gitdown helper plugins.

A plugin contributes helpers by returning a ``name -> helper`` mapping from
``register_helpers``. Helper objects follow the helper contract: a
``compile(config, context)`` callable and an optional integer ``weight``.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("gitdown")
hookimpl = pluggy.HookimplMarker("gitdown")


class GitdownHookSpec:
    """Hook specifications for the gitdown plugin system."""

    @hookspec
    def register_helpers(self) -> dict[str, object] | None:
        """Return helper name -> helper object mappings to add to the registry."""
