"""Extension layer — helper plugins via pluggy.

Discovery: entry_points (pip-installed) in the ``gitdown.plugins`` group,
plus single-file plugins from ``.gitdown/plugins/``.
INVARIANT: A plugin that fails to load is a warning, never an error. A
helper name registered twice is always an error.
"""

from gitdown.plugins.hookspecs import hookimpl
from gitdown.plugins.manager import PluginManager, build_registry

__all__ = ["PluginManager", "build_registry", "hookimpl"]
