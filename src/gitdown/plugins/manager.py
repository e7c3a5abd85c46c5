"""Plugin discovery and helper loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.gitdown/plugins/``.
Capabilities: contributing helpers to the registry.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path

import pluggy

from gitdown.engine.registry import HelperRegistry
from gitdown.plugins.hookspecs import GitdownHookSpec

PROJECT_NAME = "gitdown"
ENTRY_POINT_GROUP = "gitdown.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and helper collection."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(GitdownHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def load_helpers(self, registry: HelperRegistry) -> list[str]:
        """Register every helper contributed by a plugin into *registry*.

        Plugins are asked one by one so a broken plugin only costs its own
        helpers. Name clashes raise
        :class:`~gitdown.engine.errors.DuplicateHelperError`.

        Returns the names of the helpers added.
        """
        added: list[str] = []
        for plugin_name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue
            hook = getattr(plugin, "register_helpers", None)
            if hook is None:
                continue

            try:
                helper_map = hook()
            except Exception:
                logger.warning(
                    "Failed to collect helpers from plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            if helper_map is None:
                continue
            if not isinstance(helper_map, dict):
                logger.warning("Plugin %s returned non-dict helper registrations", plugin_name)
                continue

            for helper_name, helper in helper_map.items():
                registry.register(helper_name, helper, origin=plugin_name)
                added.append(helper_name)
        return added

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry pluggy hookimpl-decorated
        methods are instantiated and registered. Failures are logged as
        warnings.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"gitdown_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry points may point at a plugin class rather than an instance.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``."""
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "gitdown_impl", None):
                return True
        return False


def build_registry(*, local_dir: Path | None = None, discover: bool = True) -> HelperRegistry:
    """Create a registry holding the built-in helpers and any plugin helpers.

    Args:
        local_dir: Directory of single-file plugins, if any.
        discover: Also load entry-point plugins and *local_dir*.
    """
    from gitdown.plugins.builtins import BuiltinHelpersPlugin

    pm = PluginManager()
    pm.register_plugin(BuiltinHelpersPlugin(), name="builtins")
    if discover:
        pm.discover_and_load(local_dir=local_dir)
    registry = HelperRegistry()
    pm.load_helpers(registry)
    return registry
