"""Tests for PluginManager — registration, hook relay, helper loading."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from gitdown.engine.errors import DuplicateHelperError
from gitdown.engine.registry import HelperRegistry
from gitdown.plugins import hookimpl
from gitdown.plugins.builtins import BuiltinHelpersPlugin
from gitdown.plugins.manager import PluginManager, build_registry


class _Shout:
    weight = 5

    def compile(self, config: dict[str, Any], context: Any) -> str:
        return config.get("text", "").upper()


class _ShoutPlugin:
    @hookimpl
    def register_helpers(self) -> dict[str, object]:
        return {"shout": _Shout()}


class _ConflictingPlugin:
    @hookimpl
    def register_helpers(self) -> dict[str, object]:
        return {"include": _Shout()}


class _BrokenPlugin:
    @hookimpl
    def register_helpers(self) -> dict[str, object]:
        raise RuntimeError("plugin exploded")


class _ListPlugin:
    @hookimpl
    def register_helpers(self) -> list[object]:
        return [_Shout()]


class _SilentPlugin:
    @hookimpl
    def register_helpers(self) -> None:
        return None


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "register_helpers")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ShoutPlugin(), name="shout")
        assert "shout" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ShoutPlugin())
        assert "_ShoutPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _ShoutPlugin()
        pm.register_plugin(plugin, name="shout")
        pm.unregister(plugin)
        assert "shout" not in pm.list_plugin_names()

    def test_get_plugins(self) -> None:
        pm = PluginManager()
        plugin = _ShoutPlugin()
        pm.register_plugin(plugin)
        assert plugin in pm.get_plugins()

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load()
        assert pm.is_loaded is True


class TestLoadHelpers:
    def test_collects_helpers_with_origin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ShoutPlugin(), name="shout-plugin")
        registry = HelperRegistry()

        added = pm.load_helpers(registry)

        assert added == ["shout"]
        helper = registry.resolve("shout")
        assert helper.weight == 5
        assert helper.origin == "shout-plugin"

    def test_broken_plugin_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin(), name="broken")
        pm.register_plugin(_ShoutPlugin(), name="shout-plugin")
        registry = HelperRegistry()

        with caplog.at_level(logging.WARNING, logger="gitdown.plugins.manager"):
            pm.load_helpers(registry)

        assert "shout" in registry
        assert "Failed to collect helpers from plugin broken" in caplog.text

    def test_non_dict_result_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_ListPlugin(), name="listy")
        registry = HelperRegistry()

        with caplog.at_level(logging.WARNING, logger="gitdown.plugins.manager"):
            assert pm.load_helpers(registry) == []

        assert "non-dict" in caplog.text

    def test_none_result_contributes_nothing(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_SilentPlugin())
        assert pm.load_helpers(HelperRegistry()) == []

    def test_name_clash_is_an_error(self) -> None:
        pm = PluginManager()
        pm.register_plugin(BuiltinHelpersPlugin(), name="builtins")
        pm.register_plugin(_ConflictingPlugin(), name="conflict")

        with pytest.raises(DuplicateHelperError, match='"include"'):
            pm.load_helpers(HelperRegistry())


class TestBuildRegistry:
    def test_builtins_only(self) -> None:
        registry = build_registry(discover=False)
        assert sorted(registry) == ["date", "filesize", "gitinfo", "include"]
        assert {h.origin for h in registry.list()} == {"builtins"}

    def test_builtin_weights(self) -> None:
        registry = build_registry(discover=False)
        assert registry.resolve("include").weight == 20
        assert registry.resolve("gitinfo").weight == 10
        assert registry.resolve("date").weight == 10
        assert registry.resolve("filesize").weight == 10

    def test_missing_local_dir_is_ignored(self, tmp_path) -> None:
        registry = build_registry(local_dir=tmp_path / "nope")
        assert "include" in registry
