"""Tests for HelperRegistry — registration contract and lookup."""

from __future__ import annotations

from typing import Any

import pytest

from gitdown.engine.errors import DuplicateHelperError, InvalidHelperError, UnknownHelperError
from gitdown.engine.registry import DEFAULT_WEIGHT, Helper, HelperRegistry


class _Weighted:
    weight = 5

    def compile(self, config: dict[str, Any], context: Any) -> str:
        return "weighted"


class _Unweighted:
    def compile(self, config: dict[str, Any], context: Any) -> str:
        return "unweighted"


class TestRegister:
    def test_register_and_resolve(self, registry: HelperRegistry) -> None:
        registry.register("weighted", _Weighted())
        helper = registry.resolve("weighted")
        assert helper.name == "weighted"
        assert helper.weight == 5
        assert helper.compile({}, None) == "weighted"

    def test_default_weight(self, registry: HelperRegistry) -> None:
        helper = registry.register("plain", _Unweighted())
        assert helper.weight == DEFAULT_WEIGHT == 10

    def test_explicit_weight_overrides_attribute(self, registry: HelperRegistry) -> None:
        helper = registry.register("weighted", _Weighted(), weight=30)
        assert helper.weight == 30

    def test_zero_weight_is_kept(self, registry: HelperRegistry) -> None:
        assert registry.register("zero", _Unweighted(), weight=0).weight == 0

    def test_duplicate_name_fails(self, registry: HelperRegistry) -> None:
        registry.register("dup", _Unweighted())
        with pytest.raises(DuplicateHelperError, match='There is already a helper with a name "dup"'):
            registry.register("dup", _Weighted())
        assert registry.resolve("dup").weight == DEFAULT_WEIGHT

    def test_missing_compile_fails(self, registry: HelperRegistry) -> None:
        with pytest.raises(InvalidHelperError, match='must define "compile"'):
            registry.register("empty", object())
        assert "empty" not in registry

    def test_non_callable_compile_fails(self, registry: HelperRegistry) -> None:
        class NotCallable:
            compile = "nope"

        with pytest.raises(InvalidHelperError):
            registry.register("bad", NotCallable())

    @pytest.mark.parametrize("weight", ["10", 1.5, True])
    def test_non_integer_weight_fails(self, registry: HelperRegistry, weight: object) -> None:
        with pytest.raises(InvalidHelperError, match="weight must be an integer"):
            registry.register("bad", _Unweighted(), weight=weight)  # type: ignore[arg-type]

    def test_plain_module_like_object(self, registry: HelperRegistry) -> None:
        """Any object exposing ``compile`` qualifies, e.g. a namespace."""
        from types import SimpleNamespace

        helper = SimpleNamespace(compile=lambda config, context: "ns", weight=7)
        assert registry.register("ns", helper).weight == 7


class TestLookup:
    def test_unknown_helper(self, registry: HelperRegistry) -> None:
        with pytest.raises(UnknownHelperError) as exc_info:
            registry.resolve("nope")
        assert exc_info.value.name == "nope"

    def test_list_in_registration_order(self, registry: HelperRegistry) -> None:
        registry.register("b", _Unweighted())
        registry.register("a", _Weighted())
        assert [h.name for h in registry.list()] == ["b", "a"]
        assert list(registry) == ["b", "a"]
        assert len(registry) == 2

    def test_as_dict_is_a_copy(self, registry: HelperRegistry) -> None:
        registry.register("a", _Unweighted())
        snapshot = registry.as_dict()
        snapshot.clear()
        assert "a" in registry

    def test_helper_protocol(self) -> None:
        assert isinstance(_Weighted(), Helper)
        assert not isinstance(object(), Helper)
