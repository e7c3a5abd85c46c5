"""Tests for TieredExecutor — tier selection, ordering, result handling."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from pathlib import Path
from typing import Any

import pytest

from gitdown.engine.errors import InvalidHelperError
from gitdown.engine.locator import Locator
from gitdown.engine.parser import Parser


@pytest.fixture
def engine(registry, tmp_path: Path) -> Parser:
    return Parser(gitdown="driver", registry=registry, locator=Locator(tmp_path))


def _scan_and_execute(parser: Parser, markdown: str):
    state = parser.parse(markdown, [])
    return asyncio.run(parser.execute(state))


class TestTierSelection:
    def test_no_pending_commands_means_done(self, engine: Parser) -> None:
        state = _scan_and_execute(engine, "plain")
        assert state.done is True
        assert state.markdown == "plain"

    def test_executes_only_lowest_tier(self, engine, registry, make_helper) -> None:
        light = make_helper("L", weight=1)
        heavy = make_helper("H", weight=2)
        registry.register("light", light)
        registry.register("heavy", heavy)

        state = _scan_and_execute(engine, '{"gitdown": "heavy"}{"gitdown": "light"}')

        assert state.done is False
        assert light.calls == [{}]
        assert heavy.calls == []
        assert state.markdown == f"{state.commands[0].token}L"
        assert [c.executed for c in state.commands] == [False, True]

    def test_tier_runs_in_binding_order(self, engine, registry) -> None:
        seen: list[str] = []

        class Snapshot:
            def compile(self, config: dict[str, Any], context: Any) -> str:
                seen.append(context.markdown)
                return config["v"]

        registry.register("snap", Snapshot())
        state = _scan_and_execute(engine, '{"gitdown": "snap", "v": "a"}-{"gitdown": "snap", "v": "b"}')

        first, second = (c.token for c in state.commands)
        assert seen == [f"{first}-{second}", f"a-{second}"]


class TestContext:
    def test_context_bundle(self, engine: Parser, registry, make_helper) -> None:
        helper = make_helper("ok")
        registry.register("ctx", helper)

        state = _scan_and_execute(engine, 'doc {"gitdown": "ctx"}')

        [context] = helper.contexts
        assert context.gitdown == "driver"
        assert context.parser is engine
        assert context.locator is engine.locator
        assert context.markdown == f"doc {state.commands[0].token}"


class TestResults:
    def test_awaits_coroutines(self, engine, registry) -> None:
        class Async:
            async def compile(self, config: dict[str, Any], context: Any) -> str:
                await asyncio.sleep(0)
                return "async"

        registry.register("async", Async())
        assert _scan_and_execute(engine, '{"gitdown": "async"}').markdown == "async"

    def test_awaits_concurrent_futures(self, engine, registry) -> None:
        class Threaded:
            def compile(self, config: dict[str, Any], context: Any) -> Future[str]:
                future: Future[str] = Future()
                future.set_result("future")
                return future

        registry.register("threaded", Threaded())
        assert _scan_and_execute(engine, '{"gitdown": "threaded"}').markdown == "future"

    def test_non_string_output_is_stringified(self, engine, registry) -> None:
        class Number:
            def compile(self, config: dict[str, Any], context: Any) -> int:
                return 42

        registry.register("number", Number())
        assert _scan_and_execute(engine, '{"gitdown": "number"}').markdown == "42"

    def test_none_output_fails(self, engine, registry) -> None:
        class Nothing:
            def compile(self, config: dict[str, Any], context: Any) -> None:
                return None

        registry.register("nothing", Nothing())
        with pytest.raises(InvalidHelperError, match='"nothing" produced no output'):
            _scan_and_execute(engine, '{"gitdown": "nothing"}')

    def test_output_is_inserted_literally(self, engine, registry, make_helper) -> None:
        registry.register("raw", make_helper(r"\1 $& \g<0>"))
        assert _scan_and_execute(engine, '{"gitdown": "raw"}').markdown == r"\1 $& \g<0>"

    def test_failed_command_stays_pending(self, engine, registry) -> None:
        class Failing:
            def compile(self, config: dict[str, Any], context: Any) -> str:
                raise ValueError("bad input")

        registry.register("failing", Failing())
        state = engine.parse('{"gitdown": "failing"}', [])
        with pytest.raises(ValueError, match="bad input"):
            asyncio.run(engine.execute(state))
        assert state.commands[0].executed is False
