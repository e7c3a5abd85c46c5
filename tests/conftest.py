"""Shared pytest fixtures for gitdown tests."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from gitdown.config.settings import GitdownSettings
from gitdown.engine.locator import Locator
from gitdown.engine.parser import Parser, ParserState
from gitdown.engine.registry import HelperRegistry


class RecordingHelper:
    """Helper returning a fixed value and recording every call."""

    def __init__(self, value: str, *, weight: int | None = None, log: list[str] | None = None):
        self.value = value
        if weight is not None:
            self.weight = weight
        self.calls: list[dict[str, Any]] = []
        self.contexts: list[Any] = []
        self.log = log if log is not None else []

    def compile(self, config: dict[str, Any], context: Any) -> str:
        self.calls.append(config)
        self.contexts.append(context)
        self.log.append(self.value)
        return self.value


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's GITDOWN_* environment out of the tests."""
    monkeypatch.delenv("GITDOWN_CONFIG", raising=False)
    monkeypatch.delenv("GITDOWN_BASE_DIRECTORY", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    gd = logging.getLogger("gitdown")
    gd_level = gd.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    gd.setLevel(gd_level)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> GitdownSettings:
    """Settings rooted at a temporary directory, plugin discovery off."""
    return GitdownSettings.from_cli(
        base_directory=tmp_path,
        plugins={"enabled": False},
    )


@pytest.fixture
def registry() -> HelperRegistry:
    """Empty registry."""
    return HelperRegistry()


@pytest.fixture
def parser(registry: HelperRegistry, tmp_path: Path) -> Parser:
    """Parser over the empty ``registry`` fixture with a ``test`` helper."""
    p = Parser(registry=registry, locator=Locator(tmp_path))
    p.register_helper("test", RecordingHelper("test"))
    return p


@pytest.fixture
def play() -> Callable[..., ParserState]:
    """Run ``parser.play`` to completion from synchronous tests."""

    def _play(parser: Parser, markdown: str, **kwargs: Any) -> ParserState:
        return asyncio.run(parser.play(markdown, **kwargs))

    return _play


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Temporary git repository with one commit on ``main`` and a GitHub remote."""
    repo = tmp_path / "repo"
    repo.mkdir()

    def git(*args: str) -> None:
        subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)

    git("init", "-b", "main")
    git("config", "user.email", "test@test.com")
    git("config", "user.name", "Test")
    git("remote", "add", "origin", "git@github.com:gajus/gitdown.git")
    (repo / ".keep").write_text("", encoding="utf-8")
    git("add", ".")
    git("commit", "-m", "init")
    return repo


@pytest.fixture
def make_helper() -> type[RecordingHelper]:
    """Factory for :class:`RecordingHelper` instances."""
    return RecordingHelper
