"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from gitdown.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from gitdown.services.result import ServiceResult

# The rendered document is never echoed inside a summary.
_HIDDEN_FIELDS = frozenset({"markdown"})


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("name", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="gd.ok"), Text(f"  {result.op}", style="gd.op"))


def _field(console: Console, key: str, value: Any) -> None:
    line = Text("  ")
    line.append(f"{key}: ", style="gd.key")
    line.append(str(value))
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    for key, value in result.meta.items():
        _field(console, key, value)


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text(f"  WARNING: {warning}", style="gd.warning"))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    label = Text("ERROR", style="gd.error")
    op = Text(f"  {result.op}", style="gd.op")
    console.print(label, op)
    if result.error is None:
        console.print("  Unknown error")
        return
    console.print(f"  {result.error.message}")
    if verbose:
        _field(console, "code", result.error.code)
        for key, value in result.error.detail.items():
            _field(console, key, value)


def _render_render(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "source", data.get("source"))
    if data.get("destination"):
        line = Text("  ")
        line.append("destination: ", style="gd.key")
        line.append(str(data["destination"]), style="gd.path")
        console.print(line)
    _field(console, "passes", data.get("passes"))
    _field(console, "commands", data.get("commands"))
    if verbose:
        _render_meta(console, result)
    _render_warnings(console, result)


def _render_helpers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Helper", style="gd.helper")
    table.add_column("Weight", style="gd.weight", justify="right")
    if verbose:
        table.add_column("Origin", style="gd.path")
    for item in result.data.get("items", []):
        row = [str(item["name"]), str(item["weight"])]
        if verbose:
            row.append(str(item.get("origin", "")))
        table.add_row(*row)
    console.print(table)
    _field(console, "count", result.data.get("count", 0))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if key in _HIDDEN_FIELDS:
            continue
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)
    _render_warnings(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "render": _render_render,
    "helpers": _render_helpers,
}
