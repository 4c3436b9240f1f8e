"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op``; unknown ops fall through to a generic
key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from attrstore.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from attrstore.services.result import ServiceResult

_TARGET_KEYS = ("domain", "item", "key")


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
    """Render minimal output for ``--quiet`` mode: just the payload."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if "value" in result.data:
        value = result.data["value"]
        return "" if value is None else str(value)
    if "json" in result.data:
        return result.data["json"] or "null"
    if "exists" in result.data and result.op == "domain_exists":
        return "true" if result.data["exists"] else "false"
    if "items" in result.data and result.op == "list_items":
        return "\n".join(result.data["items"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="as.ok"), Text(f"  {result.op}", style="as.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="as.key")
    if value is None:
        v = Text("(absent)", style="as.absent")
    elif key in _TARGET_KEYS:
        v = Text(str(value), style="as.name")
    elif key == "value":
        v = Text(str(value), style="as.value")
    else:
        v = Text(str(value))
    console.print(k + v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="as.error"), Text(f"  {result.op}{code}", style="as.op"), f": {msg}"
    )
    if err and err.detail.get("failed"):
        for item, key in err.detail["failed"]:
            console.print(Text(f"    failed: {item}/{key}", style="as.warning"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_property(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in (*_TARGET_KEYS, "value", "encrypted"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_items(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "domain", result.data.get("domain"))
    items = result.data.get("items", [])
    if items:
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("#", justify="right", style="dim")
        table.add_column("Item", style="as.name")
        for index, item in enumerate(items, start=1):
            table.add_row(str(index), item)
        console.print(table)
    _field(console, "count", result.data.get("count", len(items)))
    if verbose:
        _render_meta(console, result)


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "domain", result.data.get("domain"))
    _field(console, "attributes", result.data.get("count", 0))
    _field(console, "items", ", ".join(result.data.get("items", [])) or "-")
    if verbose:
        _render_meta(console, result)


_Renderer = Callable[..., None]

_OP_RENDERERS: dict[str, _Renderer] = {
    "get_property": _render_property,
    "set_property": _render_property,
    "list_items": _render_items,
    "load_domain": _render_load,
}
