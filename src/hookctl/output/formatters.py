"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables and styled status
lines) or machines (--json). Renderers are chosen by ``result.op``;
unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from hookctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from hookctl.services.result import ServiceResult


class OutputSettings(BaseModel):
    """How a result should be presented."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        if result.ok:
            return f"OK: {result.op}"
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return render_result(result)


def render_result(result: ServiceResult) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(
        Text("OK", style="hookctl.ok"),
        Text(f"  {result.op}", style="hookctl.op"),
        sep="",
    )


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="hookctl.key")
    if isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    elif key in ("root", "registry", "path"):
        v = Text(str(value), style="hookctl.path")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(
        Text("ERROR", style="hookctl.error"),
        Text(f"  {result.op}", style="hookctl.op"),
        Text(f" — {msg}"),
        sep="",
    )


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if not items:
        _status_line(console, result)
        console.print(Text("  No actions registered.", style="hookctl.key"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Hook", style="hookctl.hook")
    table.add_column("Priority", style="hookctl.priority", justify="right")
    table.add_column("Action", style="hookctl.action")
    table.add_column("Method")
    for item in items:
        table.add_row(item["hook"], str(item["priority"]), item["action"], item["method"])
    console.print(table)


def _render_install(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "root", result.data.get("root", ""))
    _field(console, "registry", result.data.get("registry", ""))
    _field(console, "entries", result.data.get("entries", 0))
    hooks = result.data.get("hooks", [])
    _field(console, "hooks", ", ".join(hooks) if hooks else "none")


def _render_dispatch(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "hook", result.data.get("hook", ""))
    for key in ("ran", "skipped", "failed"):
        values = result.data.get(key) or []
        if values:
            _field(console, key, ", ".join(values))


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "list": _render_list,
    "install": _render_install,
    "dispatch": _render_dispatch,
}
