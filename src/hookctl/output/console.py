"""Rich Console factory and theme for hookctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

HOOKCTL_THEME = Theme(
    {
        "hookctl.ok": "bold green",
        "hookctl.error": "bold red",
        "hookctl.op": "bold cyan",
        "hookctl.key": "dim",
        "hookctl.hook": "bold blue",
        "hookctl.action": "bold",
        "hookctl.path": "dim",
        "hookctl.priority": "magenta",
    }
)


def create_console() -> Console:
    """Create a 120-column Console that renders to a StringIO buffer."""
    return Console(file=StringIO(), theme=HOOKCTL_THEME, highlight=False, width=120)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
