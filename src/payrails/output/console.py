"""Rich Console factory and theme for payrails output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PAYRAILS_THEME = Theme(
    {
        "pr.ok": "bold green",
        "pr.error": "bold red",
        "pr.warning": "bold yellow",
        "pr.op": "bold cyan",
        "pr.key": "dim",
        "pr.id": "bold blue",
        "pr.amount": "bold",
        "pr.score": "magenta",
        "pr.rail.ach": "green",
        "pr.rail.wire": "blue",
        "pr.rail.check": "yellow",
        "pr.rail.rtgs": "red",
        "pr.rail.virtual_card": "cyan",
    }
)

_RAIL_STYLES: dict[str, str] = {
    "ach": "pr.rail.ach",
    "wire": "pr.rail.wire",
    "check": "pr.rail.check",
    "rtgs": "pr.rail.rtgs",
    "virtual_card": "pr.rail.virtual_card",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PAYRAILS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_rail(rail_type: str) -> str:
    return _RAIL_STYLES.get(rail_type, "")
