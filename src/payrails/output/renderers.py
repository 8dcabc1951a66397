"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from payrails.output.console import create_console, get_output, style_for_rail

if TYPE_CHECKING:
    from rich.console import Console

    from payrails.services.result import ServiceResult

type Renderer = Callable[..., None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
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
    if result.op == "select_rail":
        return str(result.data.get("rail_type", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="pr.ok")
    op = Text(f"  {result.op}", style="pr.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pr.key")
    if key.endswith("_id"):
        v = Text(str(value), style="pr.id")
    elif key.startswith("total_"):
        v = Text(str(value), style="pr.amount")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pr.error")
    op = Text(f"  {result.op}", style="pr.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if err is None:
        return
    problems = err.detail.get("errors") or err.detail.get("problems") or []
    for problem in problems:
        console.print(f"  - {problem}")
    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k in ("errors", "problems"):
                continue
            console.print(f"    {k}: {v}")


# ── NACHA renderers ───────────────────────────────────────────────────


_FILE_FIELDS = (
    "file_id",
    "status",
    "immediate_destination",
    "destination_name",
    "immediate_origin",
    "origin_name",
    "created",
    "batch_count",
    "entry_count",
    "addenda_count",
    "block_count",
    "entry_hash",
    "total_debits",
    "total_credits",
)


def _batch_table(batches: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("SEC")
    table.add_column("Company")
    table.add_column("Description")
    table.add_column("Effective")
    table.add_column("Class", justify="right")
    table.add_column("Entries", justify="right")
    table.add_column("Debits", style="pr.amount", justify="right")
    table.add_column("Credits", style="pr.amount", justify="right")
    for batch in batches:
        table.add_row(
            str(batch.get("batch_number", "")),
            str(batch.get("sec_code", "")),
            str(batch.get("company_name", "")),
            str(batch.get("entry_description", "")),
            str(batch.get("effective_entry_date", "")),
            str(batch.get("service_class_code", "")),
            str(batch.get("entry_count", "")),
            str(batch.get("total_debits", "")),
            str(batch.get("total_credits", "")),
        )
    return table


def _render_file(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render nacha_inspect / nacha_generate as a summary plus a batch table."""
    _status_line(console, result)
    d = result.data
    for key in _FILE_FIELDS:
        if key in d:
            _field(console, key, d[key])
    if "output" in d:
        _field(console, "output", d["output"])
    batches = d.get("batches") or []
    if batches:
        console.print()
        console.print(_batch_table(batches))
    if verbose:
        _render_meta(console, result)


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "valid", result.data.get("valid"))
    if verbose:
        _render_meta(console, result)


def _render_roundtrip(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "file_id", d.get("file_id"))
    _field(console, "identical", d.get("identical"))
    _field(console, "lines", d.get("lines"))
    if verbose:
        _render_meta(console, result)


# ── Selection renderer ────────────────────────────────────────────────


def _render_selection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the chosen rail and the ranking of every eligible rail."""
    d = result.data
    rail_type = str(d.get("rail_type", ""))
    console.print(
        Text("OK", style="pr.ok"),
        Text(f"  {result.op}", style="pr.op"),
        Text(" → "),
        Text(str(d.get("rail", "")), style=style_for_rail(rail_type) or "bold"),
        Text(f"  score {float(d.get('score', 0.0)):.2f}", style="pr.score"),
    )

    ranking = d.get("ranking") or []
    if len(ranking) > 1 or verbose:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Rail")
        table.add_column("Score", style="pr.score", justify="right")
        table.add_column("Settlement", justify="right")
        table.add_column("Real-time")
        for row in ranking:
            table.add_row(
                Text(str(row["rail"]), style=style_for_rail(str(row["rail_type"]))),
                f"{float(row['score']):.2f}",
                f"{row['settlement_days']}d",
                "yes" if row["real_time"] else "no",
            )
        console.print(table)

    if verbose:
        criteria = d.get("criteria") or {}
        console.print(Text("  criteria:", style="dim"))
        for k, v in criteria.items():
            console.print(f"    {k}: {v}")
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    # NACHA
    "nacha_generate": _render_file,
    "nacha_inspect": _render_file,
    "nacha_validate": _render_validate,
    "nacha_roundtrip": _render_roundtrip,
    # Identifiers
    "check_routing": _render_generic,
    "check_swift": _render_generic,
    "check_iban": _render_generic,
    # Selection
    "select_rail": _render_selection,
}
