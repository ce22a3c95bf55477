"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from chronolinker.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from chronolinker.services.result import ServiceResult


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
    """Minimal output for ``--quiet``: the affected path, or just the status."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    path = result.data.get("path")
    if isinstance(path, str):
        return path
    streams = result.data.get("streams")
    if result.op == "list_streams" and isinstance(streams, list):
        return "\n".join(s["id"] for s in streams)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="chrono.ok"), Text(f"  {result.op}", style="chrono.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="chrono.key")
    if value is None:
        v = Text("(none)", style="chrono.missing")
    elif key in ("path", "old_path", "child"):
        v = Text(str(value), style="chrono.path")
    elif key in ("before", "after"):
        v = Text(str(value), style="chrono.link")
    elif key == "stream":
        v = Text(str(value), style="chrono.id")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v)


def _render_errors(console: Console, errors: list[dict[str, Any]]) -> None:
    for err in errors:
        where = err.get("path") or err.get("stream", "?")
        console.print(
            Text("  error ", style="chrono.error"),
            Text(f"{where} [{err.get('code')}]: {err.get('message')}"),
        )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="chrono.error"),
        Text(f"  {result.op}{code}", style="chrono.op"),
        Text(f": {msg}"),
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Per-op renderers ──────────────────────────────────────────────────


def _render_streams(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    streams = result.data.get("streams", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="chrono.id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Folder", style="chrono.path")
    table.add_column("Type")
    table.add_column("Format")
    table.add_column("Belonging")
    for stream in streams:
        belonging = stream.get("belonging")
        table.add_row(
            stream["id"],
            stream["name"],
            stream["folder_path"] or "/",
            stream["note_type"],
            stream["date_format"],
            f"{belonging['note_type']} in {belonging['folder'] or '/'}" if belonging else "-",
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(streams))} streams")


def _render_links(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render update_links / create_document / rename results."""
    _status_line(console, result)
    for key in ("path", "old_path", "stream", "date", "before", "after"):
        if key in result.data:
            _field(console, key, result.data[key])
    if "changed" in result.data:
        _field(console, "changed", result.data["changed"])
    if "updated" in result.data:
        updated = result.data["updated"]
        _field(console, "updated", len(updated))
        if verbose:
            for path in updated:
                console.print(Text(f"    {path}", style="chrono.path"))
    _render_errors(console, result.data.get("errors", []))


def _render_navigate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "direction", d.get("direction"))
    _field(console, "path", d.get("path"))
    if d.get("exists"):
        _field(console, "exists", True)
    else:
        missing = Text(d.get("date", ""), style="chrono.missing")
        console.print(Text("  missing: ", style="chrono.key"), missing)


_COUNT_KEYS = ("processed", "updated", "created", "refreshed")


def _render_batch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render relink and refresh batch totals."""
    _status_line(console, result)
    d = result.data
    for key in ("stream", *_COUNT_KEYS):
        if key in d:
            _field(console, key, d[key])
    per_stream = d.get("streams")
    if verbose and isinstance(per_stream, list):
        for entry in per_stream:
            counts = ", ".join(f"{k}={entry[k]}" for k in _COUNT_KEYS if k in entry)
            console.print(f"    {entry.get('stream')}: {counts}")
    errors = d.get("errors", [])
    _field(console, "errors", len(errors))
    _render_errors(console, errors)


def _render_belonging(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("path", "child", "created", "changed"):
        if key in d:
            _field(console, key, d[key])
    children = d.get("children", [])
    _field(console, "children", len(children))
    if verbose:
        for child in children:
            console.print(Text(f"    {child}", style="chrono.link"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "list_streams": _render_streams,
    "update_links": _render_links,
    "create_document": _render_links,
    "rename_document": _render_links,
    "propagate_rename": _render_links,
    "navigate_adjacent": _render_navigate,
    "update_stream_links": _render_batch,
    "update_all_links": _render_batch,
    "refresh_stream": _render_batch,
    "refresh_all_enabled_streams": _render_batch,
    "upsert_belonging_document": _render_belonging,
    "refresh_content": _render_belonging,
}
