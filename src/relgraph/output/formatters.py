"""Rich/JSON output for ServiceResult.

Human output is dispatched on ``result.op``; unknown ops fall through to
a generic key-value renderer. ``--json`` dumps the result model as is.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from relgraph.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from relgraph.services.result import ServiceResult


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display."""
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console()
    if result.ok:
        _status_line(console, result)
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="rg.ok"), Text(f"  {result.op}", style="rg.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    console.print(Text(f"  {key}: ", style="rg.key"), Text(str(value)), sep="")


def _kind_text(item: dict[str, Any]) -> Text:
    kind = str(item.get("kind", ""))
    return Text(kind, style=style_for_kind(kind))


def _vertex_table(items: list[dict[str, Any]], *, score: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Vertex", style="rg.id", no_wrap=True)
    table.add_column("Kind")
    if score:
        table.add_column("Score", style="rg.score", justify="right")
    table.add_column("Gloss")
    for item in items:
        row: list[Any] = [Text(str(item.get("id", ""))), _kind_text(item)]
        if score:
            row.append(f"{float(item.get('score', 0.0)):.6f}")
        row.append(Text(str(item.get("gloss", ""))))
        table.add_row(*row)
    return table


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="rg.error"),
        Text(f"  {result.op}{code}", style="rg.op"),
        Text(f" - {msg}"),
        sep="",
    )


def _render_generic(result: ServiceResult, console: Console) -> None:
    for key, value in result.data.items():
        _field(console, key, value)


def _render_info(result: ServiceResult, console: Console) -> None:
    d = result.data
    _field(console, "vertices", f"{d['vertices']} ({d['concepts']} concepts, {d['words']} words)")
    _field(console, "edges", d["edges"])
    console.print(
        Text("  relations: ", style="rg.key"),
        Text(" ".join(d["relations"]), style="rg.relation"),
        sep="",
    )
    _field(console, "sources", " ".join(d["sources"]))
    for comment in d["comments"]:
        _field(console, "comment", comment)


def _render_dump(result: ServiceResult, console: Console) -> None:
    for v in result.data["vertices"]:
        line = f"{v['index']} {v['kind']} {v['id']}"
        if v.get("gloss"):
            line += f" {v['gloss']}"
        console.print(line, markup=False, soft_wrap=True)
    for e in result.data["edges"]:
        rels = ",".join(e["relations"])
        console.print(
            f"{e['source']} -> {e['target']} w={e['weight']:g} rels={rels}",
            markup=False,
            soft_wrap=True,
        )


def _render_reach(result: ServiceResult, console: Console) -> None:
    _field(console, "source_id", result.data["source_id"])
    _field(console, "count", result.data["count"])
    console.print(_vertex_table(result.data["items"]))


def _render_path(result: ServiceResult, console: Console) -> None:
    d = result.data
    _field(console, "length", d["length"])
    _field(console, "cost", f"{d['cost']:g}")
    chain = Text("  ")
    for i, step in enumerate(d["steps"]):
        if i:
            chain.append(" -> ", style="rg.key")
        chain.append(str(step["id"]), style="rg.id")
    console.print(chain)


def _render_rank(result: ServiceResult, console: Console) -> None:
    _field(console, "seeds", " ".join(result.data["seeds"]))
    console.print(_vertex_table(result.data["items"], score=True))


def _render_build(result: ServiceResult, console: Console) -> None:
    d = result.data
    _field(console, "output", d["output"])
    _field(console, "vertices", d["vertices"])
    _field(console, "edges", d["edges"])
    _field(console, "relations", " ".join(d["relations"]))
    for key in ("accepted", "dropped", "dictionary_entries"):
        if key in d:
            _field(console, key, d[key])


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "info": _render_info,
    "dump": _render_dump,
    "reach": _render_reach,
    "path": _render_path,
    "rank": _render_rank,
    "build": _render_build,
    "extend": _render_build,
}
