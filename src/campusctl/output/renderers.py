"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from campusctl.output.console import SEVERITY_STYLES, create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from campusctl.services.result import ServiceResult


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
        return f"ERROR: {result.op}: {msg}"

    d = result.data
    if result.op == "route":
        return " ".join(d.get("node_ids", []))
    if result.op == "snap":
        pos = d.get("position", {})
        return f"{pos.get('x')} {pos.get('y')}"
    if "items" in d:
        return "\n".join(str(item["id"]) for item in d["items"] if "id" in item)
    if "id" in d:
        return str(d["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="campus.ok")
    op = Text(f"  {result.op}", style="campus.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="campus.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="campus.id")
    elif key == "path":
        v = Text(str(value), style="campus.path")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
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
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _health(console: Console, data: dict[str, Any]) -> None:
    """One-line validation summary carried by mutation results."""
    if "valid" not in data:
        return
    errors = data.get("error_count", 0)
    warnings = data.get("warning_count", 0)
    if data["valid"] and not warnings:
        console.print("  [campus.ok]valid[/campus.ok]")
    elif data["valid"]:
        console.print(f"  [campus.ok]valid[/campus.ok] ({warnings} warnings)")
    else:
        console.print(
            f"  [campus.error]invalid[/campus.error] ({errors} errors, {warnings} warnings)"
        )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="campus.error")
    op = Text(f"  {result.op}", style="campus.op")
    code = Text(f" [{err.code}] " if err else " ", style="campus.rule")
    console.print(label, op, code, msg, sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add/update/delete results with the post-commit health line."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "anchor_node_ids",
        "space_ids",
        "lower_node_id",
        "upper_node_id",
        "removed_edge_ids",
    )
    for key in mutation_keys:
        if key in result.data:
            _field(console, key, result.data[key])
    _health(console, result.data)
    if verbose:
        _render_meta(console, result)


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "path", result.data.get("path", ""))
    _field(console, "version", result.data.get("version", ""))


# ── Check renderer ────────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render validation issues grouped by rule."""
    issues = result.data.get("issues", [])

    if not issues:
        console.print("[campus.ok]OK[/campus.ok]  No issues found.")
    else:
        by_rule: dict[str, list[dict[str, Any]]] = {}
        for issue in issues:
            by_rule.setdefault(str(issue.get("rule_id", "?")), []).append(issue)

        for rule_id, rule_issues in by_rule.items():
            console.print(f"\n[campus.rule]{rule_id}[/campus.rule]")
            for issue in rule_issues:
                sev = str(issue.get("severity", "warning"))
                style = SEVERITY_STYLES.get(sev, "")
                prefix = f"[{style}]{sev}[/{style}]" if style else sev
                console.print(f"  {prefix}: {issue.get('message', '')}")
                if verbose and issue.get("target_ids"):
                    console.print(f"    targets: {', '.join(issue['target_ids'])}")

    errors = result.data.get("errors", 0)
    warnings = result.data.get("warnings", 0)
    console.print(f"\n{errors} errors, {warnings} warnings")
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _route_chain(console: Console, route: dict[str, Any], *, indent: str = "") -> None:
    transitions = {t["node_id"]: t for t in route.get("floor_transitions", [])}
    parts: list[str] = []
    for node_id in route.get("node_ids", []):
        part = f"[campus.id]{node_id}[/campus.id]"
        if node_id in transitions:
            part += f" [campus.warning]({transitions[node_id]['description']})[/campus.warning]"
        parts.append(part)
    console.print(indent + " -> ".join(parts))


def _render_route(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a route as a node chain with floor changes marked."""
    d = result.data
    _route_chain(console, d)
    console.print(
        f"\nDistance: {d.get('distance', 0.0):.2f}  "
        f"Cost: [campus.cost]{d.get('cost', 0.0):.2f}[/campus.cost]  "
        f"Hops: {len(d.get('edge_ids', []))}"
    )

    alternatives = d.get("alternatives", [])
    if alternatives:
        console.print(f"\n{len(alternatives)} alternatives:")
        for alt in alternatives:
            console.print(f"  [campus.cost]{alt.get('cost', 0.0):.2f}[/campus.cost]", end="  ")
            _route_chain(console, alt)
    if verbose:
        console.print(f"\nEdges: {', '.join(d.get('edge_ids', []))}")
        _render_meta(console, result)


def _render_snap(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    pos = d.get("position", {})
    console.print(f"[campus.op]{d.get('type', '?')}[/campus.op]  ({pos.get('x')}, {pos.get('y')})")
    target = d.get("snap_target")
    if target:
        _field(console, "snap_target", f"({target['x']}, {target['y']})")
    guide = d.get("guide_line")
    if guide:
        a, b = guide
        _field(console, "guide_line", f"({a['x']}, {a['y']}) -> ({b['x']}, {b['y']})")


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render matching nodes as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="campus.id", no_wrap=True)
    table.add_column("Type")
    table.add_column("Label")
    table.add_column("Floor")
    if verbose:
        table.add_column("Position", style="dim")

    for item in items:
        row = [
            str(item.get("id", "")),
            str(item.get("type", "")),
            str(item.get("label", "")),
            str(item.get("floor_id", "")),
        ]
        if verbose:
            pos = item.get("position") or {}
            row.append(f"({pos.get('x')}, {pos.get('y')})")
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} nodes")


def _render_layers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(f"[campus.op]{d.get('level')}[/campus.op]  scale={d.get('scale')}")
    for layer, visible in d.get("layers", {}).items():
        mark = "[campus.ok]on[/campus.ok]" if visible else "[dim]off[/dim]"
        console.print(f"  {layer}: {mark}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "init": _render_init,
    "add_node": _render_mutation,
    "update_node": _render_mutation,
    "delete_node": _render_mutation,
    "add_edge": _render_mutation,
    "update_edge": _render_mutation,
    "delete_edge": _render_mutation,
    "add_space": _render_mutation,
    "update_space": _render_mutation,
    "delete_space": _render_mutation,
    "add_building": _render_mutation,
    "delete_building": _render_mutation,
    "add_floor": _render_mutation,
    "delete_floor": _render_mutation,
    "add_vertical_link": _render_mutation,
    "place_door": _render_mutation,
    "remove_door": _render_mutation,
    "check": _render_check,
    "route": _render_route,
    "snap": _render_snap,
    "search": _render_search,
    "layers": _render_layers,
}
