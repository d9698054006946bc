"""Command group: edges between nodes (add, update, delete)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from campusctl.commands._base import JSON_OBJECT, CampusGroup, compact
from campusctl.domain.types import EdgeDirection

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext

_EDGE_EXAMPLES = """\
  campusctl edge add node_a... node_b...
  campusctl edge add node_a... node_b... --direction forward --steps --max-width 0.9
  campusctl edge update edge_91c0... '{"isOutdoor": true}'
  campusctl edge delete edge_91c0..."""


@click.group(cls=CampusGroup, examples=_EDGE_EXAMPLES)
def edge() -> None:
    """Add, update, and delete edges."""


@edge.command(
    examples="""\
  campusctl edge add node_a... node_b...
  campusctl edge add node_a... node_b... --distance 12.5 --time 9
  campusctl edge add node_a... node_b... --require keycard --block node_b...:node_a..."""
)
@click.argument("source")
@click.argument("target")
@click.option("--id", "edge_id", default=None, help="Explicit edge ID (generated if omitted).")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in EdgeDirection]),
    default=None,
    help="Traversal direction (default bidirectional).",
)
@click.option("--distance", type=float, default=None, help="Override the derived distance.")
@click.option("--time", "estimated_time", type=float, default=None, help="Estimated seconds.")
@click.option("--width", type=float, default=None, help="Passage width (default 1.5).")
@click.option("--steps/--no-steps", "has_steps", default=None, help="Passage has steps.")
@click.option("--outdoor/--indoor", "is_outdoor", default=None, help="Passage is outdoors.")
@click.option("--label", default=None, help="Display label.")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable).")
@click.option("--max-width", type=float, default=None, help="Widest traveller admitted.")
@click.option("--max-height", type=float, default=None, help="Tallest traveller admitted.")
@click.option("--max-weight", type=float, default=None, help="Heaviest traveller admitted.")
@click.option("--require", "requires", multiple=True, help="Required capability tag.")
@click.option("--block", "blocked", multiple=True, help="Blocked direction FROM:TO.")
@click.pass_obj
def add(
    app: AppContext,
    source: str,
    target: str,
    edge_id: str | None,
    direction: str | None,
    distance: float | None,
    estimated_time: float | None,
    width: float | None,
    has_steps: bool | None,
    is_outdoor: bool | None,
    label: str | None,
    tags: tuple[str, ...],
    max_width: float | None,
    max_height: float | None,
    max_weight: float | None,
    requires: tuple[str, ...],
    blocked: tuple[str, ...],
) -> None:
    """Connect two nodes with an edge."""
    from campusctl.services.editor import EditorService

    limits = compact(width=max_width, height=max_height, weight=max_weight)
    constraints = compact(
        max=limits or None,
        requires=requires,
        blocked=tuple(_pair(b) for b in blocked),
    )
    payload = compact(
        id=edge_id,
        source_node_id=source,
        target_node_id=target,
        direction=direction,
        distance=distance,
        estimated_time=estimated_time,
        width=width,
        has_steps=has_steps,
        is_outdoor=is_outdoor,
        label=label,
        tags=tags,
        constraints=constraints or None,
    )
    app.emit(EditorService(app.document).add_edge(payload))


def _pair(value: str) -> tuple[str, str]:
    from_node, sep, to_node = value.partition(":")
    if not sep or not from_node or not to_node:
        raise click.BadParameter(f"{value!r} is not FROM:TO", param_hint="--block")
    return (from_node, to_node)


@edge.command(
    examples="""\
  campusctl edge update edge_91c0... '{"hasSteps": true}'
  campusctl edge update edge_91c0... '{"targetNodeId": "node_c..."}'"""
)
@click.argument("edge_id")
@click.argument("patch", type=JSON_OBJECT)
@click.pass_obj
def update(app: AppContext, edge_id: str, patch: dict[str, Any]) -> None:
    """Patch fields of an edge (JSON object)."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).update_edge(edge_id, patch))


@edge.command(examples="  campusctl edge delete edge_91c0...")
@click.argument("edge_id")
@click.pass_obj
def delete(app: AppContext, edge_id: str) -> None:
    """Delete an edge."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).delete_edge(edge_id))
