"""Command group: traversal nodes (add, update, delete, list)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from campusctl.commands._base import JSON_OBJECT, POINT, CampusGroup, compact
from campusctl.domain.types import NodeType

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext

_NODE_EXAMPLES = """\
  campusctl node add --type entrance --at 12,40 --floor floor_1f --label "Main entrance"
  campusctl node update node_3f2a... '{"label": "Lobby"}'
  campusctl node delete node_3f2a...
  campusctl node list --floor floor_1f"""

_NODE_TYPES = click.Choice([t.value for t in NodeType])


@click.group(cls=CampusGroup, examples=_NODE_EXAMPLES)
def node() -> None:
    """Add, update, delete, and list nodes."""


@node.command(
    examples="""\
  campusctl node add
  campusctl node add --type staircase --at 4.5,10 --floor floor_2f
  campusctl node add --id node_lobby --label Lobby --prop '{"accessible": true}'"""
)
@click.option("--id", "node_id", default=None, help="Explicit node ID (generated if omitted).")
@click.option("--type", "node_type", type=_NODE_TYPES, default=None, help="Node type.")
@click.option("--at", "position", type=POINT, default=None, help="Position as X,Y.")
@click.option("--floor", "floor_id", default=None, help="Floor ID.")
@click.option("--label", default=None, help="Display label.")
@click.option("--prop", "properties", type=JSON_OBJECT, default=None, help="Properties JSON.")
@click.pass_obj
def add(
    app: AppContext,
    node_id: str | None,
    node_type: str | None,
    position: tuple[float, float] | None,
    floor_id: str | None,
    label: str | None,
    properties: dict[str, Any] | None,
) -> None:
    """Add a node."""
    from campusctl.services.editor import EditorService

    payload = compact(
        id=node_id,
        type=node_type,
        position=position,
        floor_id=floor_id,
        label=label,
        properties=properties,
    )
    app.emit(EditorService(app.document).add_node(payload))


@node.command(
    examples="""\
  campusctl node update node_3f2a... '{"label": "Lobby", "type": "room"}'
  campusctl node update node_3f2a... '{"position": {"x": 3, "y": 4}}'"""
)
@click.argument("node_id")
@click.argument("patch", type=JSON_OBJECT)
@click.pass_obj
def update(app: AppContext, node_id: str, patch: dict[str, Any]) -> None:
    """Patch fields of a node (JSON object, camelCase or snake_case keys)."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).update_node(node_id, patch))


@node.command(examples="  campusctl node delete node_3f2a...")
@click.argument("node_id")
@click.pass_obj
def delete(app: AppContext, node_id: str) -> None:
    """Delete a node and every edge touching it."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).delete_node(node_id))


@node.command(
    "list",
    examples="""\
  campusctl node list
  campusctl -q node list --floor floor_1f""",
)
@click.option("--floor", "floor_id", default=None, help="Only nodes on this floor.")
@click.pass_obj
def list_cmd(app: AppContext, floor_id: str | None) -> None:
    """List nodes."""
    from campusctl.services.query import QueryService

    app.emit(QueryService(app.document).search(floor_id=floor_id))
