"""Command group: spaces (add, update, delete)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from campusctl.commands._base import JSON_OBJECT, POINT, CampusGroup, compact
from campusctl.domain.types import SpaceType

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext

_SPACE_EXAMPLES = """\
  campusctl space add --type classroom --name "B-101" -p 0,0 -p 10,0 -p 10,8 -p 0,8
  campusctl space update space_7d1e... '{"capacity": 40}'
  campusctl space delete space_7d1e..."""


@click.group(cls=CampusGroup, examples=_SPACE_EXAMPLES)
def space() -> None:
    """Add, update, and delete spaces."""


@space.command(
    examples="""\
  campusctl space add --type lab --floor floor_1f -p 0,0 -p 6,0 -p 6,4 -p 0,4
  campusctl space add --name Atrium --node node_3f2a... --capacity 200"""
)
@click.option("--id", "space_id", default=None, help="Explicit space ID (generated if omitted).")
@click.option(
    "--type",
    "space_type",
    type=click.Choice([t.value for t in SpaceType]),
    default=None,
    help="Space type.",
)
@click.option("--name", default=None, help="Display name.")
@click.option("--floor", "floor_id", default=None, help="Floor ID.")
@click.option("--building", "building_id", default=None, help="Building ID.")
@click.option("-p", "--point", "polygon", type=POINT, multiple=True, help="Polygon vertex X,Y.")
@click.option("--node", "node_ids", multiple=True, help="Contained node ID (repeatable).")
@click.option("--capacity", type=int, default=None, help="Occupancy capacity.")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable).")
@click.pass_obj
def add(
    app: AppContext,
    space_id: str | None,
    space_type: str | None,
    name: str | None,
    floor_id: str | None,
    building_id: str | None,
    polygon: tuple[tuple[float, float], ...],
    node_ids: tuple[str, ...],
    capacity: int | None,
    tags: tuple[str, ...],
) -> None:
    """Add a space."""
    from campusctl.services.editor import EditorService

    payload = compact(
        id=space_id,
        type=space_type,
        name=name,
        floor_id=floor_id,
        building_id=building_id,
        polygon=polygon,
        contained_node_ids=node_ids,
        capacity=capacity,
        tags=tags,
    )
    app.emit(EditorService(app.document).add_space(payload))


@space.command(examples="""  campusctl space update space_7d1e... '{"name": "B-102"}'""")
@click.argument("space_id")
@click.argument("patch", type=JSON_OBJECT)
@click.pass_obj
def update(app: AppContext, space_id: str, patch: dict[str, Any]) -> None:
    """Patch fields of a space (JSON object)."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).update_space(space_id, patch))


@space.command(examples="  campusctl space delete space_7d1e...")
@click.argument("space_id")
@click.pass_obj
def delete(app: AppContext, space_id: str) -> None:
    """Delete a space. Contained nodes are kept."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).delete_space(space_id))
