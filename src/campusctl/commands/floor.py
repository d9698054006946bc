"""Command group: floors and vertical links between them."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusGroup, compact

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.group(
    cls=CampusGroup,
    examples="""\
  campusctl floor add bldg_lib 1 --name "Ground floor"
  campusctl floor link node_stair_1f node_stair_2f
  campusctl floor delete floor_9c2d...""",
)
def floor() -> None:
    """Add, delete, and link floors."""


@floor.command(
    examples="""\
  campusctl floor add bldg_lib 0 --id floor_lib_g
  campusctl floor add bldg_lib --name Basement -- -1"""
)
@click.argument("building_id")
@click.argument("level", type=int)
@click.option("--id", "floor_id", default=None, help="Explicit floor ID.")
@click.option("--name", default=None, help="Display name.")
@click.pass_obj
def add(
    app: AppContext, building_id: str, level: int, floor_id: str | None, name: str | None
) -> None:
    """Add a floor to a building."""
    from campusctl.services.editor import EditorService

    payload = compact(id=floor_id, building_id=building_id, level=level, name=name)
    app.emit(EditorService(app.document).add_floor(payload))


@floor.command(examples="  campusctl floor delete floor_lib_g")
@click.argument("floor_id")
@click.pass_obj
def delete(app: AppContext, floor_id: str) -> None:
    """Delete a floor. Nodes on it are kept."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).delete_floor(floor_id))


@floor.command(
    examples="""\
  campusctl floor link node_stair_1f node_stair_2f
  campusctl --json floor link node_lift_b1 node_lift_g"""
)
@click.argument("node_a")
@click.argument("node_b")
@click.pass_obj
def link(app: AppContext, node_a: str, node_b: str) -> None:
    """Vertically link two nodes on different floors."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).link_floors(node_a, node_b))
