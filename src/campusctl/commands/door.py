"""Command group: doors between adjacent spaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusGroup

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.group(
    cls=CampusGroup,
    examples="""\
  campusctl door place 10 4
  campusctl door place 10 4 --threshold 0.5
  campusctl door remove edge_91c0...""",
)
def door() -> None:
    """Place and remove doors on shared walls."""


@door.command(examples="  campusctl door place 10 4 --threshold 1")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option(
    "--threshold",
    type=float,
    default=None,
    help="Max distance from a wall, in map units (default 2).",
)
@click.pass_obj
def place(app: AppContext, x: float, y: float, threshold: float | None) -> None:
    """Connect the two spaces sharing the wall nearest X,Y."""
    from campusctl.domain.geometry import Point
    from campusctl.services.autolink import WALL_THRESHOLD
    from campusctl.services.editor import EditorService

    service = EditorService(app.document)
    position = Point(x=x, y=y)
    app.emit(service.place_door(position, threshold=threshold or WALL_THRESHOLD))


@door.command(examples="  campusctl door remove edge_91c0...")
@click.argument("edge_id")
@click.pass_obj
def remove(app: AppContext, edge_id: str) -> None:
    """Remove a door edge."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).remove_door(edge_id))
