"""Command: resolve a cursor position against nearby geometry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import POINT, CampusCommand

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.command(
    cls=CampusCommand,
    examples="""\
  campusctl snap 10.2 3.9
  campusctl snap 10.2 3.9 --floor floor_1f --prev 0,4
  campusctl --json snap 7 7 --grid 0.5""",
)
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option("--floor", "floor_id", default=None, help="Only snap to geometry on this floor.")
@click.option("--prev", "previous", type=POINT, default=None, help="Previous point X,Y.")
@click.option("--grid", "grid_size", type=float, default=None, help="Enable a grid of this size.")
@click.pass_obj
def snap(
    app: AppContext,
    x: float,
    y: float,
    floor_id: str | None,
    previous: tuple[float, float] | None,
    grid_size: float | None,
) -> None:
    """Snap X,Y to a vertex, edge, orthogonal guide, or grid."""
    from campusctl.domain.geometry import Point
    from campusctl.services.query import QueryService

    prev_point = Point.model_validate(previous) if previous else None
    app.emit(
        QueryService(app.document).snap(
            x, y, floor_id=floor_id, previous=prev_point, grid_size=grid_size
        )
    )
