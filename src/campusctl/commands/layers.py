"""Command: zoom level and layer visibility for a view scale."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusCommand

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.command(
    cls=CampusCommand,
    examples="""\
  campusctl layers 0.3
  campusctl --json layers 2.5""",
)
@click.argument("scale", type=click.FloatRange(min=0.0))
@click.pass_obj
def layers(app: AppContext, scale: float) -> None:
    """Show which layers are visible at SCALE."""
    from campusctl.services.query import QueryService

    app.emit(QueryService(app.document).layers(scale))
