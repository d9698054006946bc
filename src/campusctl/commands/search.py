"""Command: find nodes by type, floor, building, or label."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusCommand
from campusctl.domain.types import NodeType

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.command(
    cls=CampusCommand,
    examples="""\
  campusctl search --type staircase
  campusctl search --building bldg_lib --label lab
  campusctl -q search --floor floor_2f""",
)
@click.option(
    "--type",
    "node_type",
    type=click.Choice([t.value for t in NodeType]),
    default=None,
    help="Node type.",
)
@click.option("--floor", "floor_id", default=None, help="Floor ID.")
@click.option("--building", "building_id", default=None, help="Building ID.")
@click.option("--label", default=None, help="Case-insensitive label substring.")
@click.pass_obj
def search(
    app: AppContext,
    node_type: str | None,
    floor_id: str | None,
    building_id: str | None,
    label: str | None,
) -> None:
    """Search nodes. All given filters must match."""
    from campusctl.services.query import QueryService

    app.emit(
        QueryService(app.document).search(
            node_type=node_type, floor_id=floor_id, building_id=building_id, label=label
        )
    )
