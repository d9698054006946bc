"""Command group: buildings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusGroup, compact

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.group(
    cls=CampusGroup,
    examples="""\
  campusctl building add "Science Hall" --short-name SCI
  campusctl building delete bldg_0a1b...""",
)
def building() -> None:
    """Add and delete buildings."""


@building.command(examples="""  campusctl building add "Library" --id bldg_lib""")
@click.argument("name")
@click.option("--id", "building_id", default=None, help="Explicit building ID.")
@click.option("--short-name", default=None, help="Abbreviation shown on maps.")
@click.pass_obj
def add(app: AppContext, name: str, building_id: str | None, short_name: str | None) -> None:
    """Add a building."""
    from campusctl.services.editor import EditorService

    payload = compact(id=building_id, name=name, short_name=short_name)
    app.emit(EditorService(app.document).add_building(payload))


@building.command(examples="  campusctl building delete bldg_lib")
@click.argument("building_id")
@click.pass_obj
def delete(app: AppContext, building_id: str) -> None:
    """Delete a building. Its floors stay, detached."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).delete_building(building_id))
