"""Command: document initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusCommand

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  campusctl init
  campusctl -f north-campus.json init
  campusctl init --force"""


@click.command("init", cls=CampusCommand, examples=_INIT_EXAMPLES)
@click.option("--force", is_flag=True, help="Overwrite an existing document.")
@click.pass_obj
def init_cmd(app: AppContext, force: bool) -> None:
    """Create an empty campus document."""
    from campusctl.services.editor import EditorService

    app.emit(EditorService(app.document).init(force=force))
