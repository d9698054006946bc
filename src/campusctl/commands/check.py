"""Command: campus graph integrity check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusCommand

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


@click.command(
    cls=CampusCommand,
    examples="""\
  campusctl check
  campusctl check --errors-only
  campusctl --json check --min-severity error""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default=None,
    help="Hide issues below this severity (default from [check]).",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def check(app: AppContext, min_severity: str | None, errors_only: bool) -> None:
    """Validate the campus graph and report issues."""
    from campusctl.services.check import CheckService

    threshold = "error" if errors_only else min_severity
    app.emit(CheckService(app.document).check(min_severity=threshold))
