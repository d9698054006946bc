"""Command: constraint-aware route between two nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.commands._base import CampusCommand, compact
from campusctl.domain.types import OptimizeBy, Weather

if TYPE_CHECKING:
    from campusctl.commands._context import AppContext


def _blocked_pair(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> tuple[dict[str, str], ...]:
    pairs = []
    for value in values:
        from_node, sep, to_node = value.partition(":")
        if not sep or not from_node or not to_node:
            raise click.BadParameter(f"{value!r} is not FROM:TO", ctx=ctx, param=param)
        pairs.append({"from": from_node, "to": to_node})
    return tuple(pairs)


@click.command(
    cls=CampusCommand,
    examples="""\
  campusctl route node_gate node_lab_204
  campusctl route node_gate node_lab_204 --profile accessible --weather rain
  campusctl route node_gate node_lab_204 --width 0.9 --grant keycard --alternatives 2
  campusctl -q route node_a node_b --avoid node_c --block node_d:node_e""",
)
@click.argument("start")
@click.argument("end")
@click.option(
    "--optimize",
    "optimize_by",
    type=click.Choice([o.value for o in OptimizeBy]),
    default=None,
    help="Minimise distance or estimated time (default from [routing]).",
)
@click.option("--width", type=float, default=None, help="Traveller width.")
@click.option("--height", type=float, default=None, help="Traveller height.")
@click.option("--weight", type=float, default=None, help="Traveller weight.")
@click.option("--grant", "requires", multiple=True, help="Capability tag held (repeatable).")
@click.option(
    "--block",
    "blocked",
    multiple=True,
    callback=_blocked_pair,
    help="Directed FROM:TO step to refuse (repeatable).",
)
@click.option("--avoid", multiple=True, help="Node or edge ID to avoid (repeatable).")
@click.option("--profile", default=None, help="Routing profile: default, cart, rain, accessible.")
@click.option(
    "--weather",
    type=click.Choice([w.value for w in Weather]),
    default=None,
    help="Weather applied to outdoor edges.",
)
@click.option("--alternatives", type=click.IntRange(min=0), default=None, help="Extra paths.")
@click.pass_obj
def route(
    app: AppContext,
    start: str,
    end: str,
    optimize_by: str | None,
    width: float | None,
    height: float | None,
    weight: float | None,
    requires: tuple[str, ...],
    blocked: tuple[dict[str, str], ...],
    avoid: tuple[str, ...],
    profile: str | None,
    weather: str | None,
    alternatives: int | None,
) -> None:
    """Find the cheapest route from START to END."""
    from campusctl.services.query import QueryService

    dims = compact(width=width, height=height, weight=weight)
    constraints = compact(max=dims or None, requires=requires, blocked=blocked)
    app.emit(
        QueryService(app.document).route(
            start,
            end,
            constraints=constraints,
            avoid=avoid,
            optimize_by=optimize_by,
            profile=profile,
            weather=weather,
            max_alternatives=alternatives,
        )
    )
