"""Subcommand modules for campusctl.

Provides register_commands() which uses deferred imports to keep
``campusctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    6 groups (have subcommands) + 6 standalone commands.
    """
    # --- Groups ---
    from campusctl.commands.building import building
    from campusctl.commands.door import door
    from campusctl.commands.edge import edge
    from campusctl.commands.floor import floor
    from campusctl.commands.node import node
    from campusctl.commands.space import space

    cli.add_command(node)
    cli.add_command(edge)
    cli.add_command(space)
    cli.add_command(building)
    cli.add_command(floor)
    cli.add_command(door)

    # --- Standalone commands ---
    from campusctl.commands.check import check
    from campusctl.commands.init_cmd import init_cmd
    from campusctl.commands.layers import layers
    from campusctl.commands.route import route
    from campusctl.commands.search import search
    from campusctl.commands.snap import snap

    cli.add_command(init_cmd)
    cli.add_command(check)
    cli.add_command(route)
    cli.add_command(snap)
    cli.add_command(search)
    cli.add_command(layers)
