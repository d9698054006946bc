"""Custom Click base classes with --examples support.

Provides CampusCommand and CampusGroup that accept an ``examples``
parameter. When ``--examples`` is passed, the command prints usage
examples and exits. This keeps ``--help`` concise while making examples
available on demand.
"""

from __future__ import annotations

import json
from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class CampusCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class CampusGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = CampusCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = CampusCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


# ── Shared parameter types ───────────────────────────────────────────


class PointType(click.ParamType):
    """``X,Y`` pair parsed to a ``(float, float)`` tuple."""

    name = "x,y"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if isinstance(value, tuple):
            return value
        try:
            x, y = (float(part) for part in str(value).split(","))
        except ValueError:
            self.fail(f"{value!r} is not an X,Y pair", param, ctx)
        return (x, y)


class JsonObjectType(click.ParamType):
    """A JSON object literal, e.g. ``'{"label": "Lobby"}'``."""

    name = "json"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if isinstance(value, dict):
            return value
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            self.fail(f"invalid JSON: {exc.msg}", param, ctx)
        if not isinstance(parsed, dict):
            self.fail("expected a JSON object", param, ctx)
        return parsed


POINT = PointType()
JSON_OBJECT = JsonObjectType()


def compact(**fields: Any) -> dict[str, Any]:
    """Keyword arguments with unset (``None`` or empty) options dropped."""
    return {k: v for k, v in fields.items() if v is not None and v != ()}
