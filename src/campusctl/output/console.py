"""Rich Console factory and theme for campusctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CAMPUS_THEME = Theme(
    {
        "campus.ok": "bold green",
        "campus.error": "bold red",
        "campus.warning": "bold yellow",
        "campus.op": "bold cyan",
        "campus.key": "dim",
        "campus.id": "bold blue",
        "campus.path": "dim",
        "campus.rule": "bold magenta",
        "campus.cost": "magenta",
    }
)

SEVERITY_STYLES: dict[str, str] = {
    "error": "campus.error",
    "warning": "campus.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CAMPUS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
