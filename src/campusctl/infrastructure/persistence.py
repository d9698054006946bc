"""Persistence codec — whole-document JSON serialization of a CampusGraph.

``save`` writes camelCase keys and omits unset (``None``) fields. ``load``
is strict: any malformed document raises :class:`DocumentError` with no
partial recovery. Loaded graphs pass through the autocomplete pipeline,
so documents written before a field existed still acquire its default.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from campusctl.domain.autocomplete import autocomplete
from campusctl.domain.models import MAPPING_FIELDS, CampusGraph

DEFAULT_INDENT = 2


class DocumentError(ValueError):
    """A campus document could not be parsed into a graph."""


def save(graph: CampusGraph, *, indent: int | None = DEFAULT_INDENT) -> str:
    """Serialize every entity mapping of *graph* to JSON text."""
    return graph.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def _fill_ids(data: dict[str, Any]) -> None:
    """Give entities without an ``id`` the key they are stored under."""
    for name in MAPPING_FIELDS.values():
        entries = data.get(name)
        if entries is None:
            continue
        if not isinstance(entries, dict):
            msg = f"'{name}' must be an object keyed by entity id"
            raise DocumentError(msg)
        for key, entity in entries.items():
            if isinstance(entity, dict) and "id" not in entity:
                entity["id"] = key


def _check_keys(graph: CampusGraph) -> None:
    for name in MAPPING_FIELDS.values():
        for key, entity in getattr(graph, name).items():
            if key != entity.id:
                msg = f"{name}: key '{key}' does not match entity id '{entity.id}'"
                raise DocumentError(msg)


def load(text: str) -> CampusGraph:
    """Parse JSON *text* into a completed CampusGraph.

    Raises:
        DocumentError: On invalid JSON, a non-object root, entities that
            fail validation, or a mapping key that differs from its id.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        raise DocumentError(msg) from exc
    if not isinstance(data, dict):
        msg = "Campus document root must be a JSON object"
        raise DocumentError(msg)

    _fill_ids(data)
    try:
        graph = CampusGraph.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(p) for p in first["loc"])
        msg = f"Invalid campus document at {loc}: {first['msg']}"
        raise DocumentError(msg) from exc

    _check_keys(graph)
    return autocomplete(graph)


def save_file(graph: CampusGraph, path: Path, *, indent: int | None = DEFAULT_INDENT) -> None:
    """Write *graph* to *path* atomically (temp file, then rename).

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(save(graph, indent=indent) + "\n", encoding="utf-8")
    tmp.replace(path)


def load_file(path: Path) -> CampusGraph:
    """Read and parse a campus document from *path*.

    Raises:
        DocumentError: When the file content is not a valid document.
        OSError: When the file cannot be read.
    """
    return load(path.read_text(encoding="utf-8"))
