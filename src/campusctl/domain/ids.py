"""Identifier generation and validation.

IDs are opaque, process-unique strings tagged by entity kind so that a
stray id in a log line or error message is recognizable at a glance:
``node_3f2a...``, ``edge_9c01...``.

INVARIANT: IDs are permanent. Once assigned, an entity's ID never changes.
"""

from __future__ import annotations

import re
import uuid

from campusctl.domain.types import EntityKind

KIND_PREFIXES: dict[EntityKind, str] = {
    EntityKind.NODE: "node_",
    EntityKind.EDGE: "edge_",
    EntityKind.SPACE: "space_",
    EntityKind.BUILDING: "bldg_",
    EntityKind.FLOOR: "floor_",
}

ID_PATTERNS: dict[EntityKind, re.Pattern[str]] = {
    kind: re.compile(rf"^{re.escape(prefix)}[0-9a-f]{{32}}$")
    for kind, prefix in KIND_PREFIXES.items()
}


def generate_id(kind: EntityKind | str) -> str:
    """Return a new ``{prefix}{32 hex chars}`` identifier for *kind*."""
    prefix = KIND_PREFIXES[EntityKind(kind)]
    return f"{prefix}{uuid.uuid4().hex}"


def validate_id(value: str, kind: EntityKind | str) -> bool:
    """Check whether *value* looks like a generated ID of *kind*.

    Hand-written IDs (``"lobby"``, ``"n1"``) are legal entity IDs; this
    only reports whether *value* came from :func:`generate_id`.
    """
    try:
        pattern = ID_PATTERNS[EntityKind(kind)]
    except ValueError:
        return False
    return pattern.match(value) is not None


def kind_of(value: str) -> EntityKind | None:
    """Infer the entity kind from a generated ID's prefix."""
    for kind, pattern in ID_PATTERNS.items():
        if pattern.match(value):
            return kind
    return None
