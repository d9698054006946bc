"""Node search by type, location, and label."""

from __future__ import annotations

from campusctl.domain.models import CampusGraph, Node
from campusctl.domain.types import NodeType


def search_nodes(
    graph: CampusGraph,
    *,
    type: NodeType | str | None = None,  # noqa: A002
    floor_id: str | None = None,
    building_id: str | None = None,
    label_contains: str | None = None,
) -> list[Node]:
    """Return nodes matching every given filter, in insertion order.

    The label match is a case-insensitive substring test; nodes without a
    label never match it.
    """
    wanted_type = NodeType(type) if type is not None else None
    needle = label_contains.lower() if label_contains else None

    matches: list[Node] = []
    for node in graph.nodes.values():
        if wanted_type is not None and node.type != wanted_type:
            continue
        if floor_id is not None and node.floor_id != floor_id:
            continue
        if building_id is not None and node.building_id != building_id:
            continue
        if needle is not None and needle not in (node.label or "").lower():
            continue
        matches.append(node)
    return matches
