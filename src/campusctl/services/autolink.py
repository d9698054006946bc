"""Door autolink — placing a door on a shared wall connects both spaces.

A door is a plain edge between one anchor node in each space. The first
contained node of a space is its anchor; a space without one gets a new
node at its polygon centroid.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from campusctl.domain.autocomplete import complete_edge, complete_node, floor_building_map
from campusctl.domain.geometry import (
    ORIGIN,
    Point,
    centroid,
    distance,
    nearest_point_on_segment,
    polygon_sides,
)
from campusctl.domain.models import CampusGraph, Edge, Node, Space
from campusctl.services.result import ErrorCode, GraphResult

logger = logging.getLogger(__name__)

WALL_THRESHOLD = 2.0


def _wall_key(a: Point, b: Point) -> tuple[tuple[float, float], tuple[float, float]]:
    """Direction-independent key for a wall segment."""
    p, q = a.as_tuple(), b.as_tuple()
    return (p, q) if p <= q else (q, p)


def find_adjacent_spaces(
    graph: CampusGraph, position: Point, threshold: float = WALL_THRESHOLD
) -> tuple[Space, Space] | None:
    """Two spaces sharing the wall nearest to *position*, or None.

    Walls within *threshold* are considered closest first; the first one
    that belongs to at least two distinct spaces wins.
    """
    hits: list[tuple[float, tuple, str]] = []
    for space in graph.spaces.values():
        polygon = space.polygon or ()
        if len(polygon) < 2:
            continue
        for a, b in polygon_sides(polygon):
            d = distance(position, nearest_point_on_segment(position, a, b))
            if d <= threshold:
                hits.append((d, _wall_key(a, b), space.id))
    hits.sort(key=lambda hit: hit[0])

    owners: dict[tuple, list[str]] = defaultdict(list)
    for _, key, space_id in hits:
        if space_id not in owners[key]:
            owners[key].append(space_id)
    for space_ids in owners.values():
        if len(space_ids) >= 2:
            return graph.spaces[space_ids[0]], graph.spaces[space_ids[1]]
    return None


def _anchor(graph: CampusGraph, space_id: str) -> tuple[CampusGraph, str]:
    space = graph.spaces[space_id]
    existing = space.contained_node_ids or ()
    if existing and existing[0] in graph.nodes:
        return graph, existing[0]

    polygon = space.polygon or ()
    node = complete_node(
        Node(
            position=centroid(polygon) if len(polygon) >= 3 else ORIGIN,
            floor_id=space.floor_id,
        ),
        floor_building_map(graph.floors, graph.buildings),
    )
    space = space.model_copy(update={"contained_node_ids": (*existing, node.id)})
    graph = graph.replace(
        nodes={**graph.nodes, node.id: node},
        spaces={**graph.spaces, space_id: space},
    )
    return graph, node.id


def place_door(
    graph: CampusGraph, position: Point, threshold: float = WALL_THRESHOLD
) -> GraphResult:
    """Place a door at *position* on a wall shared by two spaces.

    Returns the new graph with ``anchor_node_ids`` and ``edge_id`` in
    ``data``, or ``NoSharedWall`` when no shared wall is within
    *threshold*. Two spaces anchored on the same node fail with ``EI-2``.
    """
    adjacent = find_adjacent_spaces(graph, position, threshold)
    if adjacent is None:
        return GraphResult.failure(
            "place_door",
            ErrorCode.NO_SHARED_WALL,
            f"Position ({position.x}, {position.y}) is not on a shared wall between two spaces",
            position=position.as_tuple(),
        )

    space_a, space_b = adjacent
    graph, anchor_a = _anchor(graph, space_a.id)
    graph, anchor_b = _anchor(graph, space_b.id)
    if anchor_a == anchor_b:
        return GraphResult.failure(
            "place_door",
            ErrorCode.SELF_LOOP,
            f"Spaces '{space_a.id}' and '{space_b.id}' share anchor node '{anchor_a}'",
            id=anchor_a,
            space_ids=[space_a.id, space_b.id],
        )
    edge = complete_edge(Edge(source_node_id=anchor_a, target_node_id=anchor_b), graph.nodes)

    logger.debug("place_door %s between %s and %s", edge.id, space_a.id, space_b.id)
    return GraphResult.success(
        "place_door",
        graph.replace(edges={**graph.edges, edge.id: edge}),
        id=edge.id,
        edge_id=edge.id,
        anchor_node_ids=[anchor_a, anchor_b],
        space_ids=[space_a.id, space_b.id],
    )


def remove_door(graph: CampusGraph, edge_id: str) -> GraphResult:
    """Delete a door edge. Anchor nodes stay; other doors may use them."""
    if edge_id not in graph.edges:
        return GraphResult.failure(
            "remove_door", ErrorCode.NOT_FOUND, f"Door edge '{edge_id}' not found", id=edge_id
        )
    logger.debug("remove_door %s", edge_id)
    return GraphResult.success(
        "remove_door",
        graph.replace(edges={k: e for k, e in graph.edges.items() if k != edge_id}),
        id=edge_id,
    )
