"""Autocomplete pipeline — fill defaults and derived fields on entities.

Pure functions, no infrastructure dependencies. Applied by the graph
manager before an entity is committed and by the persistence codec on
load, so documents written before a field existed still acquire it.

Stages:
  1. Default values  — fill missing fields with schema defaults
  2. Relation inference — building from floor, ``is_vertical`` from floors
  3. Geometry — edge distance from endpoint positions

INVARIANT: an explicitly set value is never overwritten. Running the
pipeline twice yields the same entities.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from campusctl.domain.geometry import ORIGIN, distance
from campusctl.domain.models import Building, CampusGraph, Edge, Floor, Node, Space
from campusctl.domain.types import EdgeDirection, NodeType, SpaceType

DEFAULT_EDGE_WIDTH = 1.5
DEFAULT_IMAGE_SCALE = 1.0


def _fill(entity: Any, defaults: Mapping[str, Any]) -> Any:
    """Copy *entity* with every ``None`` field in *defaults* filled in."""
    update = {k: v for k, v in defaults.items() if getattr(entity, k) is None and v is not None}
    return entity.model_copy(update=update) if update else entity


def level_to_name(level: int) -> str:
    """Display name for a floor level: 1 -> ``1F``, 0 -> ``1F``, -2 -> ``B2``."""
    if level > 0:
        return f"{level}F"
    if level == 0:
        return "1F"
    return f"B{abs(level)}"


def floor_building_map(
    floors: Mapping[str, Floor],
    buildings: Mapping[str, Building],
) -> dict[str, str]:
    """Resolve floor ID -> building ID.

    ``Building.floor_ids`` is authoritative; a floor's own ``building_id``
    fills the gaps.
    """
    mapping: dict[str, str] = {}
    for floor in floors.values():
        if floor.building_id:
            mapping[floor.id] = floor.building_id
    for building in buildings.values():
        for floor_id in building.floor_ids or ():
            mapping[floor_id] = building.id
    return mapping


# ---------------------------------------------------------------------------
# Per-entity stages
# ---------------------------------------------------------------------------


def complete_node(node: Node, floor_to_building: Mapping[str, str] | None = None) -> Node:
    building_id = None
    if floor_to_building and node.floor_id:
        building_id = floor_to_building.get(node.floor_id)
    return _fill(
        node,
        {"type": NodeType.OTHER, "position": ORIGIN, "building_id": building_id},
    )


def complete_edge(edge: Edge, nodes: Mapping[str, Node]) -> Edge:
    """Fill edge defaults and derive ``is_vertical`` / ``distance``.

    Derived values need both endpoints in *nodes*; an edge with a missing
    endpoint keeps ``distance`` unset.
    """
    src = nodes.get(edge.source_node_id)
    dst = nodes.get(edge.target_node_id)

    is_vertical = False
    if src and dst and src.floor_id and dst.floor_id:
        is_vertical = src.floor_id != dst.floor_id

    derived_distance = None
    if src and dst and src.position and dst.position:
        derived_distance = distance(src.position, dst.position)

    return _fill(
        edge,
        {
            "direction": EdgeDirection.BIDIRECTIONAL,
            "has_steps": False,
            "is_outdoor": False,
            "width": DEFAULT_EDGE_WIDTH,
            "is_vertical": is_vertical,
            "distance": derived_distance,
        },
    )


def complete_space(space: Space, floor_to_building: Mapping[str, str] | None = None) -> Space:
    building_id = None
    if floor_to_building and space.floor_id:
        building_id = floor_to_building.get(space.floor_id)
    return _fill(
        space,
        {"type": SpaceType.OTHER, "contained_node_ids": (), "building_id": building_id},
    )


def complete_floor(floor: Floor) -> Floor:
    name = level_to_name(floor.level) if floor.level is not None else None
    return _fill(
        floor,
        {"name": name, "image_offset": ORIGIN, "image_scale": DEFAULT_IMAGE_SCALE},
    )


def complete_building(building: Building) -> Building:
    return _fill(building, {"floor_ids": ()})


# ---------------------------------------------------------------------------
# Whole-graph pipeline
# ---------------------------------------------------------------------------


def autocomplete(graph: CampusGraph) -> CampusGraph:
    """Run every stage over every entity and return a new graph.

    Nodes are completed before edges so that edge geometry sees default
    positions.
    """
    buildings = {k: complete_building(b) for k, b in graph.buildings.items()}
    floors = {k: complete_floor(f) for k, f in graph.floors.items()}
    f2b = floor_building_map(floors, buildings)
    nodes = {k: complete_node(n, f2b) for k, n in graph.nodes.items()}
    edges = {k: complete_edge(e, nodes) for k, e in graph.edges.items()}
    spaces = {k: complete_space(s, f2b) for k, s in graph.spaces.items()}
    return graph.replace(
        buildings=buildings,
        floors=floors,
        nodes=nodes,
        edges=edges,
        spaces=spaces,
    )
