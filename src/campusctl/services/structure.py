"""Building and floor management, plus vertical links between floors.

Same contract as :mod:`campusctl.services.manager`: pure functions that
return a :class:`GraphResult` and never modify their input.

``Building.floor_ids`` and ``Floor.building_id`` are kept in sync: adding,
moving, or deleting a floor updates its building's registration.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from campusctl.domain.autocomplete import complete_building, complete_edge, complete_floor
from campusctl.domain.models import Building, CampusGraph, Edge, Floor, VerticalLinks
from campusctl.domain.types import EdgeDirection
from campusctl.services._helpers import apply_patch, coerce, describe_validation
from campusctl.services.result import ErrorCode, GraphResult

logger = logging.getLogger(__name__)


def _register_floor(
    buildings: dict[str, Building], building_id: str | None, floor_id: str
) -> None:
    if building_id is None or building_id not in buildings:
        return
    b = buildings[building_id]
    if floor_id not in (b.floor_ids or ()):
        buildings[building_id] = b.model_copy(
            update={"floor_ids": (*(b.floor_ids or ()), floor_id)}
        )


def _unregister_floor(
    buildings: dict[str, Building], building_id: str | None, floor_id: str
) -> None:
    if building_id is None or building_id not in buildings:
        return
    b = buildings[building_id]
    if floor_id in (b.floor_ids or ()):
        buildings[building_id] = b.model_copy(
            update={"floor_ids": tuple(f for f in b.floor_ids or () if f != floor_id)}
        )


# ---------------------------------------------------------------------------
# Buildings
# ---------------------------------------------------------------------------


def add_building(graph: CampusGraph, building: Building | Mapping[str, Any]) -> GraphResult:
    try:
        candidate = coerce(Building, building)
    except ValidationError as exc:
        return GraphResult.failure(
            "add_building", ErrorCode.INVALID_ENTITY, describe_validation(exc)
        )
    if candidate.id in graph.buildings:
        return GraphResult.failure(
            "add_building",
            ErrorCode.DUPLICATE_ID,
            f"Building '{candidate.id}' already exists",
            id=candidate.id,
        )

    candidate = complete_building(candidate)
    logger.debug("add_building %s", candidate.id)
    return GraphResult.success(
        "add_building",
        graph.replace(buildings={**graph.buildings, candidate.id: candidate}),
        id=candidate.id,
    )


def update_building(
    graph: CampusGraph, building_id: str, patch: Mapping[str, Any]
) -> GraphResult:
    current = graph.buildings.get(building_id)
    if current is None:
        return GraphResult.failure(
            "update_building",
            ErrorCode.NOT_FOUND,
            f"Building '{building_id}' not found",
            id=building_id,
        )
    try:
        updated = complete_building(apply_patch(current, patch))
    except KeyError as exc:
        return GraphResult.failure(
            "update_building", ErrorCode.INVALID_ENTITY, f"Unknown field '{exc.args[0]}'"
        )
    except ValidationError as exc:
        return GraphResult.failure(
            "update_building", ErrorCode.INVALID_ENTITY, describe_validation(exc)
        )
    return GraphResult.success(
        "update_building",
        graph.replace(buildings={**graph.buildings, building_id: updated}),
        id=building_id,
    )


def delete_building(graph: CampusGraph, building_id: str) -> GraphResult:
    """Remove a building and detach its floors (``building_id`` cleared)."""
    if building_id not in graph.buildings:
        return GraphResult.failure(
            "delete_building",
            ErrorCode.NOT_FOUND,
            f"Building '{building_id}' not found",
            id=building_id,
        )
    buildings = {k: b for k, b in graph.buildings.items() if k != building_id}
    floors = {
        k: f.model_copy(update={"building_id": None}) if f.building_id == building_id else f
        for k, f in graph.floors.items()
    }
    logger.debug("delete_building %s", building_id)
    return GraphResult.success(
        "delete_building",
        graph.replace(buildings=buildings, floors=floors),
        id=building_id,
    )


# ---------------------------------------------------------------------------
# Floors
# ---------------------------------------------------------------------------


def add_floor(graph: CampusGraph, floor: Floor | Mapping[str, Any]) -> GraphResult:
    """Insert a floor and register it with its building.

    Fails with ``NotFound`` when ``building_id`` names an unknown building.
    """
    try:
        candidate = coerce(Floor, floor)
    except ValidationError as exc:
        return GraphResult.failure("add_floor", ErrorCode.INVALID_ENTITY, describe_validation(exc))
    if candidate.id in graph.floors:
        return GraphResult.failure(
            "add_floor",
            ErrorCode.DUPLICATE_ID,
            f"Floor '{candidate.id}' already exists",
            id=candidate.id,
        )
    if candidate.building_id is not None and candidate.building_id not in graph.buildings:
        return GraphResult.failure(
            "add_floor",
            ErrorCode.NOT_FOUND,
            f"Building '{candidate.building_id}' not found",
            id=candidate.building_id,
        )

    candidate = complete_floor(candidate)
    buildings = dict(graph.buildings)
    _register_floor(buildings, candidate.building_id, candidate.id)
    logger.debug("add_floor %s building=%s", candidate.id, candidate.building_id)
    return GraphResult.success(
        "add_floor",
        graph.replace(buildings=buildings, floors={**graph.floors, candidate.id: candidate}),
        id=candidate.id,
    )


def update_floor(graph: CampusGraph, floor_id: str, patch: Mapping[str, Any]) -> GraphResult:
    current = graph.floors.get(floor_id)
    if current is None:
        return GraphResult.failure(
            "update_floor", ErrorCode.NOT_FOUND, f"Floor '{floor_id}' not found", id=floor_id
        )
    try:
        updated = complete_floor(apply_patch(current, patch))
    except KeyError as exc:
        return GraphResult.failure(
            "update_floor", ErrorCode.INVALID_ENTITY, f"Unknown field '{exc.args[0]}'"
        )
    except ValidationError as exc:
        return GraphResult.failure(
            "update_floor", ErrorCode.INVALID_ENTITY, describe_validation(exc)
        )
    if updated.building_id is not None and updated.building_id not in graph.buildings:
        return GraphResult.failure(
            "update_floor",
            ErrorCode.NOT_FOUND,
            f"Building '{updated.building_id}' not found",
            id=updated.building_id,
        )

    buildings = dict(graph.buildings)
    if updated.building_id != current.building_id:
        _unregister_floor(buildings, current.building_id, floor_id)
        _register_floor(buildings, updated.building_id, floor_id)
    return GraphResult.success(
        "update_floor",
        graph.replace(buildings=buildings, floors={**graph.floors, floor_id: updated}),
        id=floor_id,
    )


def delete_floor(graph: CampusGraph, floor_id: str) -> GraphResult:
    """Remove a floor and unregister it from its building.

    Nodes and spaces keep their ``floor_id``; reassign them explicitly.
    """
    current = graph.floors.get(floor_id)
    if current is None:
        return GraphResult.failure(
            "delete_floor", ErrorCode.NOT_FOUND, f"Floor '{floor_id}' not found", id=floor_id
        )
    buildings = dict(graph.buildings)
    for b in graph.buildings.values():
        _unregister_floor(buildings, b.id, floor_id)
    logger.debug("delete_floor %s", floor_id)
    return GraphResult.success(
        "delete_floor",
        graph.replace(
            buildings=buildings,
            floors={k: f for k, f in graph.floors.items() if k != floor_id},
        ),
        id=floor_id,
    )


def floors_for_building(graph: CampusGraph, building_id: str) -> list[Floor]:
    """Floors of a building sorted by level (unknown levels sort as 0)."""
    building = graph.buildings.get(building_id)
    if building is None:
        return []
    floors = [graph.floors[f] for f in building.floor_ids or () if f in graph.floors]
    return sorted(floors, key=lambda f: f.level if f.level is not None else 0)


def floor_by_level(graph: CampusGraph, building_id: str, level: int) -> Floor | None:
    for floor in floors_for_building(graph, building_id):
        if floor.level == level:
            return floor
    return None


# ---------------------------------------------------------------------------
# Vertical links
# ---------------------------------------------------------------------------


def add_vertical_link(graph: CampusGraph, node_a_id: str, node_b_id: str) -> GraphResult:
    """Connect two nodes on different floors with a vertical edge.

    The node on the higher level becomes ``above`` of the lower one, and
    the lower one ``below`` of the higher. The edge runs lower -> upper and
    is bidirectional. A node already linked on that side to another node
    fails with ``InvalidLink``.
    """
    op = "add_vertical_link"
    for nid in (node_a_id, node_b_id):
        if nid not in graph.nodes:
            return GraphResult.failure(op, ErrorCode.NOT_FOUND, f"Node '{nid}' not found", id=nid)

    node_a, node_b = graph.nodes[node_a_id], graph.nodes[node_b_id]
    if not node_a.floor_id or not node_b.floor_id:
        return GraphResult.failure(
            op, ErrorCode.INVALID_LINK, "Both nodes must be on a floor to link them vertically"
        )
    if node_a.floor_id == node_b.floor_id:
        return GraphResult.failure(
            op, ErrorCode.INVALID_LINK, "Cannot link two nodes on the same floor vertically"
        )

    level_a = graph.floor_level(node_a.floor_id) or 0
    level_b = graph.floor_level(node_b.floor_id) or 0
    lower, upper = (node_a, node_b) if level_a < level_b else (node_b, node_a)

    edge = complete_edge(
        Edge(
            id=f"vert-{lower.id}-{upper.id}",
            source_node_id=lower.id,
            target_node_id=upper.id,
            is_vertical=True,
            direction=EdgeDirection.BIDIRECTIONAL,
        ),
        graph.nodes,
    )
    if edge.id in graph.edges:
        return GraphResult.failure(
            op, ErrorCode.DUPLICATE_ID, f"Vertical link '{edge.id}' already exists", id=edge.id
        )
    for node, side, partner in ((lower, "above", upper.id), (upper, "below", lower.id)):
        linked = getattr(node.vertical_links, side) if node.vertical_links else None
        if linked is not None and linked != partner:
            return GraphResult.failure(
                op,
                ErrorCode.INVALID_LINK,
                f"Node '{node.id}' is already linked {side} to '{linked}'",
                id=node.id,
                linked=linked,
            )

    def _linked(node: Any, **links: str) -> Any:
        current = node.vertical_links or VerticalLinks()
        return node.model_copy(update={"vertical_links": current.model_copy(update=links)})

    nodes = {
        **graph.nodes,
        lower.id: _linked(lower, above=upper.id),
        upper.id: _linked(upper, below=lower.id),
    }
    logger.debug("add_vertical_link %s above %s", upper.id, lower.id)
    return GraphResult.success(
        op,
        graph.replace(nodes=nodes, edges={**graph.edges, edge.id: edge}),
        id=edge.id,
        lower_node_id=lower.id,
        upper_node_id=upper.id,
    )
