"""Graph manager — immutable CRUD for nodes, edges, and spaces.

Every operation takes a graph version and returns a :class:`GraphResult`:
either a *new* graph or a coded error. The input graph is never modified;
untouched entity mappings are shared with the new version.

Each operation checks its local preconditions, runs the autocomplete
pipeline on the affected entity, and commits it:

- EI-1: both edge endpoints must exist
- EI-2: no self-loops
- SI-3: space polygons must be simple
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from campusctl.domain.autocomplete import (
    complete_edge,
    complete_node,
    complete_space,
    floor_building_map,
)
from campusctl.domain.geometry import is_self_intersecting
from campusctl.domain.models import CampusGraph, Edge, Node, Space
from campusctl.services._helpers import apply_patch, coerce, describe_validation, field_names
from campusctl.services.result import ErrorCode, GraphResult

logger = logging.getLogger(__name__)

type NodeInput = Node | Mapping[str, Any]
type EdgeInput = Edge | Mapping[str, Any]
type SpaceInput = Space | Mapping[str, Any]


# ---------------------------------------------------------------------------
# Shared failures
# ---------------------------------------------------------------------------


def _invalid(op: str, exc: ValidationError) -> GraphResult:
    return GraphResult.failure(op, ErrorCode.INVALID_ENTITY, describe_validation(exc))


def _unknown_field(op: str, field: str) -> GraphResult:
    return GraphResult.failure(
        op, ErrorCode.INVALID_ENTITY, f"Unknown field '{field}'", field=field
    )


def _not_found(op: str, kind: str, entity_id: str) -> GraphResult:
    return GraphResult.failure(
        op, ErrorCode.NOT_FOUND, f"{kind} '{entity_id}' not found", id=entity_id
    )


def _duplicate(op: str, kind: str, entity_id: str) -> GraphResult:
    return GraphResult.failure(
        op, ErrorCode.DUPLICATE_ID, f"{kind} '{entity_id}' already exists", id=entity_id
    )


def _supplied_id(entity: BaseModel | Mapping[str, Any]) -> str | None:
    """The caller-chosen id of an unvalidated entity, if any."""
    value = entity.get("id") if isinstance(entity, Mapping) else getattr(entity, "id", None)
    return value if isinstance(value, str) else None


def _reset_building[M: Node | Space](current: M, updated: M, patch: Mapping[str, Any]) -> M:
    """Drop an inherited ``building_id`` once the floor moves under it."""
    names = field_names(type(updated))
    patched = {names[key] for key in patch}
    if updated.floor_id == current.floor_id or "building_id" in patched:
        return updated
    return updated.model_copy(update={"building_id": None})


def _check_endpoints(op: str, graph: CampusGraph, edge: Edge) -> GraphResult | None:
    """EI-1 and EI-2 preconditions. Returns a failure or None."""
    missing = [
        nid for nid in (edge.source_node_id, edge.target_node_id) if nid not in graph.nodes
    ]
    if missing:
        return GraphResult.failure(
            op,
            ErrorCode.MISSING_ENDPOINT,
            f"Edge '{edge.id}': source or target node not found",
            id=edge.id,
            missing=missing,
        )
    if edge.source_node_id == edge.target_node_id:
        return GraphResult.failure(
            op,
            ErrorCode.SELF_LOOP,
            f"Edge '{edge.id}': source and target are the same node",
            id=edge.id,
        )
    return None


def _check_polygon(op: str, space: Space) -> GraphResult | None:
    if space.polygon and is_self_intersecting(space.polygon):
        return GraphResult.failure(
            op,
            ErrorCode.SELF_INTERSECTING,
            f"Space '{space.id}': polygon is self-intersecting",
            id=space.id,
        )
    return None


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def add_node(graph: CampusGraph, node: NodeInput) -> GraphResult:
    """Insert a node, filling ``type`` and ``position`` defaults."""
    supplied = _supplied_id(node)
    if supplied in graph.nodes:
        return _duplicate("add_node", "Node", supplied)
    try:
        candidate = coerce(Node, node)
    except ValidationError as exc:
        return _invalid("add_node", exc)

    candidate = complete_node(candidate, floor_building_map(graph.floors, graph.buildings))
    logger.debug("add_node %s", candidate.id)
    return GraphResult.success(
        "add_node",
        graph.replace(nodes={**graph.nodes, candidate.id: candidate}),
        id=candidate.id,
    )


def update_node(graph: CampusGraph, node_id: str, patch: Mapping[str, Any]) -> GraphResult:
    """Apply a partial patch to an existing node."""
    current = graph.nodes.get(node_id)
    if current is None:
        return _not_found("update_node", "Node", node_id)
    try:
        updated = apply_patch(current, patch)
    except KeyError as exc:
        return _unknown_field("update_node", exc.args[0])
    except ValidationError as exc:
        return _invalid("update_node", exc)

    updated = _reset_building(current, updated, patch)
    updated = complete_node(updated, floor_building_map(graph.floors, graph.buildings))
    logger.debug("update_node %s fields=%s", node_id, sorted(patch))
    return GraphResult.success(
        "update_node",
        graph.replace(nodes={**graph.nodes, node_id: updated}),
        id=node_id,
    )


def delete_node(graph: CampusGraph, node_id: str) -> GraphResult:
    """Remove a node and cascade to every edge that touches it.

    Also drops the node from space membership lists and from the vertical
    links of the nodes above and below it.
    """
    if node_id not in graph.nodes:
        return _not_found("delete_node", "Node", node_id)

    nodes = {k: n for k, n in graph.nodes.items() if k != node_id}
    for k, n in nodes.items():
        links = n.vertical_links
        if links and node_id in (links.above, links.below):
            nodes[k] = n.model_copy(
                update={
                    "vertical_links": links.model_copy(
                        update={
                            "above": None if links.above == node_id else links.above,
                            "below": None if links.below == node_id else links.below,
                        }
                    )
                }
            )

    removed_edges = [e.id for e in graph.edges.values() if e.touches(node_id)]
    edges = {k: e for k, e in graph.edges.items() if k not in removed_edges}

    spaces = dict(graph.spaces)
    for k, s in graph.spaces.items():
        members = s.contained_node_ids or ()
        if node_id in members:
            spaces[k] = s.model_copy(
                update={"contained_node_ids": tuple(n for n in members if n != node_id)}
            )

    logger.debug("delete_node %s cascaded_edges=%d", node_id, len(removed_edges))
    return GraphResult.success(
        "delete_node",
        graph.replace(nodes=nodes, edges=edges, spaces=spaces),
        id=node_id,
        removed_edge_ids=removed_edges,
    )


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


def add_edge(graph: CampusGraph, edge: EdgeInput) -> GraphResult:
    """Insert an edge between two existing nodes.

    ``distance`` is the Euclidean distance between the endpoints unless
    the caller supplies one.
    """
    try:
        candidate = coerce(Edge, edge)
    except ValidationError as exc:
        supplied = _supplied_id(edge)
        if supplied in graph.edges:
            return _duplicate("add_edge", "Edge", supplied)
        return _invalid("add_edge", exc)

    failure = _check_endpoints("add_edge", graph, candidate)
    if failure is not None:
        return failure
    if candidate.id in graph.edges:
        return _duplicate("add_edge", "Edge", candidate.id)

    candidate = complete_edge(candidate, graph.nodes)
    logger.debug(
        "add_edge %s %s->%s", candidate.id, candidate.source_node_id, candidate.target_node_id
    )
    return GraphResult.success(
        "add_edge",
        graph.replace(edges={**graph.edges, candidate.id: candidate}),
        id=candidate.id,
    )


def update_edge(graph: CampusGraph, edge_id: str, patch: Mapping[str, Any]) -> GraphResult:
    """Apply a partial patch to an existing edge.

    Moving an endpoint re-checks EI-1/EI-2 and re-derives ``distance`` and
    ``is_vertical`` unless the patch sets them explicitly.
    """
    current = graph.edges.get(edge_id)
    if current is None:
        return _not_found("update_edge", "Edge", edge_id)
    try:
        updated = apply_patch(current, patch)
    except KeyError as exc:
        return _unknown_field("update_edge", exc.args[0])
    except ValidationError as exc:
        return _invalid("update_edge", exc)

    moved = (updated.source_node_id, updated.target_node_id) != (
        current.source_node_id,
        current.target_node_id,
    )
    if moved:
        failure = _check_endpoints("update_edge", graph, updated)
        if failure is not None:
            return failure
        names = field_names(Edge)
        patched = {names[key] for key in patch}
        reset = {f: None for f in ("distance", "is_vertical") if f not in patched}
        updated = updated.model_copy(update=reset)

    updated = complete_edge(updated, graph.nodes)
    logger.debug("update_edge %s fields=%s", edge_id, sorted(patch))
    return GraphResult.success(
        "update_edge",
        graph.replace(edges={**graph.edges, edge_id: updated}),
        id=edge_id,
    )


def delete_edge(graph: CampusGraph, edge_id: str) -> GraphResult:
    if edge_id not in graph.edges:
        return _not_found("delete_edge", "Edge", edge_id)
    logger.debug("delete_edge %s", edge_id)
    return GraphResult.success(
        "delete_edge",
        graph.replace(edges={k: e for k, e in graph.edges.items() if k != edge_id}),
        id=edge_id,
    )


# ---------------------------------------------------------------------------
# Spaces
# ---------------------------------------------------------------------------


def add_space(graph: CampusGraph, space: SpaceInput) -> GraphResult:
    """Insert a space; rejects self-intersecting polygons (SI-3)."""
    try:
        candidate = coerce(Space, space)
    except ValidationError as exc:
        supplied = _supplied_id(space)
        if supplied in graph.spaces:
            return _duplicate("add_space", "Space", supplied)
        return _invalid("add_space", exc)

    failure = _check_polygon("add_space", candidate)
    if failure is not None:
        return failure
    if candidate.id in graph.spaces:
        return _duplicate("add_space", "Space", candidate.id)

    candidate = complete_space(candidate, floor_building_map(graph.floors, graph.buildings))
    logger.debug("add_space %s", candidate.id)
    return GraphResult.success(
        "add_space",
        graph.replace(spaces={**graph.spaces, candidate.id: candidate}),
        id=candidate.id,
    )


def update_space(graph: CampusGraph, space_id: str, patch: Mapping[str, Any]) -> GraphResult:
    current = graph.spaces.get(space_id)
    if current is None:
        return _not_found("update_space", "Space", space_id)
    try:
        updated = apply_patch(current, patch)
    except KeyError as exc:
        return _unknown_field("update_space", exc.args[0])
    except ValidationError as exc:
        return _invalid("update_space", exc)

    failure = _check_polygon("update_space", updated)
    if failure is not None:
        return failure

    updated = _reset_building(current, updated, patch)
    updated = complete_space(updated, floor_building_map(graph.floors, graph.buildings))
    logger.debug("update_space %s fields=%s", space_id, sorted(patch))
    return GraphResult.success(
        "update_space",
        graph.replace(spaces={**graph.spaces, space_id: updated}),
        id=space_id,
    )


def delete_space(graph: CampusGraph, space_id: str) -> GraphResult:
    if space_id not in graph.spaces:
        return _not_found("delete_space", "Space", space_id)
    logger.debug("delete_space %s", space_id)
    return GraphResult.success(
        "delete_space",
        graph.replace(spaces={k: s for k, s in graph.spaces.items() if k != space_id}),
        id=space_id,
    )
