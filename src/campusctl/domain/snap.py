"""Snap engine — resolve a raw cursor position to a graph-consistent point.

Candidates are tried in strict priority order and the first one that
qualifies wins, regardless of distance:

    vertex > edge > orthogonal > grid > free

Pure geometric query; never touches graph state.
"""

from __future__ import annotations

from pydantic import BaseModel

from campusctl.domain.geometry import Point, distance, nearest_point_on_segment, polygon_sides
from campusctl.domain.models import CampusGraph
from campusctl.domain.types import SnapType


class SnapConfig(BaseModel):
    """Snap thresholds in world units. Also the ``[snap]`` config section."""

    model_config = {"frozen": True}

    vertex_threshold: float = 8.0
    edge_threshold: float = 6.0
    orthogonal_threshold: float = 5.0
    grid_size: float | None = None
    enable_grid: bool = False
    enable_orthogonal: bool = True


class SnapContext(BaseModel):
    """Nearby geometry the cursor may snap to."""

    model_config = {"frozen": True}

    vertices: tuple[Point, ...] = ()
    segments: tuple[tuple[Point, Point], ...] = ()
    previous_point: Point | None = None


class SnapResult(BaseModel):
    """Resolved position plus what it snapped to."""

    model_config = {"frozen": True}

    type: SnapType
    position: Point
    snap_target: Point | None = None
    guide_line: tuple[Point, Point] | None = None


def _snap_vertex(cursor: Point, vertices: tuple[Point, ...], threshold: float) -> SnapResult | None:
    best: Point | None = None
    best_dist = float("inf")
    for v in vertices:
        d = distance(cursor, v)
        if d < best_dist:  # strict: first minimum wins ties
            best, best_dist = v, d
    if best is None or best_dist > threshold:
        return None
    return SnapResult(type=SnapType.VERTEX, position=best, snap_target=best)


def _snap_edge(
    cursor: Point,
    segments: tuple[tuple[Point, Point], ...],
    threshold: float,
) -> SnapResult | None:
    best: Point | None = None
    best_dist = float("inf")
    for a, b in segments:
        nearest = nearest_point_on_segment(cursor, a, b)
        d = distance(cursor, nearest)
        if d < best_dist:
            best, best_dist = nearest, d
    if best is None or best_dist > threshold:
        return None
    return SnapResult(type=SnapType.EDGE, position=best, snap_target=best)


def _snap_orthogonal(cursor: Point, previous: Point, threshold: float) -> SnapResult | None:
    """Lock to the horizontal or vertical axis through *previous*.

    Horizontal needs ``dy <= threshold`` and ``dx > dy``; vertical is the
    mirror. The strict inequalities mean at most one can hold.
    """
    dx = abs(cursor.x - previous.x)
    dy = abs(cursor.y - previous.y)

    if dy <= threshold and dx > dy:
        snapped = Point(x=cursor.x, y=previous.y)
    elif dx <= threshold and dy > dx:
        snapped = Point(x=previous.x, y=cursor.y)
    else:
        return None
    return SnapResult(
        type=SnapType.ORTHOGONAL,
        position=snapped,
        snap_target=previous,
        guide_line=(previous, snapped),
    )


def _snap_grid(cursor: Point, size: float) -> SnapResult:
    return SnapResult(
        type=SnapType.GRID,
        position=Point(x=round(cursor.x / size) * size, y=round(cursor.y / size) * size),
    )


def find_snap(
    cursor: Point,
    context: SnapContext,
    config: SnapConfig | None = None,
) -> SnapResult:
    """Find the best snap position for *cursor*.

    Args:
        cursor: Raw pointer position in world coordinates.
        context: Existing vertices, boundary segments, and the last placed point.
        config: Thresholds and toggles; defaults apply when omitted.
    """
    cfg = config or SnapConfig()

    if context.vertices and cfg.vertex_threshold > 0:
        hit = _snap_vertex(cursor, context.vertices, cfg.vertex_threshold)
        if hit is not None:
            return hit

    if context.segments and cfg.edge_threshold > 0:
        hit = _snap_edge(cursor, context.segments, cfg.edge_threshold)
        if hit is not None:
            return hit

    if cfg.enable_orthogonal and context.previous_point is not None:
        hit = _snap_orthogonal(cursor, context.previous_point, cfg.orthogonal_threshold)
        if hit is not None:
            return hit

    if cfg.enable_grid and cfg.grid_size and cfg.grid_size > 0:
        return _snap_grid(cursor, cfg.grid_size)

    return SnapResult(type=SnapType.FREE, position=cursor)


def snap_context(
    graph: CampusGraph,
    *,
    floor_id: str | None = None,
    previous_point: Point | None = None,
) -> SnapContext:
    """Collect snap geometry from *graph*, optionally limited to one floor.

    Vertices are node positions followed by polygon vertices; segments are
    polygon sides including the closing side.
    """
    vertices: list[Point] = []
    segments: list[tuple[Point, Point]] = []

    for node in graph.nodes.values():
        if floor_id is not None and node.floor_id != floor_id:
            continue
        if node.position is not None:
            vertices.append(node.position)

    for space in graph.spaces.values():
        if floor_id is not None and space.floor_id != floor_id:
            continue
        polygon = space.polygon or ()
        vertices.extend(polygon)
        if len(polygon) >= 2:
            segments.extend(polygon_sides(polygon))

    return SnapContext(
        vertices=tuple(vertices),
        segments=tuple(segments),
        previous_point=previous_point,
    )
