"""Route finder — constraint-aware shortest paths over a campus graph.

Search runs Dijkstra (NetworkX) on a per-request projection containing
only the arcs the traveller may use. Arc cost is the base weight
(distance or estimated time), then the routing profile's modifiers, then
weather. An impassable arc has infinite cost and is left out.

No path is an expected outcome: :func:`find_route` returns ``None``.
"""

from __future__ import annotations

import logging
import math
from itertools import islice
from typing import Any, Literal

import networkx as nx
from pydantic import BaseModel, Field, field_validator

from campusctl.domain.models import (
    BlockedPair,
    CampusGraph,
    CampusModel,
    DimensionLimits,
    Edge,
)
from campusctl.domain.types import OptimizeBy, Weather
from campusctl.infrastructure.graph.engine import GraphEngine

logger = logging.getLogger(__name__)

RAIN_OUTDOOR_MULTIPLIER = 3.0
SNOW_OUTDOOR_MULTIPLIER = 8.0


# ---------------------------------------------------------------------------
# Cost profiles
# ---------------------------------------------------------------------------


class CostModifier(BaseModel):
    """Scale the cost of edges whose *field* satisfies a comparison.

    An infinite multiplier makes matching edges impassable.
    """

    model_config = {"frozen": True}

    field: str
    operator: Literal["==", "!=", "<", ">", "<=", ">="]
    value: Any
    multiplier: float = 1.0
    additive: float = 0.0
    description: str = ""

    def matches(self, edge: Edge) -> bool:
        actual = getattr(edge, self.field, None)
        if self.operator == "==":
            return actual == self.value
        if self.operator == "!=":
            return actual != self.value
        if not isinstance(actual, (int, float)) or isinstance(actual, bool):
            return False
        match self.operator:
            case "<":
                return actual < self.value
            case ">":
                return actual > self.value
            case "<=":
                return actual <= self.value
            case _:
                return actual >= self.value


class RoutingProfile(BaseModel):
    model_config = {"frozen": True}

    id: str
    name: str
    description: str = ""
    modifiers: tuple[CostModifier, ...] = ()


_STEPS_IMPASSABLE = CostModifier(
    field="has_steps",
    operator="==",
    value=True,
    multiplier=math.inf,
    description="steps are impassable",
)

BUILT_IN_PROFILES: dict[str, RoutingProfile] = {
    p.id: p
    for p in (
        RoutingProfile(id="default", name="Default", description="Shortest by base weight"),
        RoutingProfile(
            id="cart",
            name="Cart",
            description="Step-free, avoids narrow passages",
            modifiers=(
                _STEPS_IMPASSABLE,
                CostModifier(
                    field="width",
                    operator="<",
                    value=1.2,
                    multiplier=10.0,
                    description="width < 1.2 costs x10",
                ),
            ),
        ),
        RoutingProfile(
            id="rain",
            name="Rain",
            description="Stays indoors where possible",
            modifiers=(
                CostModifier(
                    field="is_outdoor",
                    operator="==",
                    value=True,
                    multiplier=5.0,
                    description="outdoor costs x5",
                ),
            ),
        ),
        RoutingProfile(
            id="accessible",
            name="Accessible",
            description="Step-free, prefers elevators",
            modifiers=(
                _STEPS_IMPASSABLE,
                CostModifier(
                    field="is_vertical",
                    operator="==",
                    value=True,
                    multiplier=0.5,
                    description="vertical links cost x0.5",
                ),
            ),
        ),
    )
}


def base_weight(edge: Edge, optimize_by: OptimizeBy = OptimizeBy.DISTANCE) -> float:
    """Distance (1.0 when unknown), or estimated time falling back to it."""
    length = edge.distance if edge.distance is not None else 1.0
    if optimize_by == OptimizeBy.TIME and edge.estimated_time is not None:
        return edge.estimated_time
    return length


def edge_cost(
    edge: Edge,
    profile: RoutingProfile | None = None,
    weather: Weather = Weather.CLEAR,
    optimize_by: OptimizeBy = OptimizeBy.DISTANCE,
) -> float:
    """Traversal cost of *edge*; ``math.inf`` means impassable."""
    cost = base_weight(edge, optimize_by)
    for mod in profile.modifiers if profile else ():
        if not mod.matches(edge):
            continue
        if math.isinf(mod.multiplier):
            return math.inf
        cost = cost * mod.multiplier + mod.additive

    if edge.is_outdoor:
        if weather == Weather.RAIN:
            cost *= RAIN_OUTDOOR_MULTIPLIER
        elif weather == Weather.SNOW:
            cost *= SNOW_OUTDOOR_MULTIPLIER
    return max(0.0, cost)


# ---------------------------------------------------------------------------
# Request and result models
# ---------------------------------------------------------------------------


class UserConstraints(CampusModel):
    """What the traveller needs and holds.

    Attributes:
        max: The traveller's own width / height / weight.
        requires: Capability tags the traveller holds (e.g. ``keycard``).
        blocked: Directed node pairs the traveller will not traverse.
    """

    max: DimensionLimits | None = None
    requires: tuple[str, ...] = ()
    blocked: tuple[BlockedPair, ...] = ()


class RouteRequest(CampusModel):
    start: str
    end: str
    constraints: UserConstraints = Field(default_factory=UserConstraints)
    optimize_by: OptimizeBy = OptimizeBy.DISTANCE
    avoid: tuple[str, ...] = ()
    profile: str = "default"
    weather: Weather = Weather.CLEAR
    max_alternatives: int = Field(default=0, ge=0)

    @field_validator("profile")
    @classmethod
    def _known_profile(cls, value: str) -> str:
        if value not in BUILT_IN_PROFILES:
            known = ", ".join(BUILT_IN_PROFILES)
            raise ValueError(f"unknown routing profile '{value}' (known: {known})")
        return value


class FloorTransition(CampusModel):
    """A step between floors along a route."""

    node_id: str
    from_floor_id: str
    to_floor_id: str
    description: str


class Route(CampusModel):
    """A found path. ``distance`` sums known edge distances; ``cost`` is the
    weighted search total, where an unmeasured edge counts as 1.0.
    """

    node_ids: list[str]
    edge_ids: list[str] = Field(default_factory=list)
    distance: float = 0.0
    cost: float = 0.0
    floor_transitions: list[FloorTransition] = Field(default_factory=list)
    alternatives: list[Route] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def is_traversable(edge: Edge, from_node: str, to_node: str, request: RouteRequest) -> bool:
    """Whether the traveller in *request* may cross *edge* from -> to.

    Direction is handled by the projection; this checks constraints only.
    Where both sides define a limit, the traveller must not exceed the
    edge's.
    """
    if edge.id in request.avoid or to_node in request.avoid:
        return False

    user = request.constraints
    limits = edge.constraints
    if limits is not None:
        if limits.max is not None and user.max is not None:
            for dim, need in user.max.items():
                allowed = getattr(limits.max, dim)
                if need is not None and allowed is not None and need > allowed:
                    return False
        if not set(limits.requires) <= set(user.requires):
            return False
        if limits.blocks(from_node, to_node):
            return False

    return not any(p.from_node == from_node and p.to_node == to_node for p in user.blocked)


def _floor_transitions(graph: CampusGraph, node_ids: list[str]) -> list[FloorTransition]:
    transitions: list[FloorTransition] = []
    for prev_id, curr_id in zip(node_ids, node_ids[1:]):
        prev_floor = graph.nodes[prev_id].floor_id
        curr_floor = graph.nodes[curr_id].floor_id
        if prev_floor and curr_floor and prev_floor != curr_floor:
            names = [
                (graph.floors[f].name if f in graph.floors else None) or f
                for f in (prev_floor, curr_floor)
            ]
            transitions.append(
                FloorTransition(
                    node_id=curr_id,
                    from_floor_id=prev_floor,
                    to_floor_id=curr_floor,
                    description=f"{names[0]} -> {names[1]}",
                )
            )
    return transitions


def _route(graph: CampusGraph, g: nx.DiGraph, path: list[str]) -> Route:
    edge_ids = [g[u][v]["edge_id"] for u, v in zip(path, path[1:])]
    return Route(
        node_ids=path,
        edge_ids=edge_ids,
        distance=sum(graph.edges[e].distance or 0.0 for e in edge_ids),
        cost=sum(g[u][v]["weight"] for u, v in zip(path, path[1:])),
        floor_transitions=_floor_transitions(graph, path),
    )


def find_route(
    graph: CampusGraph,
    request: RouteRequest,
    engine: GraphEngine | None = None,
) -> Route | None:
    """Cheapest route from ``request.start`` to ``request.end``, or None.

    Pass *engine* to reuse a projection already built for *graph*.

    None when either endpoint is unknown or no usable path exists.
    ``request.max_alternatives`` further simple paths, cheapest first, are
    attached as ``alternatives``.
    """
    if request.start not in graph.nodes or request.end not in graph.nodes:
        return None
    if request.start == request.end:
        return Route(node_ids=[request.start])

    profile = BUILT_IN_PROFILES[request.profile]

    def weight(edge: Edge, u: str, v: str) -> float | None:
        if not is_traversable(edge, u, v, request):
            return None
        return edge_cost(edge, profile, request.weather, request.optimize_by)

    g = (engine or GraphEngine(graph)).traversal(weight)
    try:
        _, path = nx.single_source_dijkstra(g, request.start, request.end, weight="weight")
    except nx.NetworkXNoPath:
        logger.debug("find_route %s -> %s: no path", request.start, request.end)
        return None

    route = _route(graph, g, path)
    if request.max_alternatives > 0:
        others = (
            p for p in nx.shortest_simple_paths(g, request.start, request.end, weight="weight")
            if p != path
        )
        alternatives = [_route(graph, g, p) for p in islice(others, request.max_alternatives)]
        route = route.model_copy(update={"alternatives": alternatives})

    logger.debug(
        "find_route %s -> %s: %d hops cost=%.2f",
        request.start,
        request.end,
        len(route.edge_ids),
        route.cost,
    )
    return route
