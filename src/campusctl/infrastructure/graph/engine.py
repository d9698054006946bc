"""GraphEngine — lazy-built NetworkX projection of a campus graph version.

Rebuilt per graph version, no cross-version cache. Every traversable
direction of an edge becomes one arc keyed by the edge ID, so parallel
edges between the same nodes stay distinct. Consumers that never route
never build it.
"""

from __future__ import annotations

import math
from collections.abc import Callable

import networkx as nx

from campusctl.domain.models import CampusGraph, Edge
from campusctl.domain.types import EdgeDirection

type _Graph = nx.MultiDiGraph

# (edge, from_node, to_node) -> arc weight, or None when the arc is unusable.
type ArcWeight = Callable[[Edge, str, str], float | None]


def arcs(edge: Edge) -> list[tuple[str, str]]:
    """Directed ``(from, to)`` pairs an edge allows."""
    forward = (edge.source_node_id, edge.target_node_id)
    backward = (edge.target_node_id, edge.source_node_id)
    match edge.direction:
        case EdgeDirection.FORWARD:
            return [forward]
        case EdgeDirection.BACKWARD:
            return [backward]
        case _:
            return [forward, backward]


class GraphEngine:
    """Lazy-loading graph engine over one immutable CampusGraph."""

    def __init__(self, campus: CampusGraph) -> None:
        self._campus = campus
        self._graph: _Graph | None = None

    @property
    def campus(self) -> CampusGraph:
        return self._campus

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build(self) -> _Graph:
        """Build a MultiDiGraph from the campus nodes and edges.

        Adds all nodes first (so isolated nodes are visible to algorithms).
        Edges with a missing endpoint are skipped.
        """
        g: _Graph = nx.MultiDiGraph()
        for node in self._campus.nodes.values():
            g.add_node(node.id, type=node.type, floor_id=node.floor_id)

        for edge in self._campus.edges.values():
            if edge.source_node_id not in g or edge.target_node_id not in g:
                continue
            for u, v in arcs(edge):
                g.add_edge(u, v, key=edge.id, edge=edge)
        return g

    def traversal(self, weight: ArcWeight) -> nx.DiGraph:
        """Collapse to a weighted DiGraph for shortest-path search.

        Keeps the cheapest usable arc per ordered node pair; on equal cost
        the first arc seen wins. Arcs weighted ``None`` or infinite are
        dropped.
        """
        g = nx.DiGraph()
        g.add_nodes_from(self.graph.nodes(data=True))
        for u, v, key, data in self.graph.edges(keys=True, data=True):
            cost = weight(data["edge"], u, v)
            if cost is None or math.isinf(cost):
                continue
            current = g.get_edge_data(u, v)
            if current is None or cost < current["weight"]:
                g.add_edge(u, v, weight=cost, edge_id=key)
        return g
