"""Tests for GraphEngine — NetworkX projection of a campus graph."""

from __future__ import annotations

import math

import networkx as nx

from campusctl.domain.models import CampusGraph, Edge, Node
from campusctl.domain.types import EdgeDirection
from campusctl.infrastructure.graph.engine import GraphEngine, arcs


def _graph(*edges: Edge) -> CampusGraph:
    return CampusGraph(
        nodes={nid: Node(id=nid) for nid in ("a", "b", "c")},
        edges={e.id: e for e in edges},
    )


class TestArcs:
    def test_bidirectional(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b")
        assert arcs(edge) == [("a", "b"), ("b", "a")]

    def test_forward(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", direction=EdgeDirection.FORWARD)
        assert arcs(edge) == [("a", "b")]

    def test_backward(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", direction=EdgeDirection.BACKWARD)
        assert arcs(edge) == [("b", "a")]


class TestGraphEngine:
    def test_lazy_build(self) -> None:
        engine = GraphEngine(_graph())
        assert engine._graph is None
        assert isinstance(engine.graph, nx.MultiDiGraph)
        assert engine._graph is not None

    def test_isolated_nodes_present(self) -> None:
        assert set(GraphEngine(_graph()).graph.nodes) == {"a", "b", "c"}

    def test_parallel_edges_distinct(self) -> None:
        engine = GraphEngine(
            _graph(
                Edge(id="e1", source_node_id="a", target_node_id="b"),
                Edge(id="e2", source_node_id="a", target_node_id="b"),
            )
        )
        assert set(engine.graph["a"]["b"]) == {"e1", "e2"}

    def test_dangling_edge_skipped(self) -> None:
        engine = GraphEngine(_graph(Edge(id="e", source_node_id="a", target_node_id="zz")))
        assert engine.graph.number_of_edges() == 0

    def test_invalidate(self) -> None:
        engine = GraphEngine(_graph())
        first = engine.graph
        engine.invalidate()
        assert engine.graph is not first


class TestTraversal:
    def test_keeps_cheapest_arc(self) -> None:
        engine = GraphEngine(
            _graph(
                Edge(id="slow", source_node_id="a", target_node_id="b", distance=9.0),
                Edge(id="fast", source_node_id="a", target_node_id="b", distance=2.0),
            )
        )
        g = engine.traversal(lambda edge, u, v: edge.distance)
        assert g["a"]["b"] == {"weight": 2.0, "edge_id": "fast"}

    def test_drops_unusable_arcs(self) -> None:
        engine = GraphEngine(_graph(Edge(id="e", source_node_id="a", target_node_id="b")))
        g = engine.traversal(lambda edge, u, v: None if u == "a" else math.inf)
        assert g.number_of_edges() == 0

    def test_direction_aware_weight(self) -> None:
        engine = GraphEngine(_graph(Edge(id="e", source_node_id="a", target_node_id="b")))
        g = engine.traversal(lambda edge, u, v: 1.0 if u == "a" else None)
        assert g.has_edge("a", "b")
        assert not g.has_edge("b", "a")
