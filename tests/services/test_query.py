"""Tests for QueryService — route, snap, search, layers."""

from __future__ import annotations

import pytest

from campusctl.domain.geometry import Point
from campusctl.infrastructure.document import CampusDocument
from campusctl.services.editor import EditorService
from campusctl.services.query import INVALID_REQUEST, NO_ROUTE, QueryService


@pytest.fixture
def corridor(document: CampusDocument) -> CampusDocument:
    """a - b - c along the x axis, plus an unreachable node z."""
    service = EditorService(document)
    for node_id, x in (("a", 0), ("b", 5), ("c", 10), ("z", 50)):
        service.add_node({"id": node_id, "position": (x, 0), "label": f"Node {node_id}"})
    service.add_edge({"id": "ab", "sourceNodeId": "a", "targetNodeId": "b"})
    service.add_edge({"id": "bc", "sourceNodeId": "b", "targetNodeId": "c", "isOutdoor": True})
    return document


class TestRoute:
    def test_found(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).route("a", "c")
        assert result.ok
        assert result.data["node_ids"] == ["a", "b", "c"]
        assert result.data["distance"] == 10.0
        assert result.data["profile"] == "default"
        assert result.data["optimize_by"] == "distance"

    def test_weather_raises_cost(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).route("a", "c", weather="rain")
        assert result.data["cost"] == 20.0
        assert result.data["distance"] == 10.0

    def test_no_route(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).route("a", "z")
        assert not result.ok
        assert result.error.code == NO_ROUTE
        assert result.error.detail["unknown"] == []

    def test_unknown_node(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).route("a", "ghost")
        assert result.error.code == NO_ROUTE
        assert result.error.detail["unknown"] == ["ghost"]
        assert "ghost" in result.error.message

    def test_constraints(self, corridor: CampusDocument) -> None:
        EditorService(corridor).update_edge("ab", {"constraints": {"requires": ["keycard"]}})
        service = QueryService(corridor)
        assert not service.route("a", "c").ok
        assert service.route("a", "c", constraints={"requires": ["keycard"]}).ok

    def test_avoid(self, corridor: CampusDocument) -> None:
        assert not QueryService(corridor).route("a", "c", avoid=["b"]).ok

    def test_unknown_profile(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).route("a", "c", profile="jetpack")
        assert result.error.code == INVALID_REQUEST
        assert "jetpack" in result.error.message


class TestSnap:
    def test_vertex(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).snap(5.5, 1.0)
        assert result.data["type"] == "vertex"
        assert result.data["position"] == {"x": 5.0, "y": 0.0}

    def test_free_far_away(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).snap(25.0, 40.0)
        assert result.data["type"] == "free"

    def test_grid_override(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).snap(25.3, 40.2, grid_size=0.5)
        assert result.data["type"] == "grid"
        assert result.data["position"] == {"x": 25.5, "y": 40.0}

    def test_previous_point(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).snap(30.0, 42.0, previous=Point(x=0, y=40))
        assert result.data["type"] == "orthogonal"


class TestSearch:
    def test_label(self, corridor: CampusDocument) -> None:
        result = QueryService(corridor).search(label="node b")
        assert result.data["count"] == 1
        assert result.data["items"][0]["id"] == "b"

    def test_all(self, corridor: CampusDocument) -> None:
        assert QueryService(corridor).search().data["count"] == 4


class TestLayers:
    def test_layers(self, document: CampusDocument) -> None:
        result = QueryService(document).layers(1.5)
        assert result.data["level"] == "Z4"
        assert result.data["layers"]["nodes"] is True
