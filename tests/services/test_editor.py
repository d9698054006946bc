"""Tests for EditorService — committed mutations of the campus document."""

from __future__ import annotations

import json

from campusctl.domain.geometry import Point
from campusctl.infrastructure.document import CampusDocument
from campusctl.infrastructure.persistence import load_file
from campusctl.services.editor import DOCUMENT_EXISTS, EditorService
from campusctl.services.result import ErrorCode


class TestInit:
    def test_writes_empty_document(self, document: CampusDocument) -> None:
        result = EditorService(document).init()
        assert result.ok
        assert document.path.is_file()
        assert result.data["path"] == str(document.path)
        data = json.loads(document.path.read_text())
        assert data["nodes"] == {}
        assert "lastModified" in data

    def test_refuses_overwrite(self, document: CampusDocument) -> None:
        EditorService(document).init()
        result = EditorService(document).init()
        assert not result.ok
        assert result.error.code == DOCUMENT_EXISTS

    def test_force(self, document: CampusDocument) -> None:
        service = EditorService(document)
        service.init()
        service.add_node({"id": "n"})
        assert service.init(force=True).ok
        assert load_file(document.path).nodes == {}


class TestMutations:
    def test_add_node_commits(self, document: CampusDocument) -> None:
        result = EditorService(document).add_node({"id": "n1", "label": "Lobby"})
        assert result.ok
        assert result.data["id"] == "n1"
        assert load_file(document.path).nodes["n1"].label == "Lobby"

    def test_health_counts(self, document: CampusDocument) -> None:
        result = EditorService(document).add_node({"id": "n1"})
        assert result.data["valid"] is False
        assert result.data["error_count"] == 1
        assert result.data["warning_count"] == 0
        assert result.warnings == [
            "1 validation error(s) in campus.json; run 'campusctl check' for details"
        ]

    def test_becomes_valid_once_connected(self, document: CampusDocument) -> None:
        service = EditorService(document)
        service.add_node({"id": "a"})
        service.add_node({"id": "b", "position": (3, 4)})
        result = service.add_edge({"sourceNodeId": "a", "targetNodeId": "b"})
        assert result.data["valid"] is True
        assert result.warnings == []
        edge_id = result.data["id"]
        assert load_file(document.path).edges[edge_id].distance == 5.0

    def test_failure_writes_nothing(self, document: CampusDocument) -> None:
        result = EditorService(document).add_edge({"sourceNodeId": "a", "targetNodeId": "b"})
        assert not result.ok
        assert result.error.code == ErrorCode.MISSING_ENDPOINT
        assert not document.path.exists()

    def test_update_and_delete(self, document: CampusDocument) -> None:
        service = EditorService(document)
        service.add_node({"id": "n"})
        assert service.update_node("n", {"label": "X"}).ok
        assert document.graph.nodes["n"].label == "X"
        assert service.delete_node("n").ok
        assert document.graph.nodes == {}

    def test_space_ops(self, document: CampusDocument) -> None:
        service = EditorService(document)
        assert service.add_space({"id": "s", "polygon": [(0, 0), (1, 0), (1, 1)]}).ok
        assert service.update_space("s", {"name": "Hall"}).ok
        assert service.delete_space("s").ok
        assert document.graph.spaces == {}

    def test_edge_ops(self, document: CampusDocument) -> None:
        service = EditorService(document)
        service.add_node({"id": "a"})
        service.add_node({"id": "b"})
        service.add_edge({"id": "e", "sourceNodeId": "a", "targetNodeId": "b"})
        assert service.update_edge("e", {"isOutdoor": True}).ok
        assert document.graph.edges["e"].is_outdoor is True
        assert service.delete_edge("e").ok

    def test_structure_and_link(self, document: CampusDocument) -> None:
        service = EditorService(document)
        assert service.add_building({"id": "B"}).ok
        assert service.add_floor({"id": "L1", "buildingId": "B", "level": 1}).ok
        assert service.add_floor({"id": "L2", "buildingId": "B", "level": 2}).ok
        service.add_node({"id": "up", "floorId": "L2", "type": "elevator"})
        service.add_node({"id": "down", "floorId": "L1", "type": "elevator"})
        result = service.link_floors("up", "down")
        assert result.ok
        assert result.op == "add_vertical_link"
        assert result.data["lower_node_id"] == "down"
        assert result.data["valid"] is True
        assert service.delete_floor("L2").ok
        assert service.delete_building("B").ok

    def test_doors(self, document: CampusDocument) -> None:
        service = EditorService(document)
        service.add_space({"id": "w", "polygon": [(0, 0), (4, 0), (4, 4), (0, 4)]})
        service.add_space({"id": "e", "polygon": [(4, 0), (8, 0), (8, 4), (4, 4)]})
        placed = service.place_door(Point(x=4, y=2))
        assert placed.ok
        assert placed.data["valid"] is True
        assert service.remove_door(placed.data["edge_id"]).ok
        assert service.place_door(Point(x=-10, y=2)).error.code == ErrorCode.NO_SHARED_WALL

    def test_corrupt_document(self, document: CampusDocument) -> None:
        document.path.write_text("{ not json")
        result = EditorService(document).add_node({})
        assert not result.ok
        assert result.error.code == "DOCUMENT_ERROR"
        assert result.error.detail["path"] == str(document.path)
