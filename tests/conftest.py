"""Shared pytest fixtures and test helpers for campusctl tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from campusctl.config.settings import CampusSettings
from campusctl.domain.models import CampusGraph, empty_graph
from campusctl.infrastructure.document import CampusDocument
from campusctl.services import manager, structure
from campusctl.services.result import GraphResult


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CampusSettings:
    """Settings rooted at a temp project directory with no config file."""
    monkeypatch.delenv("CAMPUSCTL_CONFIG", raising=False)
    return CampusSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def document(settings: CampusSettings) -> CampusDocument:
    """A campus document whose file does not exist yet."""
    return CampusDocument(settings)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI writes an isolated campus.json.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("CAMPUSCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def two_room_graph() -> CampusGraph:
    """Two adjacent 10x10 rooms sharing the wall x=10, no nodes."""
    graph = empty_graph()
    graph = apply(
        manager.add_space(
            graph,
            {"id": "west", "polygon": [(0, 0), (10, 0), (10, 10), (0, 10)], "floorId": "f1"},
        )
    )
    return apply(
        manager.add_space(
            graph,
            {"id": "east", "polygon": [(10, 0), (20, 0), (20, 10), (10, 10)], "floorId": "f1"},
        )
    )


@pytest.fixture
def two_floor_graph() -> CampusGraph:
    """Building B with floors L1 (level 1) and L2 (level 2), one stair node each."""
    graph = apply(structure.add_building(empty_graph(), {"id": "B", "name": "Main"}))
    graph = apply(structure.add_floor(graph, {"id": "L1", "buildingId": "B", "level": 1}))
    graph = apply(structure.add_floor(graph, {"id": "L2", "buildingId": "B", "level": 2}))
    graph = apply(
        manager.add_node(graph, {"id": "s1", "type": "staircase", "floorId": "L1"})
    )
    return apply(
        manager.add_node(graph, {"id": "s2", "type": "staircase", "floorId": "L2"})
    )


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def apply(result: GraphResult) -> CampusGraph:
    """Unwrap a successful GraphResult, asserting success."""
    assert result.ok, result.error
    assert result.graph is not None
    return result.graph


def build_graph(
    nodes: dict[str, tuple[float, float]],
    edges: list[dict[str, Any]],
) -> CampusGraph:
    """Graph from ``{id: (x, y)}`` nodes and edge payloads."""
    graph = empty_graph()
    for node_id, position in nodes.items():
        graph = apply(manager.add_node(graph, {"id": node_id, "position": position}))
    for edge in edges:
        graph = apply(manager.add_edge(graph, edge))
    return graph
