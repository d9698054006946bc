"""EditorService — apply graph mutations to the campus document.

Each public method runs one pure graph operation against the current
version. A failure is returned as-is and nothing is written. A success is
committed, re-validated in full, and reported with the validation counts
so callers see the health of the version they just produced.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from campusctl.domain.geometry import Point
from campusctl.domain.models import CampusGraph, empty_graph
from campusctl.infrastructure.persistence import DocumentError
from campusctl.services import autolink, manager, structure
from campusctl.services.base import BaseService
from campusctl.services.result import GraphResult, ServiceError, ServiceResult
from campusctl.services.telemetry import trace_span, traced
from campusctl.services.validate import validate

DOCUMENT_EXISTS = "DOCUMENT_EXISTS"

type Mutation = Callable[[CampusGraph], GraphResult]


class EditorService(BaseService):
    """Handles every mutation of the campus document."""

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    @traced
    def init(self, *, force: bool = False) -> ServiceResult:
        """Write an empty campus document. Refuses to overwrite unless *force*."""
        if self._document.exists() and not force:
            return ServiceResult(
                ok=False,
                op="init",
                error=ServiceError(
                    code=DOCUMENT_EXISTS,
                    message=f"Campus document already exists: {self._document.path}",
                    detail={"path": str(self._document.path)},
                ),
            )
        committed = self._document.commit(empty_graph())
        return ServiceResult(
            ok=True,
            op="init",
            data={"path": str(self._document.path), "version": committed.version},
        )

    # ------------------------------------------------------------------
    # Nodes, edges, spaces
    # ------------------------------------------------------------------

    @traced
    def add_node(self, node: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("add_node", lambda g: manager.add_node(g, node))

    @traced
    def update_node(self, node_id: str, patch: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("update_node", lambda g: manager.update_node(g, node_id, patch))

    @traced
    def delete_node(self, node_id: str) -> ServiceResult:
        return self._mutate("delete_node", lambda g: manager.delete_node(g, node_id))

    @traced
    def add_edge(self, edge: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("add_edge", lambda g: manager.add_edge(g, edge))

    @traced
    def update_edge(self, edge_id: str, patch: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("update_edge", lambda g: manager.update_edge(g, edge_id, patch))

    @traced
    def delete_edge(self, edge_id: str) -> ServiceResult:
        return self._mutate("delete_edge", lambda g: manager.delete_edge(g, edge_id))

    @traced
    def add_space(self, space: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("add_space", lambda g: manager.add_space(g, space))

    @traced
    def update_space(self, space_id: str, patch: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("update_space", lambda g: manager.update_space(g, space_id, patch))

    @traced
    def delete_space(self, space_id: str) -> ServiceResult:
        return self._mutate("delete_space", lambda g: manager.delete_space(g, space_id))

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @traced
    def add_building(self, building: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("add_building", lambda g: structure.add_building(g, building))

    @traced
    def delete_building(self, building_id: str) -> ServiceResult:
        return self._mutate("delete_building", lambda g: structure.delete_building(g, building_id))

    @traced
    def add_floor(self, floor: Mapping[str, Any]) -> ServiceResult:
        return self._mutate("add_floor", lambda g: structure.add_floor(g, floor))

    @traced
    def delete_floor(self, floor_id: str) -> ServiceResult:
        return self._mutate("delete_floor", lambda g: structure.delete_floor(g, floor_id))

    @traced
    def link_floors(self, node_a_id: str, node_b_id: str) -> ServiceResult:
        """Vertically link two nodes on different floors."""
        return self._mutate(
            "add_vertical_link", lambda g: structure.add_vertical_link(g, node_a_id, node_b_id)
        )

    # ------------------------------------------------------------------
    # Doors
    # ------------------------------------------------------------------

    @traced
    def place_door(
        self, position: Point, *, threshold: float = autolink.WALL_THRESHOLD
    ) -> ServiceResult:
        return self._mutate("place_door", lambda g: autolink.place_door(g, position, threshold))

    @traced
    def remove_door(self, edge_id: str) -> ServiceResult:
        return self._mutate("remove_door", lambda g: autolink.remove_door(g, edge_id))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _mutate(self, op: str, mutation: Mutation) -> ServiceResult:
        """Run *mutation* on the current version; commit and validate on success."""
        try:
            graph = self._document.graph
        except DocumentError as exc:
            return self._document_failure(op, exc)

        with trace_span("mutate"):
            result = mutation(graph)
        if not result.ok or result.graph is None:
            return ServiceResult(ok=False, op=op, error=result.error)

        with trace_span("commit"):
            committed = self._document.commit(result.graph)
        with trace_span("validate"):
            report = validate(committed)

        warnings = []
        if not report.is_valid:
            warnings.append(
                f"{report.summary.errors} validation error(s) in {self._document.path.name};"
                " run 'campusctl check' for details"
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **result.data,
                "valid": report.is_valid,
                "error_count": report.summary.errors,
                "warning_count": report.summary.warnings,
            },
            warnings=warnings,
        )
