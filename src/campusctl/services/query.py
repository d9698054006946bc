"""QueryService — read-only questions about the current graph version.

Routing, snapping, node search, and layer visibility. Nothing here
commits a new version.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from campusctl.domain.geometry import Point
from campusctl.domain.snap import find_snap, snap_context
from campusctl.domain.types import NodeType
from campusctl.domain.zoom import layer_visibility, zoom_level
from campusctl.infrastructure.persistence import DocumentError
from campusctl.services._helpers import describe_validation
from campusctl.services.base import BaseService
from campusctl.services.result import ServiceError, ServiceResult
from campusctl.services.routing import RouteRequest, find_route
from campusctl.services.search import search_nodes
from campusctl.services.telemetry import trace_span, traced

NO_ROUTE = "NO_ROUTE"
INVALID_REQUEST = "INVALID_REQUEST"


class QueryService(BaseService):
    """Route, snap, search, and layer queries."""

    @traced
    def route(
        self,
        start: str,
        end: str,
        *,
        constraints: Mapping[str, Any] | None = None,
        avoid: Sequence[str] = (),
        optimize_by: str | None = None,
        profile: str | None = None,
        weather: str | None = None,
        max_alternatives: int | None = None,
    ) -> ServiceResult:
        """Find the cheapest route between two nodes.

        Options left as None fall back to the ``[routing]`` config section.
        """
        defaults = self._document.settings.routing
        try:
            request = RouteRequest.model_validate(
                {
                    "start": start,
                    "end": end,
                    "constraints": dict(constraints or {}),
                    "avoid": tuple(avoid),
                    "optimize_by": optimize_by or defaults.optimize_by,
                    "profile": profile or defaults.profile,
                    "weather": weather or defaults.weather,
                    "max_alternatives": (
                        defaults.max_alternatives if max_alternatives is None else max_alternatives
                    ),
                }
            )
        except ValidationError as exc:
            return ServiceResult(
                ok=False,
                op="route",
                error=ServiceError(code=INVALID_REQUEST, message=describe_validation(exc)),
            )

        try:
            graph = self._document.graph
        except DocumentError as exc:
            return self._document_failure("route", exc)

        with trace_span("find_route"):
            route = find_route(graph, request, engine=self._document.engine)

        if route is None:
            unknown = [nid for nid in (start, end) if nid not in graph.nodes]
            message = (
                f"Unknown node(s): {', '.join(unknown)}"
                if unknown
                else f"No route from '{start}' to '{end}' under the given constraints"
            )
            return ServiceResult(
                ok=False,
                op="route",
                error=ServiceError(
                    code=NO_ROUTE,
                    message=message,
                    detail={"start": start, "end": end, "unknown": unknown},
                ),
            )
        return ServiceResult(
            ok=True,
            op="route",
            data={
                **route.model_dump(mode="json"),
                "profile": request.profile,
                "optimize_by": request.optimize_by.value,
            },
        )

    @traced
    def snap(
        self,
        x: float,
        y: float,
        *,
        floor_id: str | None = None,
        previous: Point | None = None,
        grid_size: float | None = None,
    ) -> ServiceResult:
        """Resolve a raw cursor position against the current geometry."""
        try:
            graph = self._document.graph
        except DocumentError as exc:
            return self._document_failure("snap", exc)

        config = self._document.settings.snap
        if grid_size:
            config = config.model_copy(update={"grid_size": grid_size, "enable_grid": True})

        context = snap_context(graph, floor_id=floor_id, previous_point=previous)
        result = find_snap(Point(x=x, y=y), context, config)
        return ServiceResult(ok=True, op="snap", data=result.model_dump(mode="json"))

    @traced
    def search(
        self,
        *,
        node_type: NodeType | str | None = None,
        floor_id: str | None = None,
        building_id: str | None = None,
        label: str | None = None,
    ) -> ServiceResult:
        try:
            graph = self._document.graph
        except DocumentError as exc:
            return self._document_failure("search", exc)

        nodes = search_nodes(
            graph,
            type=node_type,
            floor_id=floor_id,
            building_id=building_id,
            label_contains=label,
        )
        items = [n.model_dump(mode="json", exclude_none=True) for n in nodes]
        return ServiceResult(ok=True, op="search", data={"items": items, "count": len(items)})

    @traced
    def layers(self, scale: float) -> ServiceResult:
        """Zoom level and visible layers for a view scale."""
        level = zoom_level(scale)
        return ServiceResult(
            ok=True,
            op="layers",
            data={
                "scale": scale,
                "level": level.value,
                "layers": layer_visibility(level).model_dump(),
            },
        )
