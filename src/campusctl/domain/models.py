"""Campus graph entity models.

Normalized, id-keyed storage: entities reference each other only by ID,
never by object. Every model is frozen; mutations build new instances and
a new :class:`CampusGraph` (see :mod:`campusctl.services.manager`).

Fields are snake_case in Python and camelCase in the interchange format
(``sourceNodeId``, ``verticalLinks``). Both spellings are accepted on input.
Optional fields left as ``None`` are filled by the autocomplete pipeline.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from campusctl.domain.geometry import Point
from campusctl.domain.ids import generate_id
from campusctl.domain.types import EdgeDirection, EntityKind, NodeType, SpaceType

SCHEMA_VERSION = "1.0.0"


def _unique(values: Any) -> Any:
    """Drop duplicate strings while keeping first-seen order."""
    if values is None or isinstance(values, str):
        return values
    return tuple(dict.fromkeys(values))


class CampusModel(BaseModel):
    """Shared config: frozen, camelCase aliases, populate by field name."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class VerticalLinks(CampusModel):
    """Connections to the matching node on the floors above and below."""

    above: str | None = None
    below: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.above is None and self.below is None


class Node(CampusModel):
    """A point-like traversal location."""

    id: str = Field(default_factory=lambda: generate_id(EntityKind.NODE))
    type: NodeType | None = None
    position: Point | None = None
    floor_id: str | None = None
    building_id: str | None = None
    label: str | None = None
    vertical_links: VerticalLinks | None = None
    properties: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


class DimensionLimits(CampusModel):
    """Width / height / weight limits. ``None`` means unconstrained."""

    width: float | None = None
    height: float | None = None
    weight: float | None = None

    def items(self) -> Iterator[tuple[str, float | None]]:
        yield "width", self.width
        yield "height", self.height
        yield "weight", self.weight


class BlockedPair(CampusModel):
    """A directed ``from -> to`` traversal that is not allowed."""

    from_node: str = Field(alias="from")
    to_node: str = Field(alias="to")

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"from": value[0], "to": value[1]}
        return value


class EdgeConstraints(CampusModel):
    """Traversal restrictions attached to an edge.

    Attributes:
        max: Largest traveller the passage admits, per dimension.
        requires: Capability tags a traveller must hold (e.g. ``keycard``).
        blocked: Directed node pairs that may not be traversed.
    """

    max: DimensionLimits | None = None
    requires: tuple[str, ...] = ()
    blocked: tuple[BlockedPair, ...] = ()

    @field_validator("requires", mode="before")
    @classmethod
    def _dedupe_requires(cls, value: Any) -> Any:
        return _unique(value)

    def blocks(self, from_node: str, to_node: str) -> bool:
        return any(p.from_node == from_node and p.to_node == to_node for p in self.blocked)


class Edge(CampusModel):
    """A traversal connection between two nodes."""

    id: str = Field(default_factory=lambda: generate_id(EntityKind.EDGE))
    source_node_id: str
    target_node_id: str
    direction: EdgeDirection | None = None
    distance: float | None = None
    estimated_time: float | None = None
    has_steps: bool | None = None
    is_outdoor: bool | None = None
    width: float | None = None
    is_vertical: bool | None = None
    label: str | None = None
    tags: tuple[str, ...] | None = None
    constraints: EdgeConstraints | None = None
    properties: dict[str, Any] | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        return _unique(value)

    @property
    def pair_key(self) -> tuple[str, str]:
        """Unordered endpoint pair, normalized as ``(min, max)``."""
        a, b = self.source_node_id, self.target_node_id
        return (a, b) if a <= b else (b, a)

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source_node_id, self.target_node_id)


# ---------------------------------------------------------------------------
# Spaces and structure
# ---------------------------------------------------------------------------


class Space(CampusModel):
    """A bounded polygonal area (room, corridor, courtyard, ...)."""

    id: str = Field(default_factory=lambda: generate_id(EntityKind.SPACE))
    type: SpaceType | None = None
    name: str | None = None
    building_id: str | None = None
    floor_id: str | None = None
    polygon: tuple[Point, ...] | None = None
    contained_node_ids: tuple[str, ...] | None = None
    manager: str | None = None
    capacity: int | None = None
    tags: tuple[str, ...] | None = None
    notes: str | None = None
    properties: dict[str, Any] | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        return _unique(value)


class Floor(CampusModel):
    """One level of a building."""

    id: str = Field(default_factory=lambda: generate_id(EntityKind.FLOOR))
    building_id: str | None = None
    level: int | None = None
    name: str | None = None
    base_image_url: str | None = None
    image_offset: Point | None = None
    image_scale: float | None = None
    properties: dict[str, Any] | None = None


class Building(CampusModel):
    """A building on the campus."""

    id: str = Field(default_factory=lambda: generate_id(EntityKind.BUILDING))
    name: str | None = None
    short_name: str | None = None
    outline: tuple[Point, ...] | None = None
    floor_ids: tuple[str, ...] | None = None
    position: Point | None = None
    properties: dict[str, Any] | None = None


type CampusEntity = Node | Edge | Space | Floor | Building

ENTITY_MODELS: dict[EntityKind, type[BaseModel]] = {
    EntityKind.NODE: Node,
    EntityKind.EDGE: Edge,
    EntityKind.SPACE: Space,
    EntityKind.FLOOR: Floor,
    EntityKind.BUILDING: Building,
}

MAPPING_FIELDS: dict[EntityKind, str] = {
    EntityKind.BUILDING: "buildings",
    EntityKind.FLOOR: "floors",
    EntityKind.NODE: "nodes",
    EntityKind.EDGE: "edges",
    EntityKind.SPACE: "spaces",
}


# ---------------------------------------------------------------------------
# Aggregate root
# ---------------------------------------------------------------------------


class CampusGraph(CampusModel):
    """Normalized root holding every campus entity, keyed by ID.

    INVARIANT: a CampusGraph is never modified after construction. Build a
    new one with :meth:`replace`; untouched mappings may be shared.
    """

    version: str = SCHEMA_VERSION
    last_modified: str | None = None
    buildings: dict[str, Building] = Field(default_factory=dict)
    floors: dict[str, Floor] = Field(default_factory=dict)
    nodes: dict[str, Node] = Field(default_factory=dict)
    edges: dict[str, Edge] = Field(default_factory=dict)
    spaces: dict[str, Space] = Field(default_factory=dict)

    def mapping(self, kind: EntityKind) -> dict[str, Any]:
        return getattr(self, MAPPING_FIELDS[kind])

    def replace(self, **updates: Any) -> CampusGraph:
        """Return a copy with the given top-level fields swapped out."""
        return self.model_copy(update=updates)

    def incident_edges(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges.values() if e.touches(node_id)]

    def floor_level(self, floor_id: str | None) -> int | None:
        floor = self.floors.get(floor_id) if floor_id else None
        return floor.level if floor else None


def empty_graph() -> CampusGraph:
    """A graph with all five entity mappings empty."""
    return CampusGraph()
