"""Entity classification enums for the campus graph."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Kinds of entity stored in a CampusGraph."""

    NODE = "node"
    EDGE = "edge"
    SPACE = "space"
    BUILDING = "building"
    FLOOR = "floor"


class NodeType(StrEnum):
    """Semantic role of a traversal node."""

    ROOM = "room"
    CORRIDOR_JUNCTION = "corridor_junction"
    STAIRCASE = "staircase"
    ELEVATOR = "elevator"
    ENTRANCE = "entrance"
    OUTDOOR_POINT = "outdoor_point"
    OTHER = "other"


class SpaceType(StrEnum):
    """Semantic role of a bounded area."""

    CLASSROOM = "classroom"
    LAB = "lab"
    OFFICE = "office"
    CORRIDOR = "corridor"
    STAIRWELL = "stairwell"
    RESTROOM = "restroom"
    STORAGE = "storage"
    COMMON = "common"
    OUTDOOR = "outdoor"
    OTHER = "other"


class EdgeDirection(StrEnum):
    """Which way an edge may be traversed."""

    BIDIRECTIONAL = "bidirectional"
    FORWARD = "forward"
    BACKWARD = "backward"


class Severity(StrEnum):
    """Validation issue severity."""

    ERROR = "error"
    WARNING = "warning"


class OptimizeBy(StrEnum):
    """Route weight selector."""

    DISTANCE = "distance"
    TIME = "time"


class Weather(StrEnum):
    """Environmental context applied to outdoor edges."""

    CLEAR = "clear"
    RAIN = "rain"
    SNOW = "snow"


class SnapType(StrEnum):
    """Which snap candidate resolved a cursor position."""

    VERTEX = "vertex"
    EDGE = "edge"
    ORTHOGONAL = "orthogonal"
    GRID = "grid"
    FREE = "free"


# Vertical circulation nodes expected to carry above/below links.
VERTICAL_NODE_TYPES: frozenset[NodeType] = frozenset({NodeType.STAIRCASE, NodeType.ELEVATOR})
