"""Result types — the universal return contract.

INVARIANT: Predictable failures are returned, never raised.
Graph operations return :class:`GraphResult` (a new graph version or a
coded error); CLI-facing services return :class:`ServiceResult`. Both are
plain serializable data with no behaviour attached.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from campusctl.domain.models import CampusGraph


class ErrorCode(StrEnum):
    """Machine-checkable failure categories for graph operations."""

    DUPLICATE_ID = "DuplicateId"
    NOT_FOUND = "NotFound"
    MISSING_ENDPOINT = "EI-1"
    SELF_LOOP = "EI-2"
    SELF_INTERSECTING = "SI-3"
    INVALID_ENTITY = "InvalidEntity"
    INVALID_LINK = "InvalidLink"
    NO_SHARED_WALL = "NoSharedWall"


class ServiceError(BaseModel):
    """Structured error payload within a result."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class GraphResult(BaseModel):
    """Outcome of a graph mutation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_node"``).
        graph: The new graph version when ``ok``.
        data: Operation-specific extras (created IDs, etc.).
        error: Structured error when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    graph: CampusGraph | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    error: ServiceError | None = None

    @classmethod
    def success(cls, op: str, graph: CampusGraph, **data: Any) -> GraphResult:
        return cls(ok=True, op=op, graph=graph, data=data)

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> GraphResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )


class ServiceResult(BaseModel):
    """Return type for CLI-facing service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_node"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
