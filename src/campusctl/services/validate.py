"""Validation engine — full-graph integrity scan.

Rules are plain functions registered in :data:`RULES`; each yields the
issues it finds. Every pass re-scans the whole graph. Findings are a
report, not errors: an invalid graph is still a usable graph version.

====  ========  ================================================
Rule  Severity  Condition
====  ========  ================================================
NI-1  error     node has no incident edges
NI-2  warning   staircase/elevator with edges but no vertical link
EI-1  error     edge references a missing node
EI-2  error     edge source equals target
EI-3  warning   several edges join the same unordered node pair
SI-3  error     space polygon self-intersects
====  ========  ================================================
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterator

from pydantic import BaseModel, Field

from campusctl.domain.geometry import is_self_intersecting
from campusctl.domain.models import CampusGraph
from campusctl.domain.types import VERTICAL_NODE_TYPES, Severity


class ValidationIssue(BaseModel):
    """One rule violation and the entities involved."""

    model_config = {"frozen": True}

    rule_id: str
    severity: Severity
    message: str
    target_ids: list[str] = Field(default_factory=list)


class ValidationSummary(BaseModel):
    model_config = {"frozen": True}

    errors: int = 0
    warnings: int = 0


class ValidationReport(BaseModel):
    """Outcome of :func:`validate`. Errors are listed before warnings."""

    model_config = {"frozen": True}

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)

    def by_rule(self, rule_id: str) -> list[ValidationIssue]:
        return [i for i in self.issues if i.rule_id == rule_id]


type Rule = Callable[[CampusGraph], Iterator[ValidationIssue]]


def _error(rule_id: str, message: str, *target_ids: str) -> ValidationIssue:
    return ValidationIssue(
        rule_id=rule_id, severity=Severity.ERROR, message=message, target_ids=list(target_ids)
    )


def _warning(rule_id: str, message: str, *target_ids: str) -> ValidationIssue:
    return ValidationIssue(
        rule_id=rule_id, severity=Severity.WARNING, message=message, target_ids=list(target_ids)
    )


def _degrees(graph: CampusGraph) -> dict[str, int]:
    degree: dict[str, int] = defaultdict(int)
    for edge in graph.edges.values():
        degree[edge.source_node_id] += 1
        degree[edge.target_node_id] += 1
    return degree


def _dangling(graph: CampusGraph) -> set[str]:
    """Edge IDs with at least one missing endpoint (EI-1)."""
    return {
        e.id
        for e in graph.edges.values()
        if e.source_node_id not in graph.nodes or e.target_node_id not in graph.nodes
    }


# ---------------------------------------------------------------------------
# Node rules
# ---------------------------------------------------------------------------


def check_isolated_nodes(graph: CampusGraph) -> Iterator[ValidationIssue]:
    degree = _degrees(graph)
    for node in graph.nodes.values():
        if degree[node.id] == 0:
            yield _error("NI-1", f"Node '{node.id}' has no connected edges", node.id)


def check_vertical_links(graph: CampusGraph) -> Iterator[ValidationIssue]:
    degree = _degrees(graph)
    for node in graph.nodes.values():
        if node.type not in VERTICAL_NODE_TYPES or degree[node.id] == 0:
            continue
        links = node.vertical_links
        if links is None or links.is_empty:
            yield _warning(
                "NI-2",
                f"{node.type.value.capitalize()} node '{node.id}' has no vertical links",
                node.id,
            )


# ---------------------------------------------------------------------------
# Edge rules
# ---------------------------------------------------------------------------


def check_missing_endpoints(graph: CampusGraph) -> Iterator[ValidationIssue]:
    for edge in graph.edges.values():
        missing = [
            nid for nid in (edge.source_node_id, edge.target_node_id) if nid not in graph.nodes
        ]
        if missing:
            yield _error(
                "EI-1",
                f"Edge '{edge.id}' references missing node(s): {', '.join(missing)}",
                edge.id,
            )


def check_self_loops(graph: CampusGraph) -> Iterator[ValidationIssue]:
    dangling = _dangling(graph)
    for edge in graph.edges.values():
        if edge.id not in dangling and edge.source_node_id == edge.target_node_id:
            yield _error("EI-2", f"Edge '{edge.id}' is a self-loop", edge.id)


def check_duplicate_pairs(graph: CampusGraph) -> Iterator[ValidationIssue]:
    dangling = _dangling(graph)
    pairs: dict[tuple[str, str], list[str]] = defaultdict(list)
    for edge in graph.edges.values():
        if edge.id not in dangling:
            pairs[edge.pair_key].append(edge.id)
    for (a, b), edge_ids in pairs.items():
        if len(edge_ids) > 1:
            yield _warning(
                "EI-3",
                f"{len(edge_ids)} edges connect '{a}' and '{b}'",
                *edge_ids,
            )


# ---------------------------------------------------------------------------
# Space rules
# ---------------------------------------------------------------------------


def check_space_polygons(graph: CampusGraph) -> Iterator[ValidationIssue]:
    for space in graph.spaces.values():
        if space.polygon and is_self_intersecting(space.polygon):
            yield _error("SI-3", f"Space '{space.id}' has a self-intersecting polygon", space.id)


RULES: dict[str, Rule] = {
    "NI-1": check_isolated_nodes,
    "NI-2": check_vertical_links,
    "EI-1": check_missing_endpoints,
    "EI-2": check_self_loops,
    "EI-3": check_duplicate_pairs,
    "SI-3": check_space_polygons,
}


def validate(graph: CampusGraph) -> ValidationReport:
    """Run every rule over *graph* and collect the findings."""
    issues = [issue for rule in RULES.values() for issue in rule(graph)]
    errors = [i for i in issues if i.severity == Severity.ERROR]
    warnings = [i for i in issues if i.severity == Severity.WARNING]
    return ValidationReport(
        is_valid=not errors,
        issues=errors + warnings,
        summary=ValidationSummary(errors=len(errors), warnings=len(warnings)),
    )
