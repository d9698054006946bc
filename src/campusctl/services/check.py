"""CheckService — integrity report for the campus document.

Single command following the linter pattern: the full validation report
is always a successful result. Health is carried in ``data["valid"]``.
"""

from __future__ import annotations

from campusctl.domain.types import Severity
from campusctl.infrastructure.persistence import DocumentError
from campusctl.services.base import BaseService
from campusctl.services.result import ServiceResult
from campusctl.services.telemetry import trace_span, traced
from campusctl.services.validate import validate


class CheckService(BaseService):
    """Runs the validation engine over the current graph version."""

    @traced
    def check(self, *, min_severity: Severity | str | None = None) -> ServiceResult:
        """Report validation issues without modifying anything.

        Args:
            min_severity: ``error`` hides warnings. Defaults to the
                ``[check]`` config section.
        """
        try:
            graph = self._document.graph
        except DocumentError as exc:
            return self._document_failure("check", exc)

        with trace_span("validate") as span:
            report = validate(graph)
            if span is not None:
                span.annotate("issues", len(report.issues))

        threshold = Severity(min_severity or self._document.settings.check.min_severity)
        shown = [
            i for i in report.issues if threshold == Severity.WARNING or i.severity == threshold
        ]
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "valid": report.is_valid,
                "issues": [i.model_dump(mode="json") for i in shown],
                "count": len(shown),
                "errors": report.summary.errors,
                "warnings": report.summary.warnings,
            },
        )
