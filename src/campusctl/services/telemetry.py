"""Span timing for service calls, surfaced by ``--verbose``.

A ``@traced`` service method opens a root span; ``trace_span`` blocks
inside it (mutate, commit, validate, find_route ...) become children.
The finished tree lands in ``ServiceResult.meta["telemetry"]``.

Disabled by default. The disabled path costs one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from campusctl.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("campusctl_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("campusctl_span", default=None)

log = structlog.get_logger("campusctl.telemetry")


@dataclass
class Span:
    """One timed block and the blocks nested in it."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    stopped: float | None = None

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds; 0.0 while the span is still open."""
        if self.stopped is None:
            return 0.0
        return (self.stopped - self.started) * 1000

    def end(self) -> None:
        self.stopped = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def child(self, name: str) -> Span:
        span = Span(name=name, parent=self)
        self.children.append(span)
        return span

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@contextmanager
def _activate(span: Span) -> Generator[Span]:
    """Make *span* current for the block; close it on exit."""
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time a block as a child of the active span.

    Yields None when telemetry is off or no ``@traced`` call is running.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _activate(parent.child(name)) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach the span tree to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        ok = False
        try:
            with _activate(root):
                result = func(*args, **kwargs)
            ok = result.ok if isinstance(result, ServiceResult) else True
        finally:
            log.debug(
                "span.complete",
                span_name=root.name,
                duration_ms=round(root.duration_ms, 2),
                ok=ok,
                children=len(root.children),
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, for ad-hoc annotation."""
    return _current_span.get() if _enabled.get() else None
