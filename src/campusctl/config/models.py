"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, campusctl.toml only contains
overrides. A fresh project needs only ``[document] filename``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from campusctl.domain.snap import SnapConfig
from campusctl.domain.types import OptimizeBy, Severity, Weather

# --- campusctl.toml sections ---


class DocumentConfig(BaseModel):
    """[document] section."""

    model_config = {"frozen": True}

    filename: str = "campus.json"
    indent: int | None = 2


class RoutingConfig(BaseModel):
    """[routing] section — defaults for ``campusctl route``."""

    model_config = {"frozen": True}

    optimize_by: OptimizeBy = OptimizeBy.DISTANCE
    profile: str = "default"
    weather: Weather = Weather.CLEAR
    max_alternatives: int = Field(default=0, ge=0)


class CheckConfig(BaseModel):
    """[check] section."""

    model_config = {"frozen": True}

    min_severity: Severity = Severity.WARNING


class CampusConfig(BaseModel):
    """Root configuration composing all sections.

    ``[snap]`` reuses :class:`campusctl.domain.snap.SnapConfig`.
    """

    model_config = {"frozen": True}

    document: DocumentConfig = Field(default_factory=DocumentConfig)
    snap: SnapConfig = Field(default_factory=SnapConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)
