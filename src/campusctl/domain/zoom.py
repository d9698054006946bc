"""Semantic zoom — map a view scale to a discrete level and visible layers.

Consumed by renderers to decide information density; the graph core
never reads it.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class ZoomLevel(StrEnum):
    """Campus overview (Z1) through space detail (Z5)."""

    Z1 = "Z1"
    Z2 = "Z2"
    Z3 = "Z3"
    Z4 = "Z4"
    Z5 = "Z5"


# Lower bound of the scale range for each level above Z1.
ZOOM_THRESHOLDS: dict[ZoomLevel, float] = {
    ZoomLevel.Z2: 0.2,
    ZoomLevel.Z3: 0.5,
    ZoomLevel.Z4: 1.0,
    ZoomLevel.Z5: 2.0,
}


class LayerVisibility(BaseModel):
    """Which entity layers render at a zoom level."""

    model_config = {"frozen": True}

    building_outlines: bool = True
    spaces: bool = False
    nodes: bool = False
    edges: bool = False
    labels: bool = False
    metadata: bool = False
    validation: bool = False


_LAYERS: dict[ZoomLevel, LayerVisibility] = {
    ZoomLevel.Z1: LayerVisibility(),
    ZoomLevel.Z2: LayerVisibility(labels=True),
    ZoomLevel.Z3: LayerVisibility(spaces=True, labels=True),
    ZoomLevel.Z4: LayerVisibility(
        spaces=True, nodes=True, edges=True, labels=True, validation=True
    ),
    ZoomLevel.Z5: LayerVisibility(
        spaces=True, nodes=True, edges=True, labels=True, metadata=True, validation=True
    ),
}


def zoom_level(scale: float) -> ZoomLevel:
    """Map the view transform's scale factor to a zoom level."""
    level = ZoomLevel.Z1
    for candidate, threshold in ZOOM_THRESHOLDS.items():
        if scale >= threshold:
            level = candidate
    return level


def layer_visibility(level: ZoomLevel | str) -> LayerVisibility:
    return _LAYERS[ZoomLevel(level)]
