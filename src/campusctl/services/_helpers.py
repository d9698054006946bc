"""Shared service-layer helper functions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError


def coerce[M: BaseModel](model: type[M], value: M | Mapping[str, Any]) -> M:
    """Return *value* as a *model* instance, validating mappings.

    Raises:
        ValidationError: When a mapping does not fit the model.
    """
    if isinstance(value, model):
        return value
    return model.model_validate(value)


def field_names(model: type[BaseModel]) -> dict[str, str]:
    """Map every accepted key (field name and alias) to the field name."""
    names: dict[str, str] = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


def apply_patch[M: BaseModel](entity: M, patch: Mapping[str, Any]) -> M:
    """Merge *patch* over *entity* and re-validate.

    The ``id`` field is never patched.

    Raises:
        KeyError: When *patch* names a field the model does not have.
        ValidationError: When the merged entity does not validate.
    """
    model = type(entity)
    names = field_names(model)
    normalized: dict[str, Any] = {}
    for key, value in patch.items():
        if key not in names:
            raise KeyError(key)
        normalized[names[key]] = value

    merged = {**entity.model_dump(), **normalized}
    merged["id"] = getattr(entity, "id")
    return model.model_validate(merged)


def describe_validation(exc: ValidationError) -> str:
    """One-line summary of a pydantic validation failure."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
