"""Identifier generation for canonical model entities.

Every element and property carries a string id of the form
``<PREFIX>-<8 hex chars>``. Ids are unique within one model; they are not
stable across runs.
"""

from __future__ import annotations

import uuid

PREFIXES: dict[str, str] = {
    # Elements
    "beam": "BM",
    "column": "COL",
    "wall": "WL",
    "floor": "FL",
    "brace": "BR",
    "isolated_footing": "IF",
    "joint": "JT",
    "opening": "OP",
    # Properties
    "material": "MAT",
    "wall_properties": "WP",
    "floor_properties": "FP",
    "frame_properties": "FRP",
    "diaphragm": "DIA",
    # Layout
    "grid": "GR",
    "level": "LV",
    "floor_type": "FT",
    # Loads
    "load_definition": "LD",
    "surface_load": "SL",
    "load_combination": "LC",
}


def generate_id(category: str) -> str:
    """Generate a new id for an entity of the given category."""
    try:
        prefix = PREFIXES[category]
    except KeyError:
        raise ValueError(f"Unknown id category: {category!r}") from None
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def id_factory(category: str):
    """Return a zero-argument factory for use as a pydantic default_factory."""
    prefix = PREFIXES[category]
    return lambda: f"{prefix}-{uuid.uuid4().hex[:8]}"


def is_valid_id(value: str, category: str | None = None) -> bool:
    """Check that a string looks like a generated id (optionally of a category)."""
    if not isinstance(value, str) or "-" not in value:
        return False
    prefix, _, suffix = value.rpartition("-")
    if category is not None and prefix != PREFIXES.get(category):
        return False
    return len(suffix) == 8 and all(c in "0123456789abcdef" for c in suffix)
