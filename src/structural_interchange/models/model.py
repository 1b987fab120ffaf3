"""Top-level canonical structural model.

The model is the shared representation every converter reads from and
writes to. Sections mirror the canonical JSON schema: metadata, layout,
properties, elements and loads.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from structural_interchange.models.elements import ModelElements
from structural_interchange.models.layout import FloorType, Level, ModelLayout
from structural_interchange.models.loads import ModelLoads
from structural_interchange.models.metadata import Metadata
from structural_interchange.models.properties import (
    Diaphragm,
    FloorProperties,
    FrameProperties,
    ModelProperties,
    WallProperties,
)


class StructuralModel(BaseModel):
    """A complete structural building model."""

    metadata: Metadata = Field(default_factory=Metadata)
    layout: ModelLayout = Field(default_factory=ModelLayout)
    properties: ModelProperties = Field(default_factory=ModelProperties)
    elements: ModelElements = Field(default_factory=ModelElements)
    loads: ModelLoads = Field(default_factory=ModelLoads)

    # ── File I/O ──────────────────────────────────────────────────────

    @classmethod
    def load(cls, path: str | Path) -> StructuralModel:
        """Load a model from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text())

    def save(self, path: str | Path) -> Path:
        """Save the model to a JSON file. Creates parent dirs if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path

    # ── Lookups ───────────────────────────────────────────────────────

    def get_level(self, level_id: str | None) -> Level | None:
        if level_id is None:
            return None
        return next((lv for lv in self.layout.levels if lv.id == level_id), None)

    def get_level_by_name(self, name: str) -> Level | None:
        """Find a level by name (case-insensitive)."""
        return next(
            (lv for lv in self.layout.levels if lv.name.lower() == name.lower()),
            None,
        )

    def get_floor_type(self, floor_type_id: str | None) -> FloorType | None:
        if floor_type_id is None:
            return None
        return next(
            (ft for ft in self.layout.floor_types if ft.id == floor_type_id), None
        )

    def get_frame_properties(self, props_id: str | None) -> FrameProperties | None:
        return _by_id(self.properties.frame_properties, props_id)

    def get_floor_properties(self, props_id: str | None) -> FloorProperties | None:
        return _by_id(self.properties.floor_properties, props_id)

    def get_wall_properties(self, props_id: str | None) -> WallProperties | None:
        return _by_id(self.properties.wall_properties, props_id)

    def get_diaphragm(self, diaphragm_id: str | None) -> Diaphragm | None:
        return _by_id(self.properties.diaphragms, diaphragm_id)

    # ── Query helpers ─────────────────────────────────────────────────

    def element_counts(self) -> dict[str, int]:
        """Number of elements per kind."""
        e = self.elements
        return {
            "walls": len(e.walls),
            "floors": len(e.floors),
            "openings": len(e.openings),
            "beams": len(e.beams),
            "columns": len(e.columns),
            "braces": len(e.braces),
            "isolated_footings": len(e.isolated_footings),
        }

    def summary(self) -> str:
        """Human-readable summary of the model."""
        info = self.metadata.project_info
        lines = [f"{info.project_name} ({self.metadata.units.length.value})"]
        lines.append(f"   Levels: {len(self.layout.levels)}")
        for level in self.layout.sorted_levels():
            lines.append(f"      {level.name} (elev {level.elevation:g})")
        counts = ", ".join(
            f"{kind.replace('_', ' ').title()}: {n}"
            for kind, n in self.element_counts().items()
            if n
        )
        lines.append(f"   {counts or 'No elements'}")
        lines.append(f"   Load definitions: {len(self.loads.definitions)}")
        return "\n".join(lines)


def _by_id(items: list, item_id: str | None):
    if item_id is None:
        return None
    return next((item for item in items if item.id == item_id), None)
