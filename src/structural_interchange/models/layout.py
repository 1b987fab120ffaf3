"""Model layout: grids, floor types and levels."""

from __future__ import annotations

from pydantic import BaseModel, Field

from structural_interchange.models.geometry import Point3D
from structural_interchange.models.ids import id_factory


class Grid(BaseModel):
    """A named grid line."""

    id: str = Field(default_factory=id_factory("grid"))
    name: str
    start: Point3D
    end: Point3D
    start_bubble: bool = False
    end_bubble: bool = True


class FloorType(BaseModel):
    """A floor layout type shared by one or more levels."""

    id: str = Field(default_factory=id_factory("floor_type"))
    name: str
    description: str = ""


class Level(BaseModel):
    """A horizontal datum. ``elevation`` is in the model's length unit."""

    id: str = Field(default_factory=id_factory("level"))
    name: str
    elevation: float = 0.0
    floor_type_id: str | None = None


class ModelLayout(BaseModel):
    """Grids, floor types and levels of a model."""

    grids: list[Grid] = Field(default_factory=list)
    floor_types: list[FloorType] = Field(default_factory=list)
    levels: list[Level] = Field(default_factory=list)

    def sorted_levels(self) -> list[Level]:
        """Levels in ascending elevation order."""
        return sorted(self.levels, key=lambda lv: lv.elevation)
