"""Structural elements.

Geometry fields are optional: models produced by other tools
may carry incomplete shapes. Exporters check shapes and skip elements
they cannot encode rather than rejecting the whole model.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from structural_interchange.models.geometry import Point2D
from structural_interchange.models.ids import id_factory
from structural_interchange.models.properties import FrameModifiers


class Wall(BaseModel):
    """A wall in plan. Two points describe a straight panel."""

    id: str = Field(default_factory=id_factory("wall"))
    points: list[Point2D] | None = Field(default_factory=list)
    base_level_id: str | None = None
    top_level_id: str | None = None
    properties_id: str | None = None
    pier_spandrel: str | None = None


class Floor(BaseModel):
    id: str = Field(default_factory=id_factory("floor"))
    points: list[Point2D] | None = Field(default_factory=list)
    level_id: str | None = None
    floor_properties_id: str | None = None
    diaphragm_id: str | None = None
    surface_load_id: str | None = None


class Opening(BaseModel):
    """An opening in a floor or wall.

    Openings either carry their own ``level_id`` or reference the area
    they pierce through ``parent_id`` and inherit its level.
    """

    id: str = Field(default_factory=id_factory("opening"))
    points: list[Point2D] | None = Field(default_factory=list)
    level_id: str | None = None
    parent_id: str | None = None


class Beam(BaseModel):
    id: str = Field(default_factory=id_factory("beam"))
    start: Point2D | None = None
    end: Point2D | None = None
    level_id: str | None = None
    frame_properties_id: str | None = None
    is_joist: bool = False
    modifiers: FrameModifiers | None = None


class Column(BaseModel):
    """A column spanning from ``base_level_id`` up to ``top_level_id``."""

    id: str = Field(default_factory=id_factory("column"))
    start: Point2D | None = None
    end: Point2D | None = None
    base_level_id: str | None = None
    top_level_id: str | None = None
    frame_properties_id: str | None = None
    orientation: float = 0.0
    modifiers: FrameModifiers | None = None


class Brace(BaseModel):
    id: str = Field(default_factory=id_factory("brace"))
    start: Point2D | None = None
    end: Point2D | None = None
    base_level_id: str | None = None
    top_level_id: str | None = None
    frame_properties_id: str | None = None
    modifiers: FrameModifiers | None = None


class IsolatedFooting(BaseModel):
    id: str = Field(default_factory=id_factory("isolated_footing"))
    point: Point2D | None = None
    level_id: str | None = None


class ModelElements(BaseModel):
    """All element collections of a model."""

    walls: list[Wall] = Field(default_factory=list)
    floors: list[Floor] = Field(default_factory=list)
    openings: list[Opening] = Field(default_factory=list)
    beams: list[Beam] = Field(default_factory=list)
    columns: list[Column] = Field(default_factory=list)
    braces: list[Brace] = Field(default_factory=list)
    isolated_footings: list[IsolatedFooting] = Field(default_factory=list)
