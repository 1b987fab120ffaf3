"""Load definitions, surface loads and combinations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from structural_interchange.models.ids import id_factory


class LoadType(str, Enum):
    DEAD = "Dead"
    LIVE = "Live"
    SNOW = "Snow"
    WIND = "Wind"
    SEISMIC = "Seismic"
    THERMAL = "Thermal"
    OTHER = "Other"


class LoadDefinition(BaseModel):
    """A named load pattern."""

    id: str = Field(default_factory=id_factory("load_definition"))
    name: str
    type: LoadType = LoadType.DEAD
    self_weight: float = 0.0


class SurfaceLoad(BaseModel):
    """Uniform dead and live pressures applied to floors.

    Values are in the model's force-per-area unit.
    """

    id: str = Field(default_factory=id_factory("surface_load"))
    name: str = ""
    dead_load_id: str | None = None
    live_load_id: str | None = None
    dead_value: float = 0.0
    live_value: float = 0.0


class LoadCombination(BaseModel):
    id: str = Field(default_factory=id_factory("load_combination"))
    name: str = ""
    load_definition_ids: list[str] = Field(default_factory=list)


class ModelLoads(BaseModel):
    definitions: list[LoadDefinition] = Field(default_factory=list)
    surface_loads: list[SurfaceLoad] = Field(default_factory=list)
    combinations: list[LoadCombination] = Field(default_factory=list)
