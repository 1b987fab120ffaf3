"""Material and section properties."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from structural_interchange.models.ids import id_factory


class MaterialType(str, Enum):
    CONCRETE = "Concrete"
    STEEL = "Steel"
    WOOD = "Wood"
    MASONRY = "Masonry"
    COLD_FORMED = "ColdFormed"
    OTHER = "Other"


class Material(BaseModel):
    id: str = Field(default_factory=id_factory("material"))
    name: str
    type: MaterialType = MaterialType.CONCRETE


class FrameModifiers(BaseModel):
    """Stiffness and mass modifiers for frame sections. 1.0 means unmodified."""

    area: float = 1.0
    a2: float = 1.0
    a3: float = 1.0
    torsion: float = 1.0
    i22: float = 1.0
    i33: float = 1.0
    mass: float = 1.0
    weight: float = 1.0

    def tokens(self) -> list[tuple[str, float]]:
        """E2K property-modifier tokens for values that differ from 1.0."""
        pairs = [
            ("PROPMODA", self.area),
            ("PROPMODA2", self.a2),
            ("PROPMODA3", self.a3),
            ("PROPMODT", self.torsion),
            ("PROPMODI22", self.i22),
            ("PROPMODI33", self.i33),
            ("PROPMODM", self.mass),
            ("PROPMODW", self.weight),
        ]
        return [(name, value) for name, value in pairs if abs(value - 1.0) > 1e-9]


class ShellModifiers(BaseModel):
    """Stiffness and mass modifiers for shell sections. 1.0 means unmodified."""

    f11: float = 1.0
    f22: float = 1.0
    f12: float = 1.0
    m11: float = 1.0
    m22: float = 1.0
    m12: float = 1.0
    v13: float = 1.0
    v23: float = 1.0
    mass: float = 1.0
    weight: float = 1.0


class FrameProperties(BaseModel):
    """A frame section used by beams, columns and braces."""

    id: str = Field(default_factory=id_factory("frame_properties"))
    name: str
    material_id: str | None = None
    shape: str = ""
    depth: float = 12.0
    width: float = 12.0
    modifiers: FrameModifiers = Field(default_factory=FrameModifiers)


class SlabKind(str, Enum):
    SLAB = "Slab"
    COMPOSITE = "Composite"
    NON_COMPOSITE = "NonComposite"


class FloorProperties(BaseModel):
    id: str = Field(default_factory=id_factory("floor_properties"))
    name: str
    type: SlabKind = SlabKind.SLAB
    thickness: float = 6.0
    material_id: str | None = None
    modifiers: ShellModifiers = Field(default_factory=ShellModifiers)


class WallProperties(BaseModel):
    id: str = Field(default_factory=id_factory("wall_properties"))
    name: str
    thickness: float = 8.0
    material_id: str | None = None
    modifiers: ShellModifiers = Field(default_factory=ShellModifiers)


class Diaphragm(BaseModel):
    id: str = Field(default_factory=id_factory("diaphragm"))
    name: str
    type: str = "Rigid"


class ModelProperties(BaseModel):
    """All property catalogs of a model."""

    materials: list[Material] = Field(default_factory=list)
    frame_properties: list[FrameProperties] = Field(default_factory=list)
    floor_properties: list[FloorProperties] = Field(default_factory=list)
    wall_properties: list[WallProperties] = Field(default_factory=list)
    diaphragms: list[Diaphragm] = Field(default_factory=list)
