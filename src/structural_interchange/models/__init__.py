"""Canonical structural model."""

from structural_interchange.models.ids import generate_id, is_valid_id
from structural_interchange.models.geometry import Point2D, Point3D
from structural_interchange.models.layout import FloorType, Grid, Level, ModelLayout
from structural_interchange.models.properties import (
    Diaphragm,
    FloorProperties,
    FrameModifiers,
    FrameProperties,
    Material,
    MaterialType,
    ModelProperties,
    ShellModifiers,
    SlabKind,
    WallProperties,
)
from structural_interchange.models.elements import (
    Beam,
    Brace,
    Column,
    Floor,
    IsolatedFooting,
    ModelElements,
    Opening,
    Wall,
)
from structural_interchange.models.loads import (
    LoadCombination,
    LoadDefinition,
    LoadType,
    ModelLoads,
    SurfaceLoad,
)
from structural_interchange.models.metadata import LengthUnit, Metadata, ProjectInfo, Units
from structural_interchange.models.model import StructuralModel

__all__ = [
    "generate_id",
    "is_valid_id",
    "Point2D",
    "Point3D",
    "FloorType",
    "Grid",
    "Level",
    "ModelLayout",
    "Diaphragm",
    "FloorProperties",
    "FrameModifiers",
    "FrameProperties",
    "Material",
    "MaterialType",
    "ModelProperties",
    "ShellModifiers",
    "SlabKind",
    "WallProperties",
    "Beam",
    "Brace",
    "Column",
    "Floor",
    "IsolatedFooting",
    "ModelElements",
    "Opening",
    "Wall",
    "LoadCombination",
    "LoadDefinition",
    "LoadType",
    "ModelLoads",
    "SurfaceLoad",
    "LengthUnit",
    "Metadata",
    "ProjectInfo",
    "Units",
    "StructuralModel",
]
