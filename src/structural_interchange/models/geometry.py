"""Geometric primitives for structural elements."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict


class Point2D(BaseModel):
    """2D point in the XY plane, in the model's length unit."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)


class Point3D(BaseModel):
    """3D point, in the model's length unit."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0

    def to_2d(self) -> Point2D:
        """Drop the Z coordinate."""
        return Point2D(x=self.x, y=self.y)
