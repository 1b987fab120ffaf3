"""Conversion settings.

Settings are passed explicitly to each conversion. Nothing here is a
process-wide singleton; two conversions may run with different settings.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

# Multiplier applied to surface-load magnitudes before they are handed to
# the RAM API. Compensates for unit scaling inside the external system;
# the value is tied to the RAM release in use and must be rechecked
# whenever that release changes.
RAM_SURFACE_LOAD_FACTOR = 1000.0


class StoryMatch(str, Enum):
    """How a canonical level name is matched to an external story name."""

    CONTAINS = "contains"
    EXACT = "exact"


class ConversionSettings(BaseModel):
    """Tunable values for one conversion run."""

    tolerance: float = Field(
        default=0.25, gt=0, description="Points closer than this merge"
    )
    grid: float = Field(
        default=0.25, gt=0, description="Rounding grid for point keys"
    )
    story_match: StoryMatch = StoryMatch.CONTAINS
    include_default_loads: bool = Field(
        default=True,
        description="Emit the default load patterns when the model has none",
    )
    surface_load_factor: float = Field(default=RAM_SURFACE_LOAD_FACTOR, gt=0)

    @model_validator(mode="after")
    def grid_within_tolerance(self) -> ConversionSettings:
        if self.grid > self.tolerance:
            raise ValueError(
                f"Grid ({self.grid}) must not exceed tolerance ({self.tolerance}); "
                "merge results would depend on insertion order"
            )
        return self

    @classmethod
    def load(cls, path: str | Path) -> ConversionSettings:
        """Load settings from a JSON file."""
        return cls.model_validate_json(Path(path).read_text())
