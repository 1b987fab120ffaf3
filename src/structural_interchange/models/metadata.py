"""Project metadata and unit system."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field


class LengthUnit(str, Enum):
    INCHES = "inches"
    FEET = "feet"
    MILLIMETERS = "millimeters"
    CENTIMETERS = "centimeters"
    METERS = "meters"


class Units(BaseModel):
    length: LengthUnit = LengthUnit.INCHES
    force: str = "pounds"
    temperature: str = "fahrenheit"


class ProjectInfo(BaseModel):
    project_name: str = "Untitled"
    project_id: str = ""
    created: date | None = None
    schema_version: str = "1.0"


class Metadata(BaseModel):
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
    units: Units = Field(default_factory=Units)
