"""Length conversion to and from inches, RAM's internal unit."""

from __future__ import annotations

from structural_interchange.models.metadata import LengthUnit

INCHES_PER_UNIT: dict[LengthUnit, float] = {
    LengthUnit.INCHES: 1.0,
    LengthUnit.FEET: 12.0,
    LengthUnit.MILLIMETERS: 0.0393701,
    LengthUnit.CENTIMETERS: 0.393701,
    LengthUnit.METERS: 39.3701,
}

UNITS_PER_INCH: dict[LengthUnit, float] = {
    LengthUnit.INCHES: 1.0,
    LengthUnit.FEET: 1.0 / 12.0,
    LengthUnit.MILLIMETERS: 25.4,
    LengthUnit.CENTIMETERS: 2.54,
    LengthUnit.METERS: 0.0254,
}


def to_inches(value: float, unit: LengthUnit | str) -> float:
    return value * INCHES_PER_UNIT[LengthUnit(unit)]


def from_inches(value: float, unit: LengthUnit | str) -> float:
    return value * UNITS_PER_INCH[LengthUnit(unit)]
