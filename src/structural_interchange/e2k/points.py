"""Tolerance-aware point pool for E2K export.

Independently drawn elements rarely share exact coordinates, even when
they meet at the same corner. Every coordinate is snapped to a grid
before lookup, so a wall corner at (0.0, 0.0) and a floor corner at
(0.0, 0.01) become the same E2K point.

The store is conversion-scoped: create one per export, never share it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from structural_interchange.e2k.sections import render
from structural_interchange.errors import PreconditionViolation
from structural_interchange.models.geometry import Point2D
from structural_interchange.models.model import StructuralModel

logger = logging.getLogger(__name__)

NULL_POINT_ID = "0"
POINTS_SECTION = "POINT COORDINATES"


@dataclass(frozen=True)
class PointKey:
    """A point snapped to the grid, as integer grid multiples."""

    ix: int
    iy: int

    def to_point(self, grid: float) -> Point2D:
        # + 0.0 turns -0.0 into 0.0 so output never reads "-0.00"
        return Point2D(x=self.ix * grid + 0.0, y=self.iy * grid + 0.0)

    def token(self) -> str:
        return f"{self.ix},{self.iy}"


def normalize(point: Point2D, grid: float = 0.25) -> PointKey:
    """Snap a point to the nearest grid multiple."""
    return PointKey(round(point.x / grid), round(point.y / grid))


def orient(
    start: Point2D, end: Point2D, grid: float = 0.25
) -> tuple[Point2D, Point2D]:
    """Order a segment's endpoints along its dominant axis.

    A→B and B→A come back in the same order.
    """
    a, b = normalize(start, grid), normalize(end, grid)
    if abs(b.ix - a.ix) >= abs(b.iy - a.iy):
        swap = (b.ix, b.iy) < (a.ix, a.iy)
    else:
        swap = (b.iy, b.ix) < (a.iy, a.ix)
    return (end, start) if swap else (start, end)


class PointStore:
    """Issues sequential point ids, one per distinct snapped coordinate.

    Two points share an id when both snapped coordinate deltas are below
    ``tolerance``. With the default ``tolerance == grid`` that reduces to
    equal grid keys. A tolerance wider than the grid also merges
    neighbouring grid cells; the earliest inserted point wins.
    """

    def __init__(self, grid: float = 0.25, tolerance: float | None = None):
        tolerance = grid if tolerance is None else tolerance
        if grid <= 0:
            raise PreconditionViolation("Grid must be positive")
        if grid > tolerance:
            raise PreconditionViolation(
                f"Grid ({grid}) must not exceed tolerance ({tolerance})"
            )
        self.grid = grid
        self.tolerance = tolerance
        # Neighbouring grid steps still within tolerance
        reach = 0
        while (reach + 1) * grid < tolerance - 1e-12:
            reach += 1
        self._reach = reach
        self._ids: dict[PointKey, str] = {}
        self._next = 1
        self.created = 0
        self.reused = 0

    def __len__(self) -> int:
        return len(self._ids)

    def reset(self) -> None:
        """Forget all points. The next id issued is "1" again."""
        self._ids.clear()
        self._next = 1
        self.created = 0
        self.reused = 0

    def lookup(self, point: Point2D | None) -> str | None:
        """Id for ``point`` if one was issued, without creating it."""
        if point is None:
            return None
        return self._find(normalize(point, self.grid))

    def get_or_create_id(self, point: Point2D | None) -> str:
        """Id for ``point``, issuing a new one when nothing matches.

        ``None`` maps to the reserved id "0" and is never stored.
        """
        if point is None:
            return NULL_POINT_ID
        key = normalize(point, self.grid)
        found = self._find(key)
        if found is not None:
            self.reused += 1
            return found
        point_id = str(self._next)
        self._next += 1
        self._ids[key] = point_id
        self.created += 1
        return point_id

    def export(self) -> Iterator[tuple[str, Point2D]]:
        """(id, snapped point) pairs in insertion order."""
        for key, point_id in self._ids.items():
            yield point_id, key.to_point(self.grid)

    def _find(self, key: PointKey) -> str | None:
        found = self._ids.get(key)
        if found is not None or self._reach == 0:
            return found
        best: str | None = None
        for dx in range(-self._reach, self._reach + 1):
            for dy in range(-self._reach, self._reach + 1):
                candidate = self._ids.get(PointKey(key.ix + dx, key.iy + dy))
                if candidate is not None and (best is None or int(candidate) < int(best)):
                    best = candidate
        return best


def collect_points(model: StructuralModel, store: PointStore) -> None:
    """Register every element vertex with the store.

    Order is fixed (walls, floors, openings, beams, columns, braces) so the
    same model always yields the same point numbering.
    """
    elements = model.elements
    for area_list in (elements.walls, elements.floors, elements.openings):
        for area in area_list:
            for point in area.points or []:
                store.get_or_create_id(point)
    for line_list in (elements.beams, elements.columns, elements.braces):
        for line in line_list:
            if line.start is None or line.end is None:
                continue
            store.get_or_create_id(line.start)
            # Columns are written at their plan location only
            if line_list is not elements.columns:
                store.get_or_create_id(line.end)
    logger.debug(
        "Collected %d points (%d created, %d reused)",
        len(store), store.created, store.reused,
    )


def points_section(store: PointStore) -> str:
    """Render the POINT COORDINATES section."""
    lines = [
        f'  POINT  "{point_id}"  {point.x:.2f}  {point.y:.2f}'
        for point_id, point in store.export()
    ]
    return render(POINTS_SECTION, "\n".join(lines))
