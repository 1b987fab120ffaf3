"""GRIDS section: plan grid lines as one cartesian grid system.

A grid line running along Y (constant X) is written with ``DIR "X"`` at
its X coordinate; every other line is written with ``DIR "Y"`` at its
starting Y coordinate. Skewed lines are not representable and come out
as Y lines.
"""

from __future__ import annotations

from structural_interchange.e2k.sections import render
from structural_interchange.models.layout import Grid

GRIDS_SECTION = "GRIDS"
GRID_SYSTEM = "G1"
VERTICAL_TOLERANCE = 1e-6


def bubble_location(grid: Grid) -> str:
    if grid.start_bubble and grid.end_bubble:
        return "Both"
    if grid.start_bubble:
        return "Start"
    return "End"


def grid_line(grid: Grid) -> str:
    start, end = grid.start.to_2d(), grid.end.to_2d()
    if abs(end.x - start.x) < VERTICAL_TOLERANCE:
        direction, coord = "X", start.x
    else:
        direction, coord = "Y", start.y
    return (
        f'  GRID "{GRID_SYSTEM}"  LABEL "{grid.name}"  DIR "{direction}"  '
        f'COORD {coord:g}  VISIBLE "Yes"  BUBBLELOC "{bubble_location(grid)}"'
    )


def grids_section(grids: list[Grid]) -> str:
    """Render the GRIDS section, or "" when there are no grids."""
    if not grids:
        return ""
    lines = [f'  GRIDSYSTEM "{GRID_SYSTEM}"  TYPE "CARTESIAN"  BUBBLESIZE 60']
    lines.extend(grid_line(grid) for grid in grids)
    return render(GRIDS_SECTION, "\n".join(lines))
