"""Element group coordinators.

The area group runs walls, floors and openings; the line group runs
columns, beams and braces. Each kind is a connectivity builder paired
with an assignment builder. Kinds run in declared order, connectivity
first, so shared points are registered before later kinds reuse them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from structural_interchange.e2k import connectivity as conn
from structural_interchange.e2k import assignments as assign
from structural_interchange.e2k.points import PointStore
from structural_interchange.e2k.sections import render
from structural_interchange.e2k.stories import StoryResolver
from structural_interchange.models.model import StructuralModel
from structural_interchange.outcomes import ElementOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementKind:
    """One element kind: where its elements and catalogs live in the model."""

    name: str
    plural: str
    connectivity: type
    assignment: type
    elements: Callable[[StructuralModel], list]
    properties: Callable[[StructuralModel], list]
    parents: Callable[[StructuralModel], list] = lambda model: []


WALL = ElementKind(
    "wall", "walls",
    conn.WallConnectivityBuilder, assign.WallAssignmentBuilder,
    lambda m: m.elements.walls,
    lambda m: m.properties.wall_properties,
)
FLOOR = ElementKind(
    "floor", "floors",
    conn.FloorConnectivityBuilder, assign.FloorAssignmentBuilder,
    lambda m: m.elements.floors,
    lambda m: m.properties.floor_properties,
    lambda m: m.properties.diaphragms,
)
OPENING = ElementKind(
    "opening", "openings",
    conn.OpeningConnectivityBuilder, assign.OpeningAssignmentBuilder,
    lambda m: m.elements.openings,
    lambda m: [],
    lambda m: [*m.elements.floors, *m.elements.walls],
)
COLUMN = ElementKind(
    "column", "columns",
    conn.ColumnConnectivityBuilder, assign.ColumnAssignmentBuilder,
    lambda m: m.elements.columns,
    lambda m: m.properties.frame_properties,
)
BEAM = ElementKind(
    "beam", "beams",
    conn.BeamConnectivityBuilder, assign.BeamAssignmentBuilder,
    lambda m: m.elements.beams,
    lambda m: m.properties.frame_properties,
)
BRACE = ElementKind(
    "brace", "braces",
    conn.BraceConnectivityBuilder, assign.BraceAssignmentBuilder,
    lambda m: m.elements.braces,
    lambda m: m.properties.frame_properties,
)

AREA_KINDS: tuple[ElementKind, ...] = (WALL, FLOOR, OPENING)
LINE_KINDS: tuple[ElementKind, ...] = (COLUMN, BEAM, BRACE)


@dataclass
class GroupOutput:
    """Rendered sections plus bookkeeping from one group run."""

    sections: dict[str, str] = field(default_factory=dict)
    record_counts: dict[str, int] = field(default_factory=dict)
    outcomes: list[ElementOutcome] = field(default_factory=list)
    id_mappings: dict[str, dict[str, str]] = field(default_factory=dict)


class _ElementGroup:
    kinds: tuple[ElementKind, ...] = ()
    connectivity_section = ""
    assignment_section = ""

    def __init__(self, store: PointStore, resolver: StoryResolver):
        self.store = store
        self.resolver = resolver

    def convert(self, model: StructuralModel) -> GroupOutput:
        out = GroupOutput()
        connectivity_lines: list[str] = []
        assignment_lines: list[str] = []
        levels = model.layout.levels

        for kind in self.kinds:
            builder = kind.connectivity(self.store)
            builder.set_elements(kind.elements(model))
            records = builder.export_connectivities()
            mapping = builder.id_mapping()
            connectivity_lines.extend(r.line for r in records)
            out.id_mappings[kind.name] = mapping
            out.record_counts[kind.plural] = len(records)

            assigner = kind.assignment(self.resolver)
            assigner.set_data(
                kind.elements(model), levels, kind.properties(model), kind.parents(model)
            )
            assigned = assigner.export_assignments(mapping)
            assignment_lines.extend(r.line for r in assigned)
            out.outcomes.extend(assigner.outcomes)
            logger.debug(
                "%s: %d records, %d assignments", kind.plural, len(records), len(assigned)
            )

        out.sections[self.connectivity_section] = render(
            self.connectivity_section, "\n".join(connectivity_lines)
        )
        out.sections[self.assignment_section] = render(
            self.assignment_section, "\n".join(assignment_lines)
        )
        return out


class AreaElementGroup(_ElementGroup):
    kinds = AREA_KINDS
    connectivity_section = "AREA CONNECTIVITIES"
    assignment_section = "AREA ASSIGNS"


class LineElementGroup(_ElementGroup):
    kinds = LINE_KINDS
    connectivity_section = "LINE CONNECTIVITIES"
    assignment_section = "LINE ASSIGNS"
