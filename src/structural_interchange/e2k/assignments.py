"""Assignment builders: bind exported shapes to stories and sections.

Assignment runs after connectivity. Each builder walks its source
elements, looks up the label connectivity gave them, then resolves
level, story and section in that order. The first lookup that fails
skips the element and records why; the rest of the batch carries on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from structural_interchange.e2k.stories import StoryResolver
from structural_interchange.errors import PreconditionViolation, ResolutionMiss
from structural_interchange.models.elements import Beam, Brace, Column, Floor, Opening, Wall
from structural_interchange.models.layout import Level
from structural_interchange.models.properties import Diaphragm, FrameModifiers
from structural_interchange.outcomes import ElementOutcome, Outcome

logger = logging.getLogger(__name__)

DEFAULT_DIAPHRAGM = "D1"


@dataclass
class AssignmentRecord:
    """One AREAASSIGN / LINEASSIGN statement."""

    emitted_id: str
    story: str
    property_name: str | None = None
    flags: dict[str, str] = field(default_factory=dict)
    line: str = ""


class AssignmentSource(Protocol):
    kind: str
    outcomes: list[ElementOutcome]

    def set_data(self, elements, levels, properties, parents=None) -> None: ...

    def export_assignments(self, id_mapping: dict[str, str]) -> list[AssignmentRecord]: ...


def _fmt(value: float) -> str:
    return f"{value:g}"


def _modifier_tokens(modifiers: FrameModifiers | None) -> str:
    if modifiers is None:
        return ""
    return "".join(f" {name} {_fmt(value)}" for name, value in modifiers.tokens())


class _AssignmentBuilder:
    """Per-element resolution loop shared by all kinds."""

    kind = ""
    # Replacement for '"' in section names, matching how sections are written
    inch_marker = " inch"

    def __init__(self, resolver: StoryResolver | None):
        if resolver is None:
            raise PreconditionViolation(
                f"{type(self).__name__} requires a story resolver"
            )
        self.resolver = resolver
        self.elements: list = []
        self.outcomes: list[ElementOutcome] = []
        self._levels: dict[str, Level] = {}
        self._properties: dict[str, object] = {}
        self._parents: dict[str, object] = {}

    def set_data(self, elements, levels, properties, parents=None) -> None:
        self.elements = list(elements or [])
        self._levels = {lv.id: lv for lv in levels or []}
        self._properties = {p.id: p for p in properties or []}
        self._parents = {p.id: p for p in parents or []}

    def export_assignments(self, id_mapping: dict[str, str]) -> list[AssignmentRecord]:
        self.outcomes = []
        records: list[AssignmentRecord] = []
        for element in self.elements:
            try:
                emitted_id = id_mapping.get(element.id) if id_mapping else None
                if emitted_id is None:
                    raise ResolutionMiss("mapping", "no connectivity was exported")
                new = self._assign(element, emitted_id)
            except ResolutionMiss as miss:
                logger.debug("Skipping %s %s: %s", self.kind, element.id, miss.message)
                self.outcomes.append(
                    ElementOutcome(
                        self.kind, element.id, Outcome.for_miss(miss.reason), miss.message
                    )
                )
                continue
            records.extend(new)
            self.outcomes.append(ElementOutcome(self.kind, element.id, Outcome.EXPORTED))
        return records

    def export_text(self, id_mapping: dict[str, str]) -> str:
        return "".join(r.line + "\n" for r in self.export_assignments(id_mapping))

    def _assign(self, element, emitted_id: str) -> list[AssignmentRecord]:
        raise NotImplementedError

    # ── Resolution steps ──────────────────────────────────────────────

    def _level(self, level_id: str | None) -> Level:
        level = self._levels.get(level_id) if level_id else None
        if level is None:
            raise ResolutionMiss("level", f"level {level_id!r} not found")
        return level

    def _story(self, level: Level) -> str:
        story = self.resolver.resolve(level)
        if not story:
            raise ResolutionMiss("story", f"no story matches level {level.name!r}")
        return story

    def _property(self, props_id: str | None):
        props = self._properties.get(props_id) if props_id else None
        if props is None:
            raise ResolutionMiss("property", f"properties {props_id!r} not found")
        return props

    def _section_name(self, props) -> str:
        return props.name.replace('"', self.inch_marker)

    def _spanned_levels(self, base_id: str | None, top_id: str | None) -> list[Level]:
        """Levels above the base up to and including the top, top-down."""
        base = self._level(base_id)
        top = self._level(top_id)
        spanned = [
            lv
            for lv in self._levels.values()
            if base.elevation < lv.elevation <= top.elevation
        ]
        if not spanned:
            raise ResolutionMiss("level", f"no story between {base.name!r} and {top.name!r}")
        return sorted(spanned, key=lambda lv: lv.elevation, reverse=True)


# ── Area kinds ────────────────────────────────────────────────────────


class FloorAssignmentBuilder(_AssignmentBuilder):
    """``parents`` carries the diaphragm catalog for floors."""

    kind = "floor"

    def _assign(self, element: Floor, emitted_id: str) -> list[AssignmentRecord]:
        story = self._story(self._level(element.level_id))
        section = self._section_name(self._property(element.floor_properties_id))
        diaphragm = self._diaphragm(element.diaphragm_id)
        line = (
            f'  AREAASSIGN "{emitted_id}" "{story}" SECTION "{section}" '
            f'DIAPHRAGM "{diaphragm}" AUTOMESH "YES"'
        )
        return [
            AssignmentRecord(
                emitted_id, story, section, {"DIAPHRAGM": diaphragm}, line
            )
        ]

    def _diaphragm(self, diaphragm_id: str | None) -> str:
        found = self._parents.get(diaphragm_id) if diaphragm_id else None
        if isinstance(found, Diaphragm):
            return found.name
        return DEFAULT_DIAPHRAGM


class WallAssignmentBuilder(_AssignmentBuilder):
    """One assignment per story the wall spans."""

    kind = "wall"

    def _assign(self, element: Wall, emitted_id: str) -> list[AssignmentRecord]:
        levels = self._spanned_levels(element.base_level_id, element.top_level_id)
        stories = [self._story(lv) for lv in levels]
        section = self._section_name(self._property(element.properties_id))
        pier = f' PIER "{element.pier_spandrel}"' if element.pier_spandrel else ""
        flags = {"PIER": element.pier_spandrel} if element.pier_spandrel else {}
        return [
            AssignmentRecord(
                emitted_id,
                story,
                section,
                flags,
                f'  AREAASSIGN "{emitted_id}" "{story}" SECTION "{section}"{pier} AUTOMESH "YES"',
            )
            for story in stories
        ]


class OpeningAssignmentBuilder(_AssignmentBuilder):
    """Openings take their own level or inherit the pierced floor's / wall's.

    ``parents`` carries the floors and walls openings may reference.
    """

    kind = "opening"

    def _assign(self, element: Opening, emitted_id: str) -> list[AssignmentRecord]:
        level_id = element.level_id
        if level_id is None and element.parent_id is not None:
            parent = self._parents.get(element.parent_id)
            if parent is None:
                raise ResolutionMiss("level", f"parent {element.parent_id!r} not found")
            level_id = getattr(parent, "level_id", None) or getattr(
                parent, "top_level_id", None
            )
        story = self._story(self._level(level_id))
        line = f'  AREAASSIGN "{emitted_id}" "{story}" OPENING "Yes"'
        return [AssignmentRecord(emitted_id, story, None, {"OPENING": "Yes"}, line)]


# ── Line kinds ────────────────────────────────────────────────────────


class _FrameAssignmentBuilder(_AssignmentBuilder):
    inch_marker = "inch"

    def _modifiers(self, element, props) -> FrameModifiers | None:
        return element.modifiers if element.modifiers is not None else props.modifiers


class BeamAssignmentBuilder(_FrameAssignmentBuilder):
    """Joists get moment releases at both ends."""

    kind = "beam"

    def _assign(self, element: Beam, emitted_id: str) -> list[AssignmentRecord]:
        story = self._story(self._level(element.level_id))
        props = self._property(element.frame_properties_id)
        section = self._section_name(props)
        flags = {"CARDINALPT": "8"}
        release = ""
        if element.is_joist:
            flags["RELEASE"] = "TI M2I M2J M3I M3J"
            release = ' RELEASE "TI M2I M2J M3I M3J"'
        line = (
            f'  LINEASSIGN "{emitted_id}" "{story}" SECTION "{section}"{release} CARDINALPT 8'
            f"{_modifier_tokens(self._modifiers(element, props))}"
            ' MAXSTASPC 24 AUTOMESH "YES" MESHATINTERSECTIONS "YES"'
        )
        return [AssignmentRecord(emitted_id, story, section, flags, line)]


class ColumnAssignmentBuilder(_FrameAssignmentBuilder):
    """One assignment per story the column passes through, top-down."""

    kind = "column"

    def _assign(self, element: Column, emitted_id: str) -> list[AssignmentRecord]:
        levels = self._spanned_levels(element.base_level_id, element.top_level_id)
        stories = [self._story(lv) for lv in levels]
        props = self._property(element.frame_properties_id)
        section = self._section_name(props)
        angle = f" ANG {_fmt(element.orientation)}" if abs(element.orientation) > 0.001 else ""
        tail = (
            f"{angle}{_modifier_tokens(self._modifiers(element, props))}"
            ' MINNUMSTA 3 AUTOMESH "YES" MESHATINTERSECTIONS "YES"'
        )
        flags = {"ANG": _fmt(element.orientation)} if angle else {}
        return [
            AssignmentRecord(
                emitted_id,
                story,
                section,
                dict(flags),
                f'  LINEASSIGN "{emitted_id}" "{story}" SECTION "{section}"{tail}',
            )
            for story in stories
        ]


class BraceAssignmentBuilder(_FrameAssignmentBuilder):
    """Braces are assigned at their top story with pinned ends."""

    kind = "brace"

    def _assign(self, element: Brace, emitted_id: str) -> list[AssignmentRecord]:
        story = self._story(self._level(element.top_level_id))
        props = self._property(element.frame_properties_id)
        section = self._section_name(props)
        line = (
            f'  LINEASSIGN "{emitted_id}" "{story}" SECTION "{section}" RELEASE "PINNED"'
            f"{_modifier_tokens(self._modifiers(element, props))}"
            ' MAXSTASPC 24 AUTOMESH "YES" MESHATINTERSECTIONS "YES"'
        )
        return [AssignmentRecord(emitted_id, story, section, {"RELEASE": "PINNED"}, line)]
