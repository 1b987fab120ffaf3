"""E2K text → canonical model.

Reads the sections this package writes (stories, points, line and area
connectivities and assignments, load patterns) and rebuilds a
StructuralModel. Sections are referenced by name, so properties and
diaphragms are created on first use. Assignments that point at an
unknown shape or story are skipped and reported in the summary;
malformed records are skipped with a summary warning.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from structural_interchange.e2k.sections import split_sections
from structural_interchange.e2k.stories import BASE_STORY, strip_story_prefix
from structural_interchange.models.elements import Beam, Brace, Column, Floor, Opening, Wall
from structural_interchange.models.geometry import Point2D
from structural_interchange.models.layout import Level
from structural_interchange.models.loads import LoadDefinition, LoadType
from structural_interchange.models.model import StructuralModel
from structural_interchange.models.properties import (
    Diaphragm,
    FloorProperties,
    FrameProperties,
    WallProperties,
)
from structural_interchange.outcomes import ConversionSummary, ElementOutcome, Outcome

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r'"([^"]*)"|(\S+)')

LOAD_TYPES = {t.value.lower(): t for t in LoadType}


def tokenize(line: str) -> list[str]:
    """Split an E2K line into tokens; quoted strings lose their quotes."""
    return [q if q or bare == "" else bare for q, bare in TOKEN_RE.findall(line)]


def _options(tokens: list[str]) -> dict[str, str]:
    """KEY VALUE pairs following the leading fields of an assign line."""
    return dict(zip(tokens[::2], tokens[1::2]))


@dataclass
class _Shape:
    kind: str  # BEAM, COLUMN, BRACE, FLOOR, PANEL, AREA
    point_ids: list[str]
    seen: bool = False


@dataclass
class ParseResult:
    model: StructuralModel
    summary: ConversionSummary = field(default_factory=ConversionSummary)


class E2KParser:
    """Builds a StructuralModel from E2K text."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.model = StructuralModel()
        self.summary = ConversionSummary()
        self._points: dict[str, Point2D] = {}
        self._lines: dict[str, _Shape] = {}
        self._areas: dict[str, _Shape] = {}
        self._levels: dict[str, Level] = {}  # story name -> level
        self._frames: dict[str, FrameProperties] = {}
        self._slabs: dict[str, FloorProperties] = {}
        self._walls: dict[str, WallProperties] = {}
        self._diaphragms: dict[str, Diaphragm] = {}

    def parse(self, text: str) -> ParseResult:
        self._reset()
        sections = split_sections(text)
        self._parse_stories(sections.get("STORIES - IN SEQUENCE FROM TOP", ""))
        self._parse_points(sections.get("POINT COORDINATES", ""))
        self._parse_shapes(sections.get("LINE CONNECTIVITIES", ""), "LINE", self._lines)
        self._parse_shapes(sections.get("AREA CONNECTIVITIES", ""), "AREA", self._areas)
        self._parse_line_assigns(sections.get("LINE ASSIGNS", ""))
        self._parse_area_assigns(sections.get("AREA ASSIGNS", ""))
        self._parse_load_patterns(sections.get("LOAD PATTERNS", ""))
        self._report_unassigned()

        counts = self.model.element_counts()
        for kind in ("beams", "columns", "braces", "walls", "floors", "openings"):
            self.summary.add_records(kind, counts[kind])
        self.summary.add_records("levels", len(self.model.layout.levels))
        logger.info(self.summary.message())
        return ParseResult(self.model, self.summary)

    # ── Sections ──────────────────────────────────────────────────────

    def _records(self, section: str, keyword: str, min_tokens: int = 2):
        for raw in section.splitlines():
            tokens = tokenize(raw)
            if not tokens or tokens[0] != keyword:
                continue
            if len(tokens) < min_tokens:
                self._malformed(tokens)
                continue
            yield tokens

    def _parse_stories(self, section: str) -> None:
        stories: list[tuple[str, float]] = []
        base_elevation = 0.0
        for tokens in self._records(section, "STORY"):
            opts = _options(tokens[2:])
            try:
                if "ELEV" in opts:
                    base_elevation = float(opts["ELEV"])
                    stories.append((tokens[1], 0.0))
                else:
                    stories.append((tokens[1], float(opts.get("HEIGHT", 0.0))))
            except ValueError:
                self._malformed(tokens)
        # Listed top-down; the last entry is the base
        elevation = base_elevation
        for name, height in reversed(stories):
            elevation += height
            level_name = name if name == BASE_STORY else strip_story_prefix(name)
            level = Level(name=level_name, elevation=elevation)
            self._levels[name] = level
            self.model.layout.levels.append(level)

    def _parse_points(self, section: str) -> None:
        for tokens in self._records(section, "POINT", min_tokens=4):
            try:
                self._points[tokens[1]] = Point2D(x=float(tokens[2]), y=float(tokens[3]))
            except ValueError:
                self._malformed(tokens)

    def _parse_shapes(self, section: str, keyword: str, target: dict[str, _Shape]) -> None:
        min_tokens = 5 if keyword == "LINE" else 4
        for tokens in self._records(section, keyword, min_tokens):
            label, kind = tokens[1], tokens[2]
            if keyword == "LINE":
                point_ids = tokens[3:5]
            else:
                n = int(tokens[3]) if tokens[3].isdigit() else 0
                if n < 1 or len(tokens) < 4 + n:
                    self._malformed(tokens)
                    continue
                point_ids = tokens[4:4 + n]
                if kind == "PANEL" and n == 4 and point_ids[1] == point_ids[2]:
                    point_ids = point_ids[:2]
            target[label] = _Shape(kind, point_ids)

    def _parse_line_assigns(self, section: str) -> None:
        for tokens in self._records(section, "LINEASSIGN", min_tokens=3):
            label, story = tokens[1], tokens[2]
            opts = _options(tokens[3:])
            try:
                orientation = float(opts.get("ANG", 0.0))
            except ValueError:
                self._malformed(tokens)
                continue
            shape = self._lines.get(label)
            level = self._levels.get(story)
            if shape is None:
                self._skip(label, "line", Outcome.SKIPPED_MISSING_MAPPING)
                continue
            shape.seen = True
            if level is None:
                self._skip(label, shape.kind.lower(), Outcome.SKIPPED_MISSING_STORY, story)
                continue
            points = self._resolve(shape)
            if points is None:
                self._skip(label, shape.kind.lower(), Outcome.SKIPPED_MISSING_MAPPING)
                continue
            props = self._frame(opts.get("SECTION", "Default"))
            below = self._level_below(level)
            if shape.kind == "COLUMN":
                self.model.elements.columns.append(Column(
                    start=points[0], end=points[1],
                    base_level_id=below.id if below else None, top_level_id=level.id,
                    frame_properties_id=props.id,
                    orientation=orientation,
                ))
            elif shape.kind == "BRACE":
                self.model.elements.braces.append(Brace(
                    start=points[0], end=points[1],
                    base_level_id=below.id if below else None, top_level_id=level.id,
                    frame_properties_id=props.id,
                ))
            else:
                self.model.elements.beams.append(Beam(
                    start=points[0], end=points[1], level_id=level.id,
                    frame_properties_id=props.id,
                    is_joist="RELEASE" in opts,
                ))

    def _parse_area_assigns(self, section: str) -> None:
        for tokens in self._records(section, "AREAASSIGN", min_tokens=3):
            label, story = tokens[1], tokens[2]
            opts = _options(tokens[3:])
            shape = self._areas.get(label)
            level = self._levels.get(story)
            if shape is None:
                self._skip(label, "area", Outcome.SKIPPED_MISSING_MAPPING)
                continue
            shape.seen = True
            if level is None:
                self._skip(label, shape.kind.lower(), Outcome.SKIPPED_MISSING_STORY, story)
                continue
            points = self._resolve(shape)
            if points is None:
                self._skip(label, shape.kind.lower(), Outcome.SKIPPED_MISSING_MAPPING)
                continue
            if opts.get("OPENING", "").lower() == "yes":
                self.model.elements.openings.append(Opening(points=points, level_id=level.id))
            elif shape.kind == "PANEL":
                props = self._wall(opts.get("SECTION", "Default"))
                below = self._level_below(level)
                self.model.elements.walls.append(Wall(
                    points=points,
                    base_level_id=below.id if below else None, top_level_id=level.id,
                    properties_id=props.id, pier_spandrel=opts.get("PIER"),
                ))
            else:
                props = self._slab(opts.get("SECTION", "Default"))
                diaphragm = self._diaphragm(opts["DIAPHRAGM"]) if "DIAPHRAGM" in opts else None
                self.model.elements.floors.append(Floor(
                    points=points, level_id=level.id, floor_properties_id=props.id,
                    diaphragm_id=diaphragm.id if diaphragm else None,
                ))

    def _parse_load_patterns(self, section: str) -> None:
        for tokens in self._records(section, "LOADPATTERN"):
            opts = _options(tokens[2:])
            try:
                self_weight = float(opts.get("SELFWEIGHT", 0.0))
            except ValueError:
                self._malformed(tokens)
                continue
            self.model.loads.definitions.append(LoadDefinition(
                name=tokens[1],
                type=LOAD_TYPES.get(opts.get("TYPE", "").lower(), LoadType.OTHER),
                self_weight=self_weight,
            ))

    # ── Helpers ───────────────────────────────────────────────────────

    def _resolve(self, shape: _Shape) -> list[Point2D] | None:
        try:
            return [self._points[p] for p in shape.point_ids]
        except KeyError:
            return None

    def _level_below(self, level: Level) -> Level | None:
        below = [lv for lv in self.model.layout.levels if lv.elevation < level.elevation]
        return max(below, key=lambda lv: lv.elevation) if below else None

    def _malformed(self, tokens: list[str]) -> None:
        record = " ".join(tokens)
        logger.debug("Skipping malformed record: %s", record)
        self.summary.add_warning(f"malformed record skipped: {record}")

    def _skip(self, label: str, kind: str, outcome: Outcome, detail: str = "") -> None:
        logger.debug("Skipping %s %s: %s", kind, label, outcome.value)
        self.summary.add_outcomes([ElementOutcome(kind, label, outcome, detail)])

    def _report_unassigned(self) -> None:
        for label, shape in [*self._lines.items(), *self._areas.items()]:
            if not shape.seen:
                self._skip(label, shape.kind.lower(), Outcome.SKIPPED_MISSING_LEVEL)

    def _frame(self, name: str) -> FrameProperties:
        if name not in self._frames:
            self._frames[name] = FrameProperties(name=name)
            self.model.properties.frame_properties.append(self._frames[name])
        return self._frames[name]

    def _slab(self, name: str) -> FloorProperties:
        if name not in self._slabs:
            self._slabs[name] = FloorProperties(name=name)
            self.model.properties.floor_properties.append(self._slabs[name])
        return self._slabs[name]

    def _wall(self, name: str) -> WallProperties:
        if name not in self._walls:
            self._walls[name] = WallProperties(name=name)
            self.model.properties.wall_properties.append(self._walls[name])
        return self._walls[name]

    def _diaphragm(self, name: str) -> Diaphragm:
        if name not in self._diaphragms:
            self._diaphragms[name] = Diaphragm(name=name)
            self.model.properties.diaphragms.append(self._diaphragms[name])
        return self._diaphragms[name]
