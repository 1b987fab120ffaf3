"""Cross-system identifier reconciliation between RAM and the canonical model.

RAM keys floor types, stories, sections and materials by integer uid;
the canonical model uses generated string ids. Neither side knows the
other's keys, so entities are correlated by name (and, for levels, by
elevation first). The resulting tables are built once per conversion
and frozen before use.

RAM has no story at the ground: the canonical ground level and its floor
type are synthesized and registered under GROUND_FLOOR_TYPE_KEY.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from structural_interchange.e2k.stories import strip_story_prefix
from structural_interchange.errors import PreconditionViolation
from structural_interchange.models.layout import FloorType, Level
from structural_interchange.models.metadata import LengthUnit
from structural_interchange.ram.catalog import RamModel, RamStory, iterate
from structural_interchange.ram.units import from_inches

logger = logging.getLogger(__name__)

# RAM uids are integers, so this key never collides with a real floor type
GROUND_FLOOR_TYPE_KEY = "ground"
GROUND_LEVEL_NAME = "0"
ELEVATION_TOLERANCE = 0.01


class CrossSystemIdTable:
    """Bidirectional native key ↔ canonical id table for one category.

    ``default`` is the canonical id callers fall back to when a native key
    is unmapped. The table is read-only once frozen.
    """

    def __init__(self, category: str, default: str | None = None):
        self.category = category
        self.default = default
        self._to_canonical: dict[Any, str] = {}
        self._to_native: dict[str, Any] = {}
        self._frozen = False

    def __len__(self) -> int:
        return len(self._to_canonical)

    def __contains__(self, native_key: Any) -> bool:
        return native_key in self._to_canonical

    def add(self, native_key: Any, canonical_id: str) -> None:
        if self._frozen:
            raise PreconditionViolation(f"{self.category} table is frozen")
        self._to_canonical[native_key] = canonical_id
        self._to_native.setdefault(canonical_id, native_key)

    def freeze(self) -> CrossSystemIdTable:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def canonical_id_for(self, native_key: Any) -> str | None:
        return self._to_canonical.get(native_key)

    def native_id_for(self, canonical_id: str) -> Any | None:
        return self._to_native.get(canonical_id)

    def canonical_or_default(self, native_key: Any) -> tuple[str | None, bool]:
        """Mapped id, or the default. The flag is True when the default was used."""
        found = self._to_canonical.get(native_key)
        if found is not None:
            return found, False
        if self.default is not None:
            logger.warning(
                "No %s mapping for %r; using default %s",
                self.category, native_key, self.default,
            )
        return self.default, True

    def items(self) -> list[tuple[Any, str]]:
        return list(self._to_canonical.items())


def correlate(
    category: str,
    canonical: Iterable,
    native: Iterable,
    *,
    name_of: Callable[[Any], str] = lambda e: e.name,
    label_of: Callable[[Any], str] = lambda n: n.label,
    key_of: Callable[[Any], Any] = lambda n: n.uid,
    normalize: Callable[[str], str] = lambda s: s,
    default: str | None = None,
) -> CrossSystemIdTable:
    """Build a table by matching native labels to canonical names.

    Matching is case-insensitive after ``normalize``. Native entries with no
    canonical counterpart stay unmapped.
    """
    by_name: dict[str, str] = {}
    for entity in canonical:
        name = name_of(entity)
        if name:
            by_name.setdefault(normalize(name).lower(), entity.id)
    table = CrossSystemIdTable(category, default)
    unmatched = 0
    for item in native:
        label = label_of(item)
        canonical_id = by_name.get(normalize(label).lower()) if label else None
        if canonical_id is None:
            unmatched += 1
            continue
        table.add(key_of(item), canonical_id)
    if unmatched:
        logger.debug("%d native %s entries left unmapped", unmatched, category)
    return table


# ── Level reconciliation ──────────────────────────────────────────────


class LevelState(Enum):
    UNRESOLVED = 0
    HAS_FLOOR_TYPE_MAPPING = 1
    HAS_ELEVATION_ASSIGNED = 2
    FINALIZED = 3


@dataclass
class LevelReconciliation:
    """A canonical level being built from a RAM story, and how far it got."""

    level: Level
    story_uid: int | None = None
    raw_elevation: float = 0.0  # inches
    state: LevelState = LevelState.UNRESOLVED
    used_default_floor_type: bool = False
    synthesized: bool = False

    def advance(self, to: LevelState) -> None:
        if to.value != self.state.value + 1:
            raise PreconditionViolation(
                f"Level {self.level.name!r} cannot go from {self.state.name} to {to.name}"
            )
        self.state = to


@dataclass
class LevelReconciler:
    """RAM stories → ordered canonical levels.

    Each story is walked through the level states in order: floor type,
    then elevation, then insertion into the ascending sequence. A ground
    level is synthesized when no level sits at elevation zero.
    """

    floor_types: CrossSystemIdTable
    length_unit: LengthUnit = LengthUnit.INCHES
    entries: list[LevelReconciliation] = field(default_factory=list)

    def add_story(self, story: RamStory) -> LevelReconciliation:
        entry = LevelReconciliation(
            Level(name=strip_story_prefix(story.label or "")),
            story_uid=story.uid,
            raw_elevation=story.elevation,
        )
        native_type = story.floor_type.uid if story.floor_type is not None else None
        entry.level.floor_type_id, entry.used_default_floor_type = (
            self.floor_types.canonical_or_default(native_type)
        )
        entry.advance(LevelState.HAS_FLOOR_TYPE_MAPPING)
        entry.level.elevation = from_inches(entry.raw_elevation, self.length_unit)
        entry.advance(LevelState.HAS_ELEVATION_ASSIGNED)
        self.entries.append(entry)
        return entry

    def finalize(self) -> list[Level]:
        """Synthesize the ground level if needed, sort, and mark all final."""
        if not any(abs(e.level.elevation) < ELEVATION_TOLERANCE for e in self.entries):
            ground = LevelReconciliation(Level(name=GROUND_LEVEL_NAME), synthesized=True)
            ground.advance(LevelState.HAS_FLOOR_TYPE_MAPPING)
            ground.advance(LevelState.HAS_ELEVATION_ASSIGNED)
            self.entries.append(ground)
            logger.info("Synthesized ground level %r", GROUND_LEVEL_NAME)

        ground_type = self.floor_types.canonical_id_for(GROUND_FLOOR_TYPE_KEY)
        for entry in self.entries:
            if abs(entry.level.elevation) < ELEVATION_TOLERANCE:
                entry.level.floor_type_id = ground_type or self.floor_types.default
                entry.used_default_floor_type = ground_type is None

        self.entries.sort(key=lambda e: e.level.elevation)
        for entry in self.entries:
            entry.advance(LevelState.FINALIZED)
        return [e.level for e in self.entries]


# ── Reconciler ────────────────────────────────────────────────────────


class IdentifierReconciler:
    """Lookup tables for one conversion between a canonical and a RAM model."""

    def __init__(self) -> None:
        self.floor_types = CrossSystemIdTable("floor type")
        self.levels = CrossSystemIdTable("level")
        self.frame_properties = CrossSystemIdTable("frame properties")
        self.materials = CrossSystemIdTable("material")

    @classmethod
    def build(cls, model, ram: RamModel) -> IdentifierReconciler:
        """Correlate an existing canonical model with an existing RAM model."""
        reconciler = cls()
        layout, props = model.layout, model.properties

        reconciler.floor_types = correlate(
            "floor type", layout.floor_types, iterate(ram.floor_types),
            default=layout.floor_types[0].id if layout.floor_types else None,
        )
        ground = next(
            (ft for ft in layout.floor_types if ft.name.lower() == "ground"), None
        )
        if ground is not None and GROUND_FLOOR_TYPE_KEY not in reconciler.floor_types:
            reconciler.floor_types.add(GROUND_FLOOR_TYPE_KEY, ground.id)

        reconciler.levels = CrossSystemIdTable("level")
        for story in iterate(ram.stories):
            level = reconciler.level_for_story(
                story, layout.levels, model.metadata.units.length
            )
            if level is not None:
                reconciler.levels.add(story.uid, level.id)

        reconciler.frame_properties = correlate(
            "frame properties", props.frame_properties, iterate(ram.frame_sections),
            default=props.frame_properties[0].id if props.frame_properties else None,
        )
        reconciler.materials = correlate(
            "material", props.materials, iterate(ram.materials),
            default=props.materials[0].id if props.materials else None,
        )
        return reconciler.freeze()

    def freeze(self) -> IdentifierReconciler:
        for table in (self.floor_types, self.levels, self.frame_properties, self.materials):
            table.freeze()
        return self

    # ── Lookups ───────────────────────────────────────────────────────

    @staticmethod
    def level_for_story(
        story: RamStory,
        levels: list[Level],
        length_unit: LengthUnit = LengthUnit.INCHES,
    ) -> Level | None:
        """Match by elevation first, then by name without the "Story" prefix."""
        elevation = from_inches(story.elevation, length_unit)
        for level in levels:
            if abs(level.elevation - elevation) < ELEVATION_TOLERANCE:
                return level
        wanted = strip_story_prefix(story.label or "").lower()
        return next(
            (lv for lv in levels if strip_story_prefix(lv.name).lower() == wanted),
            None,
        )

    def frame_property_for_section(self, section_uid: int) -> str | None:
        found, _ = self.frame_properties.canonical_or_default(section_uid)
        return found

    @staticmethod
    def ground_level(levels: list[Level]) -> Level | None:
        """The zero-elevation level, a level named like ground, or the lowest."""
        if not levels:
            return None
        for level in levels:
            if abs(level.elevation) < ELEVATION_TOLERANCE:
                return level
        for level in levels:
            name = level.name.lower()
            if "ground" in name or "base" in name or name == GROUND_LEVEL_NAME:
                return level
        return min(levels, key=lambda lv: lv.elevation)


def ground_floor_type() -> FloorType:
    return FloorType(name="Ground", description="Ground floor (no RAM floor type)")
