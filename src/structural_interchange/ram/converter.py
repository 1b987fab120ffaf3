"""Conversions between the canonical model and a RAM model.

RamImporter writes a canonical model into a new RAM model: floor types,
then stories (which need floor types), then surface-load property sets.
RamExporter reads a RAM model back into canonical floor types, levels,
frame properties and materials.

Both return a ConversionResult. The RAM model is saved and closed on
every exit path.
"""

from __future__ import annotations

import logging

from structural_interchange.config import ConversionSettings
from structural_interchange.errors import ExternalSystemFailure, PreconditionViolation
from structural_interchange.models.layout import FloorType
from structural_interchange.models.model import StructuralModel
from structural_interchange.models.properties import FrameProperties, Material
from structural_interchange.outcomes import (
    ConversionResult,
    ConversionSummary,
    ElementOutcome,
    Outcome,
)
from structural_interchange.ram.catalog import (
    RamDatabase,
    RamModel,
    RamModelManager,
    iterate,
    native_calls,
)
from structural_interchange.ram.reconciler import (
    ELEVATION_TOLERANCE,
    GROUND_FLOOR_TYPE_KEY,
    CrossSystemIdTable,
    IdentifierReconciler,
    LevelReconciler,
    correlate,
    ground_floor_type,
)
from structural_interchange.ram.units import to_inches

logger = logging.getLogger(__name__)


class RamImporter:
    """Canonical model → RAM model file."""

    def __init__(self, database: RamDatabase | None, settings: ConversionSettings | None = None):
        self.manager = RamModelManager(database)
        self.settings = settings or ConversionSettings()

    def convert(self, model: StructuralModel | None, path: str) -> ConversionResult:
        if model is None:
            raise PreconditionViolation("No model to import into RAM")

        summary = ConversionSummary()
        try:
            with self.manager.session(path, create=True) as ram, native_calls(path):
                floor_types = self._floor_types(model, ram, summary)
                self._stories(model, ram, floor_types, summary)
                self._surface_loads(model, ram, summary)
        except ExternalSystemFailure as e:
            logger.exception("RAM import failed")
            return ConversionResult(False, f"RAM import failed: {e}", summary)

        message = summary.message()
        logger.info(message)
        return ConversionResult(True, message, summary)

    def _floor_types(
        self, model: StructuralModel, ram: RamModel, summary: ConversionSummary
    ) -> CrossSystemIdTable:
        existing = {ft.label.lower() for ft in iterate(ram.floor_types) if ft.label}
        added = 0
        for floor_type in model.layout.floor_types:
            if floor_type.name.lower() in existing or floor_type.name.lower() == "ground":
                continue
            try:
                ram.floor_types.add(floor_type.name)
                added += 1
            except Exception:
                logger.exception("Could not add floor type %r", floor_type.name)
        summary.add_records("floor types", added)
        return correlate(
            "floor type", model.layout.floor_types, iterate(ram.floor_types)
        ).freeze()

    def _stories(
        self,
        model: StructuralModel,
        ram: RamModel,
        floor_types: CrossSystemIdTable,
        summary: ConversionSummary,
    ) -> None:
        unit = model.metadata.units.length
        levels = model.layout.sorted_levels()
        first = next(iterate(ram.floor_types), None)
        fallback = first.uid if first is not None else None
        previous = 0.0
        added = 0
        for level in levels:
            elevation = to_inches(level.elevation, unit)
            height = elevation - previous
            if elevation <= ELEVATION_TOLERANCE or not level.name:
                # RAM models the ground implicitly
                previous = max(previous, elevation)
                continue
            previous = elevation
            type_uid = (
                floor_types.native_id_for(level.floor_type_id)
                if level.floor_type_id
                else None
            )
            if type_uid is None and fallback is not None:
                type_uid = fallback
                summary.add_warning(
                    f"level {level.name!r} has no mapped floor type; first RAM floor type used"
                )
            if type_uid is None:
                summary.add_outcomes([ElementOutcome(
                    "level", level.id, Outcome.SKIPPED_MISSING_PROPERTY, "no RAM floor type"
                )])
                continue
            try:
                ram.stories.add(type_uid, f"Story {added + 1}", height)
            except Exception:
                logger.exception("Could not add story for level %r", level.name)
                continue
            added += 1
            summary.add_outcomes([ElementOutcome("level", level.id, Outcome.EXPORTED)])
        summary.add_records("stories", added)

    def _surface_loads(
        self, model: StructuralModel, ram: RamModel, summary: ConversionSummary
    ) -> None:
        factor = self.settings.surface_load_factor
        added = 0
        for load in model.loads.surface_loads:
            try:
                load_set = ram.surface_load_sets.add(load.name or load.id)
                load_set.dead_load = load.dead_value * factor
                load_set.live_load = load.live_value * factor
            except Exception:
                logger.exception("Could not add surface load %r", load.name)
                continue
            added += 1
        summary.add_records("surface loads", added)

        known = {load.id for load in model.loads.surface_loads}
        for floor in model.elements.floors:
            if floor.surface_load_id and floor.surface_load_id not in known:
                summary.add_warning(
                    f"floor {floor.id} references unknown surface load {floor.surface_load_id!r}"
                )


class RamExporter:
    """RAM model file → canonical model."""

    def __init__(self, database: RamDatabase | None, settings: ConversionSettings | None = None):
        self.manager = RamModelManager(database)
        self.settings = settings or ConversionSettings()
        self.reconciler: IdentifierReconciler | None = None

    def convert(self, path: str, model: StructuralModel | None = None) -> tuple[ConversionResult, StructuralModel]:
        """Read ``path`` into ``model`` (a new one when None)."""
        model = model or StructuralModel()
        summary = ConversionSummary()
        try:
            with self.manager.session(path, save=False) as ram, native_calls(path):
                self.reconciler = self._read(ram, model, summary)
        except ExternalSystemFailure as e:
            logger.exception("RAM export failed")
            return ConversionResult(False, f"RAM export failed: {e}", summary), model

        message = summary.message()
        logger.info(message)
        return ConversionResult(True, message, summary), model

    def _read(
        self, ram: RamModel, model: StructuralModel, summary: ConversionSummary
    ) -> IdentifierReconciler:
        reconciler = IdentifierReconciler()

        for ram_type in iterate(ram.floor_types):
            floor_type = FloorType(
                name=ram_type.label, description=f"RAM floor type {ram_type.uid}"
            )
            model.layout.floor_types.append(floor_type)
            reconciler.floor_types.add(ram_type.uid, floor_type.id)
        if model.layout.floor_types:
            reconciler.floor_types.default = model.layout.floor_types[0].id
        if GROUND_FLOOR_TYPE_KEY not in reconciler.floor_types:
            ground = ground_floor_type()
            model.layout.floor_types.append(ground)
            reconciler.floor_types.add(GROUND_FLOOR_TYPE_KEY, ground.id)
        summary.add_records("floor types", len(model.layout.floor_types))

        levels = LevelReconciler(reconciler.floor_types, model.metadata.units.length)
        for story in iterate(ram.stories):
            entry = levels.add_story(story)
            if entry.used_default_floor_type:
                summary.add_warning(
                    f"story {story.label!r} has no mapped floor type; default used"
                )
        model.layout.levels = levels.finalize()
        for entry in levels.entries:
            if entry.story_uid is not None:
                reconciler.levels.add(entry.story_uid, entry.level.id)
        summary.add_records("levels", len(model.layout.levels))

        for section in iterate(ram.frame_sections):
            props = FrameProperties(name=section.label)
            model.properties.frame_properties.append(props)
            reconciler.frame_properties.add(section.uid, props.id)
        for ram_material in iterate(ram.materials):
            material = Material(name=ram_material.label)
            model.properties.materials.append(material)
            reconciler.materials.add(ram_material.uid, material.id)
        if model.properties.frame_properties:
            reconciler.frame_properties.default = model.properties.frame_properties[0].id
        summary.add_records("frame properties", len(model.properties.frame_properties))
        summary.add_records("materials", len(model.properties.materials))
        return reconciler.freeze()
