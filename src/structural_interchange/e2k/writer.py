"""Canonical model → E2K text.

One call to ``E2KExporter.convert`` is one conversion: it builds a fresh
PointStore, story catalog and id mappings, runs the line and area
groups, adds stories, grids and loads, merges any custom text and returns the
text together with a summary of what was written and what was skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from structural_interchange.config import ConversionSettings
from structural_interchange.e2k.elements import AreaElementGroup, LineElementGroup
from structural_interchange.e2k.grids import GRIDS_SECTION, grids_section
from structural_interchange.e2k.injector import E2KInjector
from structural_interchange.e2k.loads import (
    LOAD_CASES,
    LOAD_PATTERNS,
    LoadCaseBuilder,
    LoadPatternBuilder,
)
from structural_interchange.e2k.points import (
    POINTS_SECTION,
    PointStore,
    collect_points,
    points_section,
)
from structural_interchange.e2k.sections import join_sections
from structural_interchange.e2k.stories import StoryCatalog, make_resolver, stories_section
from structural_interchange.errors import PreconditionViolation
from structural_interchange.models.model import StructuralModel
from structural_interchange.outcomes import ConversionResult, ConversionSummary

logger = logging.getLogger(__name__)


class E2KExporter:
    """Exports a StructuralModel as E2K text.

    Args:
        settings: Tolerance, grid and story matching. Defaults apply when None.
        story_names: Valid story names to match levels against. When None
            they are derived from the model's levels.
    """

    def __init__(
        self,
        settings: ConversionSettings | None = None,
        story_names: list[str] | None = None,
    ):
        self.settings = settings or ConversionSettings()
        self.story_names = story_names

    def convert(
        self, model: StructuralModel | None, custom_text: str | None = None
    ) -> ConversionResult:
        if model is None:
            raise PreconditionViolation("No model to export")

        store = PointStore(self.settings.grid, self.settings.tolerance)
        collect_points(model, store)

        levels = model.layout.levels
        if self.story_names is not None:
            catalog = StoryCatalog.from_names(self.story_names)
        else:
            catalog = StoryCatalog.from_levels(levels)
        resolver = make_resolver(catalog, self.settings.story_match.value)

        summary = ConversionSummary()
        sections: dict[str, str] = {}

        for group in (LineElementGroup(store, resolver), AreaElementGroup(store, resolver)):
            out = group.convert(model)
            sections.update(out.sections)
            for kind, count in out.record_counts.items():
                summary.add_records(kind, count)
            summary.add_outcomes(out.outcomes)

        sections[POINTS_SECTION] = points_section(store)
        summary.record_counts["points"] = len(store)
        if levels:
            sections["STORIES - IN SEQUENCE FROM TOP"] = stories_section(levels)
            summary.add_records("stories", len(levels))
        if model.layout.grids:
            sections[GRIDS_SECTION] = grids_section(model.layout.grids)
            summary.add_records("grids", len(model.layout.grids))

        definitions = model.loads.definitions
        if definitions or self.settings.include_default_loads:
            patterns = LoadPatternBuilder(definitions, catalog.top)
            sections[LOAD_PATTERNS] = patterns.build()
            sections[LOAD_CASES] = LoadCaseBuilder(definitions).build()
            summary.add_records("load patterns", len(patterns.pattern_names()))

        text = join_sections(sections)
        if custom_text:
            text = E2KInjector(custom_text).inject(text)

        message = summary.message()
        logger.info(message)
        return ConversionResult(True, message, summary, text)

    def write(
        self,
        model: StructuralModel | None,
        path: str | Path,
        custom_text: str | None = None,
    ) -> ConversionResult:
        """Convert and write the text to ``path``. Creates parent dirs if needed."""
        result = self.convert(model, custom_text)
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(result.text)
        except OSError as e:
            logger.exception("Could not write %s", path)
            return ConversionResult(
                False, f"Could not write {path}: {e}", result.summary, result.text
            )
        return result
