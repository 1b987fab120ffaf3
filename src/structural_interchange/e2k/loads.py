"""LOAD PATTERNS and LOAD CASES sections.

When the model has no load definitions a default set is written: self
weight, live, superimposed dead and two seismic patterns. Seismic X and
Y are added when a custom list defines only one of them, unless a
non-seismic definition already uses the name.
"""

from __future__ import annotations

import logging

from structural_interchange.e2k.sections import render
from structural_interchange.e2k.stories import BASE_STORY
from structural_interchange.models.loads import LoadDefinition, LoadType

logger = logging.getLogger(__name__)

LOAD_PATTERNS = "LOAD PATTERNS"
LOAD_CASES = "LOAD CASES"

DEFAULT_PATTERNS: tuple[LoadDefinition, ...] = (
    LoadDefinition(id="LD-default-sw", name="SW", type=LoadType.DEAD, self_weight=1),
    LoadDefinition(id="LD-default-live", name="LIVE", type=LoadType.LIVE),
    LoadDefinition(id="LD-default-sdl", name="SDL", type=LoadType.DEAD),
    LoadDefinition(id="LD-default-eqx", name="EQX", type=LoadType.SEISMIC),
    LoadDefinition(id="LD-default-eqy", name="EQY", type=LoadType.SEISMIC),
)

# Equivalent-lateral-force parameters written for the default seismic patterns
SEISMIC_PARAMETERS = (
    'PERIODTYPE "PROGCALC" CTTYPE 3 R 6 OMEGA 2.5 CD 5.5 '
    'I 1 SITECLASS "E" Ss 1.5 S1 0.6 TL 12'
)
SEISMIC_DIRECTIONS = {"EQX": "X X+ECC X-ECC", "EQY": "Y Y+ECC Y-ECC"}
SEISMIC_ALIASES = {"EQX": ("eqx", "eq-x"), "EQY": ("eqy", "eq-y")}

E2K_LOAD_TYPES = {
    LoadType.DEAD: "Dead",
    LoadType.LIVE: "Live",
    LoadType.WIND: "Wind",
    LoadType.SNOW: "Snow",
    LoadType.SEISMIC: "Seismic",
}


def e2k_load_type(load_type: LoadType) -> str:
    return E2K_LOAD_TYPES.get(load_type, "Other")


def analysis_type(load_type: LoadType) -> str:
    return "Response Spectrum" if load_type is LoadType.SEISMIC else "Linear Static"


def missing_seismic(definitions: list[LoadDefinition]) -> list[str]:
    """Default seismic pattern names not covered by a seismic definition.

    A name already taken by a definition of another type is not added
    again; E2K pattern names must be unique.
    """
    seismic = {
        d.name.lower() for d in definitions if d.type is LoadType.SEISMIC and d.name
    }
    taken = {d.name.lower() for d in definitions if d.name}
    missing = []
    for name, aliases in SEISMIC_ALIASES.items():
        if seismic.intersection(aliases):
            continue
        if taken.intersection(aliases):
            logger.warning(
                "Load pattern %r is not seismic; default seismic pattern %s not added",
                next(d.name for d in definitions if d.name and d.name.lower() in aliases),
                name,
            )
            continue
        missing.append(name)
    return missing


class LoadPatternBuilder:
    """Writes LOADPATTERN lines plus SEISMIC auto-load lines for EQX/EQY."""

    def __init__(self, definitions: list[LoadDefinition] | None, top_story: str | None):
        self.definitions = list(definitions or [])
        self.top_story = top_story or BASE_STORY

    def pattern_names(self) -> list[str]:
        if not self.definitions:
            return [d.name for d in DEFAULT_PATTERNS]
        return [d.name for d in self.definitions] + missing_seismic(self.definitions)

    def build(self) -> str:
        lines: list[str] = []
        if not self.definitions:
            lines.extend(self._pattern(d) for d in DEFAULT_PATTERNS)
            added = list(SEISMIC_DIRECTIONS)
        else:
            lines.extend(self._pattern(d) for d in self.definitions)
            added = missing_seismic(self.definitions)
            lines.extend(
                self._pattern(LoadDefinition(name=name, type=LoadType.SEISMIC))
                for name in added
            )
        lines.extend(self._seismic(name) for name in added)
        return render(LOAD_PATTERNS, "\n".join(lines))

    @staticmethod
    def _pattern(definition: LoadDefinition) -> str:
        return (
            f'  LOADPATTERN "{definition.name}" TYPE "{e2k_load_type(definition.type)}" '
            f"SELFWEIGHT {definition.self_weight:g}"
        )

    def _seismic(self, name: str) -> str:
        return (
            f'  SEISMIC "{name}" "ASCE 7-16" DIR "{SEISMIC_DIRECTIONS[name]}" ECC 0.05 '
            f'TOPSTORY "{self.top_story}" BOTTOMSTORY "{BASE_STORY}" {SEISMIC_PARAMETERS}'
        )


class LoadCaseBuilder:
    """Writes the MODAL case and one case per load pattern."""

    def __init__(self, definitions: list[LoadDefinition] | None):
        self.definitions = list(definitions or [])

    def build(self) -> str:
        lines = [
            '  LOADCASE "MODAL" TYPE "Modal - Eigen" INITCOND "PRESET"',
            '  LOADCASE "MODAL" MAXMODES 12 MINMODES 1 EIGENSHIFTFREQ 0 '
            "EIGENCUTOFF 0 EIGENTOL 1E-09",
        ]
        if not self.definitions:
            cases = [(d.name, "Linear Static") for d in DEFAULT_PATTERNS]
        else:
            cases = [(d.name, analysis_type(d.type)) for d in self.definitions]
            cases += [(name, "Linear Static") for name in missing_seismic(self.definitions)]
        for name, kind in cases:
            lines.append(f'  LOADCASE "{name}" TYPE "{kind}" INITCOND "PRESET"')
            lines.append(f'  LOADCASE "{name}" LOADPAT "{name}" SF 1')
        return render(LOAD_CASES, "\n".join(lines))
