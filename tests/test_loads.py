"""Tests for load pattern and load case generation."""

from structural_interchange.e2k.loads import (
    LoadCaseBuilder,
    LoadPatternBuilder,
    analysis_type,
    missing_seismic,
)
from structural_interchange.models import LoadDefinition, LoadType


def _patterns(text: str) -> list[str]:
    return [
        line.split('"')[1] for line in text.splitlines()
        if line.strip().startswith("LOADPATTERN")
    ]


class TestDefaultPatterns:
    def test_defaults_when_no_definitions(self):
        text = LoadPatternBuilder([], "Story3").build()
        assert _patterns(text) == ["SW", "LIVE", "SDL", "EQX", "EQY"]
        assert '  LOADPATTERN "SW" TYPE "Dead" SELFWEIGHT 1' in text
        assert '  LOADPATTERN "LIVE" TYPE "Live" SELFWEIGHT 0' in text

    def test_seismic_lines_use_top_story(self):
        text = LoadPatternBuilder(None, "Story3").build()
        seismic = [l for l in text.splitlines() if l.strip().startswith("SEISMIC")]
        assert len(seismic) == 2
        assert all('TOPSTORY "Story3" BOTTOMSTORY "Base"' in l for l in seismic)
        assert 'DIR "X X+ECC X-ECC"' in seismic[0]

    def test_no_stories_falls_back_to_base(self):
        text = LoadPatternBuilder([], None).build()
        assert 'TOPSTORY "Base"' in text


class TestCustomPatterns:
    def test_partial_seismic_list_gets_missing_direction(self):
        definitions = [
            LoadDefinition(name="DL", type=LoadType.DEAD),
            LoadDefinition(name="EQX", type=LoadType.SEISMIC),
        ]
        builder = LoadPatternBuilder(definitions, "Story2")
        assert _patterns(builder.build()) == ["DL", "EQX", "EQY"]
        assert builder.pattern_names() == ["DL", "EQX", "EQY"]

    def test_alias_counts_as_present(self):
        definitions = [
            LoadDefinition(name="eq-x", type=LoadType.SEISMIC),
            LoadDefinition(name="EqY", type=LoadType.SEISMIC),
        ]
        assert missing_seismic(definitions) == []
        assert _patterns(LoadPatternBuilder(definitions, "S").build()) == ["eq-x", "EqY"]

    def test_non_seismic_named_eqx_is_not_duplicated(self, caplog):
        definitions = [LoadDefinition(name="EQX", type=LoadType.OTHER)]
        assert missing_seismic(definitions) == ["EQY"]
        text = LoadPatternBuilder(definitions, "S").build()
        assert text.count('LOADPATTERN "EQX"') == 1
        assert '  LOADPATTERN "EQX" TYPE "Other" SELFWEIGHT 0' in text
        assert 'SEISMIC "EQX"' not in text
        assert 'SEISMIC "EQY"' in text
        assert "default seismic pattern EQX not added" in caplog.text

    def test_non_seismic_alias_is_not_duplicated(self):
        definitions = [LoadDefinition(name="eq-y", type=LoadType.WIND)]
        assert LoadPatternBuilder(definitions, "S").pattern_names() == ["eq-y", "EQX"]

    def test_unmapped_type_written_as_other(self):
        text = LoadPatternBuilder(
            [LoadDefinition(name="T", type=LoadType.THERMAL)], "S"
        ).build()
        assert '  LOADPATTERN "T" TYPE "Other" SELFWEIGHT 0' in text


class TestLoadCases:
    def test_modal_always_present(self):
        for definitions in ([], [LoadDefinition(name="DL", type=LoadType.DEAD)]):
            text = LoadCaseBuilder(definitions).build()
            assert '  LOADCASE "MODAL" TYPE "Modal - Eigen" INITCOND "PRESET"' in text

    def test_default_cases(self):
        text = LoadCaseBuilder([]).build()
        for name in ("SW", "LIVE", "SDL", "EQX", "EQY"):
            assert f'  LOADCASE "{name}" LOADPAT "{name}" SF 1' in text

    def test_seismic_definition_is_response_spectrum(self):
        text = LoadCaseBuilder([LoadDefinition(name="EQX", type=LoadType.SEISMIC)]).build()
        assert '  LOADCASE "EQX" TYPE "Response Spectrum" INITCOND "PRESET"' in text
        assert '  LOADCASE "EQY" LOADPAT "EQY" SF 1' in text

    def test_non_seismic_named_eqx_has_one_case(self):
        text = LoadCaseBuilder([LoadDefinition(name="EQX", type=LoadType.OTHER)]).build()
        assert [l for l in text.splitlines() if l.startswith('  LOADCASE "EQX" TYPE')] == [
            '  LOADCASE "EQX" TYPE "Linear Static" INITCOND "PRESET"',
        ]
        assert '  LOADCASE "EQY" LOADPAT "EQY" SF 1' in text

    def test_analysis_type(self):
        assert analysis_type(LoadType.LIVE) == "Linear Static"
        assert analysis_type(LoadType.SEISMIC) == "Response Spectrum"
