"""Tests for per-kind connectivity builders."""

import pytest

from structural_interchange.e2k.connectivity import (
    BeamConnectivityBuilder,
    BraceConnectivityBuilder,
    ColumnConnectivityBuilder,
    FloorConnectivityBuilder,
    OpeningConnectivityBuilder,
    WallConnectivityBuilder,
)
from structural_interchange.e2k.points import PointStore
from structural_interchange.errors import PreconditionViolation
from structural_interchange.models import Beam, Brace, Column, Floor, Opening, Wall

from conftest import pt, rect


@pytest.fixture
def store() -> PointStore:
    return PointStore()


class TestPreconditions:
    @pytest.mark.parametrize("builder", [
        WallConnectivityBuilder, FloorConnectivityBuilder, OpeningConnectivityBuilder,
        ColumnConnectivityBuilder, BeamConnectivityBuilder, BraceConnectivityBuilder,
    ])
    def test_store_required(self, builder):
        with pytest.raises(PreconditionViolation):
            builder(None)


class TestFloorConnectivity:
    def test_single_floor(self, store):
        builder = FloorConnectivityBuilder(store)
        floor = Floor(points=rect(0, 0, 10, 10))
        builder.set_elements([floor])
        records = builder.export_connectivities()
        assert len(records) == 1
        assert records[0].line == '  AREA "F1" FLOOR 4 "1" "2" "3" "4" 0 0 0 0'
        assert builder.id_mapping() == {floor.id: "F1"}

    def test_duplicate_shape_shares_label(self, store):
        builder = FloorConnectivityBuilder(store)
        first = Floor(points=rect(0, 0, 10, 10))
        rotated = Floor(points=[pt(10, 10), pt(0, 10), pt(0, 0), pt(10.1, 0)])
        builder.set_elements([first, rotated])
        records = builder.export_connectivities()
        assert [r.emitted_id for r in records] == ["F1"]
        assert builder.id_mapping() == {first.id: "F1", rotated.id: "F1"}

    def test_short_shape_skipped(self, store):
        builder = FloorConnectivityBuilder(store)
        bad = Floor(points=[pt(0, 0), pt(1, 0)])
        empty = Floor(points=None)
        good = Floor(points=rect(0, 0, 5, 5))
        builder.set_elements([bad, empty, good])
        records = builder.export_connectivities()
        assert [r.emitted_id for r in records] == ["F1"]
        assert builder.id_mapping() == {good.id: "F1"}

    def test_mapping_covers_every_exported_or_duplicate_element(self, store):
        builder = FloorConnectivityBuilder(store)
        floors = [Floor(points=rect(0, 0, 10, 10)), Floor(points=rect(0, 0, 10, 10)),
                  Floor(points=rect(20, 0, 30, 10))]
        builder.set_elements(floors)
        records = builder.export_connectivities()
        mapping = builder.id_mapping()
        assert set(mapping) == {f.id for f in floors}
        assert set(mapping.values()) == {r.emitted_id for r in records}

    def test_rerun_is_stable(self, store):
        builder = FloorConnectivityBuilder(store)
        builder.set_elements([Floor(points=rect(0, 0, 10, 10))])
        first = builder.export_text()
        assert builder.export_text() == first

    def test_wide_tolerance_merges_neighbouring_cells(self):
        store = PointStore(grid=0.25, tolerance=0.5)
        builder = FloorConnectivityBuilder(store)
        first = Floor(points=rect(0, 0, 10, 10))
        shifted = Floor(points=rect(0.25, 0, 10, 10))
        builder.set_elements([first, shifted])
        records = builder.export_connectivities()
        assert [r.emitted_id for r in records] == ["F1"]
        assert builder.id_mapping() == {first.id: "F1", shifted.id: "F1"}
        assert len(store) == 4


class TestWallConnectivity:
    def test_two_point_wall_is_panel(self, store):
        builder = WallConnectivityBuilder(store)
        builder.set_elements([Wall(points=[pt(0, 0), pt(20, 0)])])
        records = builder.export_connectivities()
        assert records[0].line == '  AREA "W1" PANEL 4 "1" "2" "2" "1" 1 1 0 0'

    def test_reversed_wall_is_duplicate(self, store):
        builder = WallConnectivityBuilder(store)
        a = Wall(points=[pt(0, 0), pt(20, 0)])
        b = Wall(points=[pt(20, 0), pt(0, 0)])
        builder.set_elements([a, b])
        assert len(builder.export_connectivities()) == 1
        assert builder.id_mapping()[b.id] == "W1"

    def test_polygon_wall(self, store):
        builder = WallConnectivityBuilder(store)
        builder.set_elements([Wall(points=rect(0, 0, 10, 1))])
        line = builder.export_connectivities()[0].line
        assert line.startswith('  AREA "W1" PANEL 4 ')
        assert line.endswith(" 0 0 0 0")


class TestOpeningConnectivity:
    def test_area_keyword(self, store):
        builder = OpeningConnectivityBuilder(store)
        builder.set_elements([Opening(points=rect(2, 2, 4, 4))])
        assert builder.export_connectivities()[0].line.startswith('  AREA "A1" AREA 4 ')


class TestLineConnectivity:
    def test_beam(self, store):
        builder = BeamConnectivityBuilder(store)
        beam = Beam(start=pt(0, 0), end=pt(10, 0))
        builder.set_elements([beam])
        assert builder.export_text() == '  LINE "B1" BEAM "1" "2" 0\n'

    def test_reversed_beam_is_duplicate(self, store):
        builder = BeamConnectivityBuilder(store)
        a = Beam(start=pt(0, 0), end=pt(10, 0))
        b = Beam(start=pt(10, 0), end=pt(0, 0))
        builder.set_elements([a, b])
        assert len(builder.export_connectivities()) == 1
        assert builder.id_mapping() == {a.id: "B1", b.id: "B1"}

    def test_beam_without_end_skipped(self, store):
        builder = BeamConnectivityBuilder(store)
        builder.set_elements([Beam(start=pt(0, 0))])
        assert builder.export_connectivities() == []
        assert builder.id_mapping() == {}

    def test_column_uses_plan_location(self, store):
        builder = ColumnConnectivityBuilder(store)
        builder.set_elements([Column(start=pt(5, 5), end=pt(5, 5))])
        assert builder.export_text() == '  LINE "C1" COLUMN "1" "1" 1\n'

    def test_stacked_columns_share_label(self, store):
        builder = ColumnConnectivityBuilder(store)
        lower = Column(start=pt(5, 5), end=pt(5, 5), base_level_id="a")
        upper = Column(start=pt(5.05, 5), end=pt(5.05, 5), base_level_id="b")
        builder.set_elements([lower, upper])
        assert len(builder.export_connectivities()) == 1
        assert builder.id_mapping() == {lower.id: "C1", upper.id: "C1"}

    def test_wide_tolerance_dedups_on_point_ids(self):
        store = PointStore(grid=0.25, tolerance=0.5)
        beams = BeamConnectivityBuilder(store)
        beams.set_elements([Beam(start=pt(0, 0), end=pt(10, 0)),
                            Beam(start=pt(10, 0), end=pt(0.25, 0))])
        assert beams.export_text() == '  LINE "B1" BEAM "1" "2" 0\n'
        columns = ColumnConnectivityBuilder(store)
        columns.set_elements([Column(start=pt(5, 5), end=pt(5, 5)),
                              Column(start=pt(5.25, 5), end=pt(5.25, 5))])
        assert len(columns.export_connectivities()) == 1
        assert set(columns.id_mapping().values()) == {"C1"}

    def test_brace(self, store):
        builder = BraceConnectivityBuilder(store)
        builder.set_elements([Brace(start=pt(0, 0), end=pt(10, 10))])
        assert builder.export_text() == '  LINE "D1" BRACE "1" "2" 0\n'

    def test_builders_share_points(self, store):
        beams = BeamConnectivityBuilder(store)
        beams.set_elements([Beam(start=pt(0, 0), end=pt(10, 0))])
        beams.export_connectivities()
        columns = ColumnConnectivityBuilder(store)
        columns.set_elements([Column(start=pt(10, 0), end=pt(10, 0))])
        assert columns.export_text() == '  LINE "C1" COLUMN "2" "2" 1\n'
        assert len(store) == 2
