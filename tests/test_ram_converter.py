"""Tests for RAM import/export against an in-memory RAM database."""

import pytest

from structural_interchange.errors import ExternalSystemFailure, PreconditionViolation
from structural_interchange.models import Floor, LengthUnit, StructuralModel, SurfaceLoad
from structural_interchange.outcomes import Outcome
from structural_interchange.ram import RamExporter, RamImporter, RamModelManager
from structural_interchange.ram.catalog import native_calls
from structural_interchange.config import ConversionSettings

from conftest import FakeFloorType, FakeRamDatabase, FakeRamModel, rect


def _raise_com_error():
    raise RuntimeError("COM error")


class TestRamModelManager:
    def test_requires_database(self):
        with pytest.raises(PreconditionViolation):
            RamModelManager(None)

    def test_saves_and_closes(self, ram_db):
        with RamModelManager(ram_db).session("m.rss") as ram:
            assert ram is ram_db.model
        assert ram_db.calls == ["open", "save", "close"]

    def test_saves_and_closes_when_body_raises(self, ram_db):
        with pytest.raises(ValueError):
            with RamModelManager(ram_db).session("m.rss", create=True):
                raise ValueError("boom")
        assert ram_db.calls == ["create", "save", "close"]

    def test_save_failure_after_body_failure_keeps_body_error(self):
        db = FakeRamDatabase(fail_on="save")
        with pytest.raises(ValueError, match="boom"):
            with RamModelManager(db).session("m.rss"):
                raise ValueError("boom")
        assert db.calls[-1] == "close"

    def test_save_failure_raises_external_failure(self):
        db = FakeRamDatabase(fail_on="save")
        manager = RamModelManager(db)
        with pytest.raises(ExternalSystemFailure, match="Could not save"):
            with manager.session("m.rss"):
                pass
        assert db.calls == ["open", "save", "close"]
        assert manager.last_error.startswith("Could not save")

    def test_open_failure(self):
        db = FakeRamDatabase(fail_on="open")
        manager = RamModelManager(db)
        with pytest.raises(ExternalSystemFailure, match="Could not open"):
            with manager.session("m.rss"):
                pass
        assert "save" not in db.calls

    def test_no_save_when_reading(self, ram_db):
        with RamModelManager(ram_db).session("m.rss", save=False):
            pass
        assert ram_db.calls == ["open", "close"]

    def test_native_error_becomes_external_failure(self, ram_db):
        with pytest.raises(ExternalSystemFailure, match="COM error"):
            with RamModelManager(ram_db).session("m.rss"), native_calls("m.rss"):
                _raise_com_error()
        assert ram_db.calls == ["open", "save", "close"]

    def test_own_errors_pass_through(self):
        with pytest.raises(PreconditionViolation):
            with native_calls("m.rss"):
                raise PreconditionViolation("frozen")


class TestRamImporter:
    def test_requires_model(self, ram_db):
        with pytest.raises(PreconditionViolation):
            RamImporter(ram_db).convert(None, "m.rss")

    def test_floor_types_and_stories(self, model, ram_db):
        result = RamImporter(ram_db).convert(model, "m.rss")
        assert result.success
        ram = ram_db.model
        assert [ft.label for ft in ram.floor_types.items] == ["Typical"]
        stories = ram.stories.items
        assert [(s.label, s.height, s.elevation) for s in stories] == [
            ("Story 1", 120.0, 120.0),
            ("Story 2", 120.0, 240.0),
        ]
        assert all(s.floor_type is ram.floor_types.items[0] for s in stories)
        assert ram_db.calls == ["create", "save", "close"]
        assert "2 stories" in result.message

    def test_heights_in_inches(self, model, ram_db):
        model.metadata.units.length = LengthUnit.FEET
        for level, elevation in zip(model.layout.levels, (0.0, 10.0, 22.0)):
            level.elevation = elevation
        RamImporter(ram_db).convert(model, "m.rss")
        assert [s.height for s in ram_db.model.stories.items] == [120.0, 144.0]

    def test_existing_floor_type_not_duplicated(self, model):
        ram = FakeRamModel()
        ram.floor_types.add("typical")
        db = FakeRamDatabase(ram)
        RamImporter(db).convert(model, "m.rss")
        assert len(ram.floor_types.items) == 1
        assert len(ram.stories.items) == 2

    def test_unmapped_floor_type_uses_first_with_warning(self, model, ram_db):
        model.layout.levels[2].floor_type_id = None
        result = RamImporter(ram_db).convert(model, "m.rss")
        assert len(ram_db.model.stories.items) == 2
        assert len(result.summary.warnings) == 1
        assert "[1 fallback(s)]" in result.message

    def test_no_floor_types_skips_levels(self, model, ram_db):
        model.layout.floor_types.clear()
        for level in model.layout.levels:
            level.floor_type_id = None
        result = RamImporter(ram_db).convert(model, "m.rss")
        assert ram_db.model.stories.items == []
        assert {o.outcome for o in result.summary.outcomes} == {Outcome.SKIPPED_MISSING_PROPERTY}

    def test_surface_loads_scaled(self, model, ram_db):
        model.loads.surface_loads.append(
            SurfaceLoad(name="Office", dead_value=0.015, live_value=0.05)
        )
        RamImporter(ram_db).convert(model, "m.rss")
        (load_set,) = ram_db.model.surface_load_sets.items
        assert load_set.label == "Office"
        assert load_set.dead_load == pytest.approx(15.0)
        assert load_set.live_load == pytest.approx(50.0)

    def test_surface_load_factor_configurable(self, model, ram_db):
        model.loads.surface_loads.append(SurfaceLoad(name="Roof", dead_value=2.0))
        settings = ConversionSettings(surface_load_factor=1.0)
        RamImporter(ram_db, settings).convert(model, "m.rss")
        assert ram_db.model.surface_load_sets.items[0].dead_load == 2.0

    def test_create_failure_reported(self, model):
        db = FakeRamDatabase(fail_on="create")
        result = RamImporter(db).convert(model, "m.rss")
        assert not result.success
        assert "Could not create" in result.message

    def test_save_failure_reported_and_closed(self, model):
        db = FakeRamDatabase(fail_on="save")
        result = RamImporter(db).convert(model, "m.rss")
        assert not result.success
        assert db.calls[-1] == "close"

    def test_native_error_reported_and_closed(self, model, ram_db, monkeypatch):
        monkeypatch.setattr(ram_db.model.floor_types, "count", _raise_com_error)
        result = RamImporter(ram_db).convert(model, "m.rss")
        assert not result.success
        assert "COM error" in result.message
        assert ram_db.calls == ["create", "save", "close"]

    def test_floor_with_unknown_surface_load_warns(self, model, ram_db):
        model.loads.surface_loads.append(SurfaceLoad(id="SL-office", name="Office"))
        known = Floor(points=rect(0, 0, 10, 10), level_id="LV-2", surface_load_id="SL-office")
        stale = Floor(points=rect(0, 0, 10, 10), level_id="LV-3", surface_load_id="SL-gone")
        model.elements.floors.extend([known, stale])
        result = RamImporter(ram_db).convert(model, "m.rss")
        assert result.success
        assert result.summary.warnings == [
            f"floor {stale.id} references unknown surface load 'SL-gone'"
        ]


class TestRamExporter:
    @pytest.fixture
    def ram_db(self):
        ram = FakeRamModel()
        typical = ram.floor_types.add("Typical")
        ram.stories.add(typical.uid, "Story 1", 120.0)
        ram.stories.add(typical.uid, "Story 2", 144.0)
        return FakeRamDatabase(ram)

    def test_reads_levels_with_synthesized_ground(self, ram_db):
        result, model = RamExporter(ram_db).convert("m.rss")
        assert result.success
        assert [(lv.name, lv.elevation) for lv in model.layout.levels] == [
            ("0", 0.0), ("1", 120.0), ("2", 264.0),
        ]
        ground_type = model.get_floor_type(model.layout.levels[0].floor_type_id)
        assert ground_type.name == "Ground"
        assert model.get_floor_type(model.layout.levels[1].floor_type_id).name == "Typical"
        assert ram_db.calls == ["open", "close"]

    def test_reconciler_tables_frozen(self, ram_db):
        exporter = RamExporter(ram_db)
        _, model = exporter.convert("m.rss")
        story = ram_db.model.stories.items[0]
        assert exporter.reconciler.levels.canonical_id_for(story.uid) == model.layout.levels[1].id
        assert exporter.reconciler.levels.frozen

    def test_story_without_floor_type_warns(self, ram_db):
        ram_db.model.stories.add(999, "Story 3", 100.0)
        result, model = RamExporter(ram_db).convert("m.rss")
        assert len(result.summary.warnings) == 1
        assert model.get_floor_type(model.layout.levels[-1].floor_type_id).name == "Typical"

    def test_converts_to_model_units(self, ram_db):
        model = StructuralModel()
        model.metadata.units.length = LengthUnit.FEET
        _, model = RamExporter(ram_db).convert("m.rss", model)
        assert [lv.elevation for lv in model.layout.levels] == pytest.approx([0.0, 10.0, 22.0])

    def test_open_failure(self):
        db = FakeRamDatabase(fail_on="open")
        result, model = RamExporter(db).convert("m.rss")
        assert not result.success
        assert model.layout.levels == []

    def test_native_error_reported_and_closed(self, ram_db, monkeypatch):
        monkeypatch.setattr(ram_db.model.floor_types, "count", _raise_com_error)
        result, _ = RamExporter(ram_db).convert("m.rss")
        assert not result.success
        assert "COM error" in result.message
        assert ram_db.calls == ["open", "close"]

    def test_floor_type_with_uid_zero_is_not_ground(self, ram_db):
        ram_db.model.floor_types.items.insert(0, FakeFloorType(0, "Podium"))
        ram_db.model.stories.add(0, "Story 3", 96.0)
        result, model = RamExporter(ram_db).convert("m.rss")
        assert result.success
        assert [ft.name for ft in model.layout.floor_types] == ["Podium", "Typical", "Ground"]
        levels = model.layout.levels
        assert model.get_floor_type(levels[0].floor_type_id).name == "Ground"
        assert model.get_floor_type(levels[-1].floor_type_id).name == "Podium"
        assert result.summary.warnings == []
