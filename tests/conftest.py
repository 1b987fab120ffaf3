"""Shared fixtures: model builders and an in-memory RAM database."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from structural_interchange.models import (
    Diaphragm,
    FloorProperties,
    FloorType,
    FrameProperties,
    Level,
    Point2D,
    StructuralModel,
    WallProperties,
)


def pt(x: float, y: float) -> Point2D:
    return Point2D(x=x, y=y)


def rect(x0: float, y0: float, x1: float, y1: float) -> list[Point2D]:
    return [pt(x0, y0), pt(x1, y0), pt(x1, y1), pt(x0, y1)]


@pytest.fixture
def model() -> StructuralModel:
    """Three levels (0, 120, 240), one of each property kind."""
    m = StructuralModel()
    typical = FloorType(name="Typical")
    m.layout.floor_types.append(typical)
    m.layout.levels.extend([
        Level(id="LV-base", name="0", elevation=0.0, floor_type_id=typical.id),
        Level(id="LV-2", name="2", elevation=120.0, floor_type_id=typical.id),
        Level(id="LV-3", name="3", elevation=240.0, floor_type_id=typical.id),
    ])
    m.properties.frame_properties.append(FrameProperties(id="FRP-w12", name="W12X26"))
    m.properties.floor_properties.append(FloorProperties(id="FP-slab", name='8" Slab'))
    m.properties.wall_properties.append(WallProperties(id="WP-12", name="12in Wall"))
    m.properties.diaphragms.append(Diaphragm(id="DIA-1", name="D1"))
    return m


# ── Fake RAM ──────────────────────────────────────────────────────────


@dataclass
class FakeFloorType:
    uid: int
    label: str


@dataclass
class FakeStory:
    uid: int
    label: str
    elevation: float
    height: float
    floor_type: FakeFloorType | None = None


@dataclass
class FakeLoadSet:
    uid: int
    label: str
    dead_load: float = 0.0
    live_load: float = 0.0


@dataclass
class FakeNamed:
    uid: int
    label: str


@dataclass
class FakeCollection:
    items: list = field(default_factory=list)
    next_uid: int = 100

    def count(self) -> int:
        return len(self.items)

    def get(self, index: int):
        return self.items[index]

    def _uid(self) -> int:
        self.next_uid += 1
        return self.next_uid


class FakeFloorTypes(FakeCollection):
    def add(self, label: str) -> FakeFloorType:
        item = FakeFloorType(self._uid(), label)
        self.items.append(item)
        return item


class FakeStories(FakeCollection):
    def __init__(self, floor_types: FakeFloorTypes):
        super().__init__()
        self.floor_types = floor_types

    def add(self, floor_type_uid: int, label: str, height: float) -> FakeStory:
        below = self.items[-1].elevation if self.items else 0.0
        floor_type = next((ft for ft in self.floor_types.items if ft.uid == floor_type_uid), None)
        item = FakeStory(self._uid(), label, below + height, height, floor_type)
        self.items.append(item)
        return item


class FakeLoadSets(FakeCollection):
    def add(self, label: str) -> FakeLoadSet:
        item = FakeLoadSet(self._uid(), label)
        self.items.append(item)
        return item


class FakeRamModel:
    def __init__(self) -> None:
        self.floor_types = FakeFloorTypes()
        self.stories = FakeStories(self.floor_types)
        self.surface_load_sets = FakeLoadSets()
        self.frame_sections = FakeCollection()
        self.materials = FakeCollection()


class FakeRamDatabase:
    """Records every call; can be told to fail on create/open/save."""

    def __init__(self, model: FakeRamModel | None = None, fail_on: str | None = None):
        self.model = model or FakeRamModel()
        self.fail_on = fail_on
        self.calls: list[str] = []

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise OSError(f"{name} failed")

    def create(self, path: str, units: str) -> FakeRamModel:
        self._call("create")
        return self.model

    def open(self, path: str) -> FakeRamModel:
        self._call("open")
        return self.model

    def save(self) -> None:
        self._call("save")

    def close(self) -> None:
        self.calls.append("close")


@pytest.fixture
def ram_db() -> FakeRamDatabase:
    return FakeRamDatabase()
