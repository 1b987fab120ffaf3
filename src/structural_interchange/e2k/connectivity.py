"""Connectivity builders: element shapes as E2K LINE and AREA records.

Each element kind has its own builder. A builder turns source elements
into connectivity records whose vertices are PointStore ids, and keeps
an id mapping (source element id -> emitted E2K label) for the
assignment stage. Elements whose shapes resolve to the same set of point
ids collapse onto the first one's label; the later ones still get a
mapping entry.

Elements with a missing or short shape produce neither a record nor a
mapping entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from structural_interchange.e2k.points import PointStore, orient
from structural_interchange.errors import PreconditionViolation
from structural_interchange.models.elements import Column, Wall
from structural_interchange.models.geometry import Point2D

logger = logging.getLogger(__name__)


@dataclass
class ConnectivityRecord:
    """One emitted shape."""

    emitted_id: str
    point_ids: list[str]
    kind: str
    line: str = ""


class ConnectivitySource(Protocol):
    """Anything that can emit connectivity records and their id mapping."""

    kind: str

    def export_connectivities(self) -> list[ConnectivityRecord]: ...

    def id_mapping(self) -> dict[str, str]: ...


@dataclass
class _ConnectivityBuilder:
    """Shared bookkeeping for all per-kind builders."""

    store: PointStore | None
    elements: list = field(default_factory=list)

    kind = ""
    prefix = ""

    def __post_init__(self) -> None:
        if self.store is None:
            raise PreconditionViolation(
                f"{type(self).__name__} requires a PointStore"
            )
        self._mapping: dict[str, str] = {}
        self._by_key: dict[str, str] = {}
        self._counter = 1

    def set_elements(self, elements: list) -> None:
        self.elements = list(elements or [])

    def id_mapping(self) -> dict[str, str]:
        return dict(self._mapping)

    def export_connectivities(self) -> list[ConnectivityRecord]:
        self._mapping.clear()
        self._by_key.clear()
        self._counter = 1
        records: list[ConnectivityRecord] = []
        for element in self.elements:
            shape = self._shape(element)
            if shape is None:
                logger.debug("%s %s has no usable shape", self.kind, element.id)
                continue
            point_ids = [self.store.get_or_create_id(p) for p in shape]
            key = self._key(point_ids)
            existing = self._by_key.get(key)
            if existing is not None:
                self._mapping[element.id] = existing
                continue
            emitted_id = f"{self.prefix}{self._counter}"
            self._counter += 1
            record = ConnectivityRecord(emitted_id, point_ids, self.kind)
            record.line = self._format(record)
            records.append(record)
            self._by_key[key] = emitted_id
            self._mapping[element.id] = emitted_id
        return records

    def export_text(self) -> str:
        return "".join(r.line + "\n" for r in self.export_connectivities())

    def _shape(self, element) -> list[Point2D] | None:
        raise NotImplementedError

    def _key(self, point_ids: list[str]) -> str:
        """Shapes over the same set of point ids are the same shape."""
        return "_".join(sorted(point_ids))

    def _format(self, record: ConnectivityRecord) -> str:
        raise NotImplementedError


# ── Area kinds ────────────────────────────────────────────────────────


def _quoted(point_ids: list[str]) -> str:
    return " ".join(f'"{p}"' for p in point_ids)


class _AreaBuilder(_ConnectivityBuilder):
    min_points = 3
    keyword = "AREA"

    def _shape(self, element) -> list[Point2D] | None:
        points = element.points
        if not points or len(points) < self.min_points:
            return None
        return list(points)

    def _format(self, record: ConnectivityRecord) -> str:
        n = len(record.point_ids)
        return (
            f'  AREA "{record.emitted_id}" {self.keyword} {n} '
            f"{_quoted(record.point_ids)} {' '.join(['0'] * n)}"
        )


class WallConnectivityBuilder(_AreaBuilder):
    """Walls become vertical PANEL areas.

    A two-point wall is a straight panel: its plan line is repeated to
    form the four corners, with the top pair flagged by ``1 1``.
    """

    kind = "wall"
    prefix = "W"
    keyword = "PANEL"
    min_points = 2

    def _shape(self, element: Wall) -> list[Point2D] | None:
        shape = super()._shape(element)
        if shape is not None and len(shape) == 2:
            shape = list(orient(shape[0], shape[1], self.store.grid))
        return shape

    def _format(self, record: ConnectivityRecord) -> str:
        if len(record.point_ids) == 2:
            p1, p2 = record.point_ids
            return (
                f'  AREA "{record.emitted_id}" PANEL 4 '
                f'"{p1}" "{p2}" "{p2}" "{p1}" 1 1 0 0'
            )
        return super()._format(record)


class FloorConnectivityBuilder(_AreaBuilder):
    kind = "floor"
    prefix = "F"
    keyword = "FLOOR"


class OpeningConnectivityBuilder(_AreaBuilder):
    kind = "opening"
    prefix = "A"
    keyword = "AREA"


# ── Line kinds ────────────────────────────────────────────────────────


class _LineBuilder(_ConnectivityBuilder):
    keyword = ""
    end_flag = "0"

    def _shape(self, element) -> list[Point2D] | None:
        if element.start is None or element.end is None:
            return None
        return [element.start, element.end]

    def _format(self, record: ConnectivityRecord) -> str:
        return (
            f'  LINE "{record.emitted_id}" {self.keyword} '
            f"{_quoted(record.point_ids)} {self.end_flag}"
        )


class ColumnConnectivityBuilder(_LineBuilder):
    """Columns are plan points extruded between stories.

    Both ends of the E2K line are the column's plan location; columns at
    the same point id share one label.
    """

    kind = "column"
    prefix = "C"
    keyword = "COLUMN"
    end_flag = "1"

    def _shape(self, element: Column) -> list[Point2D] | None:
        shape = super()._shape(element)
        if shape is None:
            return None
        return [shape[0], shape[0]]


class BeamConnectivityBuilder(_LineBuilder):
    kind = "beam"
    prefix = "B"
    keyword = "BEAM"


class BraceConnectivityBuilder(_LineBuilder):
    kind = "brace"
    prefix = "D"
    keyword = "BRACE"
