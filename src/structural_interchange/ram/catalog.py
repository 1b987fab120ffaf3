"""The RAM object model as seen from this package.

RAM is reached through an in-process database object. Only the small
surface used here is described: collections with count/get/add
accessors for floor types, stories, surface-load sets, frame sections
and materials. Lengths on the RAM side are always inches.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, TypeVar

from structural_interchange.errors import (
    ExternalSystemFailure,
    InterchangeError,
    PreconditionViolation,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", covariant=True)


class RamFloorType(Protocol):
    uid: int
    label: str


class RamStory(Protocol):
    uid: int
    label: str
    elevation: float
    height: float
    floor_type: RamFloorType | None


class RamSurfaceLoadSet(Protocol):
    uid: int
    label: str
    dead_load: float
    live_load: float


class RamNamed(Protocol):
    """Frame sections and materials: only uid and label are used."""

    uid: int
    label: str


class RamCollection(Protocol[T]):
    def count(self) -> int: ...

    def get(self, index: int) -> T | None: ...


class RamFloorTypes(RamCollection[RamFloorType], Protocol):
    def add(self, label: str) -> RamFloorType: ...


class RamStories(RamCollection[RamStory], Protocol):
    def add(self, floor_type_uid: int, label: str, height: float) -> RamStory: ...


class RamSurfaceLoadSets(RamCollection[RamSurfaceLoadSet], Protocol):
    def add(self, label: str) -> RamSurfaceLoadSet: ...


class RamModel(Protocol):
    floor_types: RamFloorTypes
    stories: RamStories
    surface_load_sets: RamSurfaceLoadSets
    frame_sections: RamCollection[RamNamed]
    materials: RamCollection[RamNamed]


class RamDatabase(Protocol):
    def create(self, path: str, units: str) -> RamModel: ...

    def open(self, path: str) -> RamModel: ...

    def save(self) -> None: ...

    def close(self) -> None: ...


def iterate(collection: RamCollection[T] | None) -> Iterator[T]:
    """Walk a RAM collection by index, skipping empty slots."""
    if collection is None:
        return
    for i in range(collection.count()):
        item = collection.get(i)
        if item is not None:
            yield item


class RamModelManager:
    """Opens or creates a RAM model for one conversion and always releases it.

    Usage::

        manager = RamModelManager(database)
        with manager.session("model.rss", create=True) as ram:
            ...

    On exit the model is saved (also when the body raised) and closed.
    """

    def __init__(self, database: RamDatabase | None):
        if database is None:
            raise PreconditionViolation("RamModelManager requires a RAM database")
        self.database = database
        self.last_error: str | None = None

    @contextmanager
    def session(
        self,
        path: str,
        create: bool = False,
        units: str = "inches",
        save: bool = True,
    ) -> Iterator[RamModel]:
        try:
            model = self.database.create(path, units) if create else self.database.open(path)
        except Exception as e:
            self.last_error = f"Could not {'create' if create else 'open'} {path}: {e}"
            raise ExternalSystemFailure(self.last_error, {"path": path}) from e

        body_failed = False
        try:
            yield model
        except BaseException:
            body_failed = True
            raise
        finally:
            self._release(path, save, body_failed)

    def _release(self, path: str, save: bool, body_failed: bool) -> None:
        try:
            if save:
                self.database.save()
        except Exception as e:
            self.last_error = f"Could not save {path}: {e}"
            if body_failed:
                # The body's exception is already propagating
                logger.exception(self.last_error)
            else:
                raise ExternalSystemFailure(self.last_error, {"path": path}) from e
        finally:
            self.database.close()


@contextmanager
def native_calls(path: str) -> Iterator[None]:
    """Re-raise errors from RAM calls in the body as ExternalSystemFailure."""
    try:
        yield
    except InterchangeError:
        raise
    except Exception as e:
        raise ExternalSystemFailure(f"RAM call failed on {path}: {e}", {"path": path}) from e
