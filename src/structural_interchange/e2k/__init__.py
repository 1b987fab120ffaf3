"""E2K text format: export from and import into the canonical model."""

from structural_interchange.e2k.points import PointKey, PointStore, normalize
from structural_interchange.e2k.writer import E2KExporter
from structural_interchange.e2k.parser import E2KParser
from structural_interchange.e2k.injector import E2KInjector

__all__ = [
    "PointKey",
    "PointStore",
    "normalize",
    "E2KExporter",
    "E2KParser",
    "E2KInjector",
]
