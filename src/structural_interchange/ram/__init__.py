"""RAM object-model interchange."""

from structural_interchange.ram.catalog import RamModelManager
from structural_interchange.ram.converter import RamExporter, RamImporter
from structural_interchange.ram.reconciler import (
    GROUND_FLOOR_TYPE_KEY,
    CrossSystemIdTable,
    IdentifierReconciler,
    LevelState,
)

__all__ = [
    "RamModelManager",
    "RamExporter",
    "RamImporter",
    "GROUND_FLOOR_TYPE_KEY",
    "CrossSystemIdTable",
    "IdentifierReconciler",
    "LevelState",
]
