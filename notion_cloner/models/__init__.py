"""Data models for the cloner."""

from .schema import (
    FieldKind,
    HierarchyRole,
    RenameRule,
    Schema,
)
from .record import (
    SourceRow,
    RowResult,
    HierarchyEdge,
)
from .clone import (
    CloneOptions,
    CloneStatus,
    CloneStep,
    CloneRun,
    CloneResult,
    HierarchyResult,
)

__all__ = [
    "FieldKind",
    "HierarchyRole",
    "RenameRule",
    "Schema",
    "SourceRow",
    "RowResult",
    "HierarchyEdge",
    "CloneOptions",
    "CloneStatus",
    "CloneStep",
    "CloneRun",
    "CloneResult",
    "HierarchyResult",
]
