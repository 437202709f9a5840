"""Domain models for the shift engine."""

from shift_engine.models.migration import (
    ExtraColumnReport,
    ExtraIndexReport,
    ExtrasReport,
    MigrationAction,
    MigrationPlan,
    MigrationStep,
)
from shift_engine.models.schema import (
    MIXIN_TYPE_MARKER,
    DatabaseModel,
    FieldModel,
    ForeignKeyModel,
    IndexKind,
    IndexModel,
    MixinModel,
    RelationshipType,
    TableModel,
)

__all__ = [
    "MIXIN_TYPE_MARKER",
    "DatabaseModel",
    "ExtraColumnReport",
    "ExtraIndexReport",
    "ExtrasReport",
    "FieldModel",
    "ForeignKeyModel",
    "IndexKind",
    "IndexModel",
    "MigrationAction",
    "MigrationPlan",
    "MigrationStep",
    "MixinModel",
    "RelationshipType",
    "TableModel",
]
