"""Bidirectional registry between DMD field types and SQL Server types."""

from shift_engine.type_registry._types import (
    DmdFieldType,
    DmdFieldTypeId,
    PrecisionType,
    SqlFieldType,
    SqlFieldTypeId,
    all_dmd_types,
    all_sql_types,
    find_dmd_type,
    find_sql_type,
    get_dmd_type,
    get_sql_type,
    resolve_sql_type_code,
)
from shift_engine.type_registry.rendering import (
    render_dmd_type,
    render_field_dmd_type,
    render_field_sql_type,
    render_sql_type,
    render_unknown_sql_type,
)

__all__ = [
    "DmdFieldType",
    "DmdFieldTypeId",
    "PrecisionType",
    "SqlFieldType",
    "SqlFieldTypeId",
    "all_dmd_types",
    "all_sql_types",
    "find_dmd_type",
    "find_sql_type",
    "get_dmd_type",
    "get_sql_type",
    "render_dmd_type",
    "render_field_dmd_type",
    "render_field_sql_type",
    "render_sql_type",
    "render_unknown_sql_type",
    "resolve_sql_type_code",
]
