"""Extras diff: schema objects present in the actual database only.

The planner is additive, so objects that exist in the actual schema but not
in the target are never dropped.  This module reports them instead.  Extra
tables are sorted by name; extra columns and indexes follow actual-schema
order within each table, and tables are visited in sorted order, so identical
inputs always produce an identical report.
"""

from __future__ import annotations

from shift_engine.indexes.field_resolver import resolve_index_field_names
from shift_engine.models.migration import ExtraColumnReport, ExtraIndexReport, ExtrasReport
from shift_engine.models.schema import DatabaseModel, TableModel, name_key
from shift_engine.type_registry.rendering import render_field_sql_type


def compute_extras(target: DatabaseModel, actual: DatabaseModel) -> ExtrasReport:
    """Report tables, columns and indexes found only in *actual*.

    Parameters
    ----------
    target:
        The desired schema.
    actual:
        The observed schema.

    Returns
    -------
    ExtrasReport
        Extra tables (sorted), plus extra columns and indexes for every table
        present in both snapshots.
    """
    extra_tables = sorted(
        (table.name for table in actual.tables.values() if not target.has_table(table.name)),
        key=str.lower,
    )

    extra_columns: list[ExtraColumnReport] = []
    extra_indexes: list[ExtraIndexReport] = []

    for actual_table in sorted(actual.tables.values(), key=lambda t: t.key):
        target_table = target.get_table(actual_table.name)
        if target_table is None:
            continue

        target_keys = target_table.field_keys
        extra_columns.extend(
            ExtraColumnReport(
                table_name=actual_table.name,
                column_name=field.name,
                data_type=render_field_sql_type(field),
            )
            for field in actual_table.fields
            if field.key not in target_keys
        )
        extra_indexes.extend(_extra_indexes(target_table, actual_table))

    return ExtrasReport(
        extra_tables=extra_tables,
        extra_columns=extra_columns,
        extra_indexes=extra_indexes,
    )


def _extra_indexes(target_table: TableModel, actual_table: TableModel) -> list[ExtraIndexReport]:
    """Actual indexes with no target index over the same columns and uniqueness.

    Target index fields are resolved against the target table's foreign keys
    first, since model files name relationships rather than columns.
    """
    target_signatures = {
        _signature(resolve_index_field_names(index.fields, target_table), index.is_unique)
        for index in target_table.indexes
    }
    return [
        ExtraIndexReport(
            table_name=actual_table.name,
            is_unique=index.is_unique,
            fields=list(index.fields),
        )
        for index in actual_table.indexes
        if _signature(index.fields, index.is_unique) not in target_signatures
    ]


def _signature(fields: list[str], is_unique: bool) -> tuple[tuple[str, ...], bool]:
    return tuple(name_key(f) for f in fields), is_unique
