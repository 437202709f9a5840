"""Type-string rendering for schema fields.

Renders a field's declared type, precision and scale as a type string in
either vocabulary:

* :func:`render_sql_type` -- SQL Server form (``nvarchar(100)``), consumed by
  the DDL generator.
* :func:`render_dmd_type` -- DMD form (``string(100)``), consumed by the
  model exporter.

Both apply the same rules, in order:

1. Legacy wide-text types (``text``/``ntext``) render as the ``(max)`` form
   of their canonical type.
2. Currency types (``money``/``smallmoney``) render as their canonical type
   with the currency's fixed precision and scale, whatever the field stores.
3. Types supporting a max-length marker render ``code(max)`` when the field
   precision equals the marker.
4. Otherwise the type's precision policy applies, filling missing precision
   or scale from the type defaults.

Rendering never raises: codes unknown to the registry fall back to
:func:`render_unknown_sql_type`, which uses only the field's own values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shift_engine.type_registry._types import (
    PrecisionType,
    SqlFieldType,
    find_dmd_type,
    find_sql_type,
)

if TYPE_CHECKING:
    from shift_engine.models.schema import FieldModel

UNKNOWN_MAX_LENGTH_MARKER = -1


def render_sql_type(field: FieldModel, sql_type: SqlFieldType | None) -> str:
    """Render *field* as a SQL Server type string using *sql_type*'s rules.

    When *sql_type* is ``None`` the field's raw type code is rendered with
    :func:`render_unknown_sql_type`.
    """
    if sql_type is None:
        return render_unknown_sql_type(field)

    canonical_code = sql_type.dmd_type.sql_type.code

    if sql_type.is_legacy_wide_text:
        return f"{canonical_code}(max)"

    if sql_type.is_currency:
        return f"{canonical_code}({sql_type.default_precision},{sql_type.default_scale})"

    if _is_max_length(field, sql_type):
        return f"{sql_type.code}(max)"

    if sql_type.precision_type == PrecisionType.PRECISION_ONLY:
        precision = _first_set(field.precision, sql_type.default_precision)
        return f"{sql_type.code}({precision})"

    if sql_type.precision_type == PrecisionType.PRECISION_WITH_SCALE:
        precision = _first_set(field.precision, sql_type.default_precision)
        scale = _first_set(field.scale, sql_type.default_scale)
        return f"{sql_type.code}({precision},{scale})"

    return sql_type.code


def render_dmd_type(field: FieldModel, sql_type: SqlFieldType) -> str:
    """Render *field* (stored as *sql_type*) as a DMD type string.

    Missing precision or scale fall back to the SQL type's defaults and then
    to the DMD type's defaults.
    """
    dmd_type = sql_type.dmd_type
    dmd_code = dmd_type.code

    if sql_type.is_legacy_wide_text:
        return f"{dmd_code}(max)"

    if sql_type.is_currency:
        return f"{dmd_code}({sql_type.default_precision},{sql_type.default_scale})"

    if _is_max_length(field, sql_type):
        return f"{dmd_code}(max)"

    if sql_type.precision_type == PrecisionType.PRECISION_ONLY:
        precision = _first_set(field.precision, sql_type.default_precision, dmd_type.default_precision)
        return f"{dmd_code}({precision})"

    if sql_type.precision_type == PrecisionType.PRECISION_WITH_SCALE:
        precision = _first_set(field.precision, sql_type.default_precision, dmd_type.default_precision)
        scale = _first_set(field.scale, sql_type.default_scale, dmd_type.default_scale)
        return f"{dmd_code}({precision},{scale})"

    return dmd_code


def render_unknown_sql_type(field: FieldModel) -> str:
    """Render a field whose type is not in the registry.

    Only the field's stored precision and scale are used; registry defaults
    are never consulted.
    """
    type_code = field.type

    if field.precision is None:
        return type_code

    if field.precision == UNKNOWN_MAX_LENGTH_MARKER:
        return f"{type_code}(max)"

    if field.scale is not None:
        return f"{type_code}({field.precision},{field.scale})"

    return f"{type_code}({field.precision})"


def render_field_sql_type(field: FieldModel) -> str:
    """Resolve *field*'s raw type code and render it in the SQL vocabulary.

    The code is looked up as a SQL type first, then as a DMD type (rendered
    through the SQL type it maps to).  Unknown codes use the fallback.
    """
    sql_type = find_sql_type(field.type)
    if sql_type is None:
        dmd_type = find_dmd_type(field.type)
        if dmd_type is not None:
            sql_type = dmd_type.sql_type
    return render_sql_type(field, sql_type)


def render_field_dmd_type(field: FieldModel) -> str | None:
    """Render *field* in the DMD vocabulary, or ``None`` if its SQL type is unsupported."""
    sql_type = find_sql_type(field.type)
    if sql_type is None:
        return None
    return render_dmd_type(field, sql_type)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_max_length(field: FieldModel, sql_type: SqlFieldType) -> bool:
    return (
        sql_type.supports_max_length
        and field.precision is not None
        and field.precision == sql_type.max_length_marker
    )


def _first_set(*values: int | None) -> int | None:
    for value in values:
        if value is not None:
            return value
    return None
