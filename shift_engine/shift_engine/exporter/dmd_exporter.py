"""Export schema snapshots as DMD model definition text.

Typically used to bootstrap model files from an introspected database.  Each
table becomes one ``model`` block::

    model Order with Audit {
      model Client
      models User? as CreatedBy
      decimal(10,2) Amount
      string(100)? Notes
      key (Client, Reference)
      @NoIdentity
    }

Conventions applied when writing a block:

* The ``{Table}ID`` key column, foreign-key columns and mixin-provided
  fields are implied and not written as fields.
* Relationships are written as ``model``/``models`` lines, with ``as`` when
  the column name carries a role prefix (``CreatedByUserID`` -> ``CreatedBy``).
* Fields whose SQL type the registry does not know are written as comments.
* Index columns that implement a relationship are written as the model name.
* Mixins the table declares are authoritative: they are written in the
  ``with`` header and their fields omitted.  Matching mixins by field content
  only applies to tables that declare none.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from shift_engine.models.schema import (
    DatabaseModel,
    FieldModel,
    ForeignKeyModel,
    MixinModel,
    RelationshipType,
    TableModel,
    name_key,
)
from shift_engine.type_registry.rendering import render_field_dmd_type

logger = logging.getLogger(__name__)

DMD_FILE_EXTENSION = ".dmd"


def generate_dmd_content(table: TableModel, mixins: Iterable[MixinModel] = ()) -> str:
    """Render *table* as a DMD ``model`` block.

    Parameters
    ----------
    table:
        The table to render.
    mixins:
        Known mixins.  When the table declares no mixins, every mixin whose
        required fields all appear on the table is applied and its fields are
        omitted from the block.

    Returns
    -------
    str
        The DMD text, terminated by a newline.
    """
    applied, mixin_field_keys = _applied_mixins(table, list(mixins))

    lines: list[str] = []
    if applied:
        lines.append(f"model {table.name} with {', '.join(applied)} {{")
    else:
        lines.append(f"model {table.name} {{")

    lines.extend(_relationship_lines(table, mixin_field_keys))

    fk_column_to_model = {name_key(fk.column_name): fk.target_table for fk in table.foreign_keys}
    pk_key = name_key(_conventional_id(table.name))

    scalar_fields = sorted(
        (
            f
            for f in table.fields
            if f.key != pk_key and f.key not in fk_column_to_model and f.key not in mixin_field_keys
        ),
        key=lambda f: (f.key, f.name),
    )
    lines.extend(_field_line(table, f) for f in scalar_fields)

    lines.extend(_index_lines(table, pk_key, fk_column_to_model))
    lines.extend(f"  @{name}" for name, enabled in table.attributes.items() if enabled)

    lines.append("}")
    return "\n".join(lines) + "\n"


def export_to_directory(database: DatabaseModel, output_dir: Path | str) -> list[Path]:
    """Write one ``{Table}.dmd`` file per table, in table-name order.

    Returns
    -------
    list[Path]
        The written files.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    mixins = list(database.mixins.values())
    if not mixins:
        logger.info("No mixins specified")

    written: list[Path] = []
    for table in sorted(database.tables.values(), key=lambda t: t.name):
        file_path = output_path / f"{table.name}{DMD_FILE_EXTENSION}"
        file_path.write_text(generate_dmd_content(table, mixins), encoding="utf-8")
        written.append(file_path)

    logger.info("Exported %d table(s) to %s", len(written), output_path)
    return written


# ---------------------------------------------------------------------------
# Mixins
# ---------------------------------------------------------------------------


def _applied_mixins(table: TableModel, mixins: list[MixinModel]) -> tuple[list[str], set[str]]:
    """Names of the mixins to declare, and the keys of the fields they provide."""
    if table.mixins:
        by_key = {m.key: m for m in mixins}
        declared = [by_key.get(name_key(name)) for name in table.mixins]
        field_keys = {f.key for mixin in declared if mixin is not None for f in mixin.fields}
        return list(table.mixins), field_keys

    applied: list[str] = []
    field_keys: set[str] = set()
    for mixin in mixins:
        if _contains_all_mixin_fields(table, mixin):
            applied.append(mixin.name)
            field_keys.update(f.key for f in mixin.fields)
    return applied, field_keys


def _contains_all_mixin_fields(table: TableModel, mixin: MixinModel) -> bool:
    table_keys = table.field_keys
    return all(f.key in table_keys or f.is_optional for f in mixin.fields)


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


def _relationship_lines(table: TableModel, mixin_field_keys: set[str]) -> list[str]:
    lines: list[str] = []
    for fk in sorted(table.foreign_keys, key=lambda k: (k.target_table, k.column_name)):
        if name_key(fk.column_name) in mixin_field_keys:
            continue
        lines.append(_relationship_line(fk))
    return lines


def _relationship_line(fk: ForeignKeyModel) -> str:
    keyword = "models" if fk.relationship_type == RelationshipType.ONE_TO_MANY else "model"
    nullable = "?" if fk.is_nullable else ""
    line = f"  {keyword} {fk.target_table}{nullable}"

    role = _extract_role_name(fk.column_name, fk.target_table)
    if role.strip() and name_key(role) != name_key(_conventional_id(fk.target_table)):
        line += f" as {role}"
    return line


def _field_line(table: TableModel, field: FieldModel) -> str:
    dmd_type = render_field_dmd_type(field)
    if dmd_type is None:
        logger.warning("Skipping unsupported type: %s %s %s", table.name, field.name, field.type)
        return f"# {field.type.lower()} {field.name}"
    nullable = "?" if field.is_nullable else ""
    return f"  {dmd_type}{nullable} {field.name}"


def _index_lines(table: TableModel, pk_key: str, fk_column_to_model: dict[str, str]) -> list[str]:
    """Custom indexes only: PK-only, all-foreign-key and duplicate indexes are implied."""
    lines: list[str] = []
    seen: set[str] = set()
    for index in table.indexes:
        keys = [name_key(f) for f in index.fields]

        if len(keys) == 1 and keys[0] == pk_key:
            continue
        if all(k in fk_column_to_model for k in keys):
            continue

        signature = ",".join(keys)
        if signature in seen:
            continue
        seen.add(signature)

        fields = ", ".join(fk_column_to_model.get(name_key(f), f) for f in index.fields)
        keyword = "key" if index.is_unique else "index"
        lines.append(f"  {keyword} ({fields})")
    return lines


# ---------------------------------------------------------------------------
# Naming conventions
# ---------------------------------------------------------------------------


def _conventional_id(table_name: str) -> str:
    """The conventional key column of a table: its letters followed by ``ID``."""
    return "".join(ch for ch in table_name if ch.isalpha()) + "ID"


def _extract_role_name(column_name: str, target_table: str) -> str:
    """Strip the target table (and ``ID``) suffix from a reference column name.

    ``CreatedByUserID`` referencing ``User`` yields ``CreatedBy``;
    ``ClientID`` referencing ``Client`` yields an empty string.  Columns that
    do not end with the target name are returned unchanged.
    """
    lowered = column_name.lower()
    for suffix in (f"{target_table}ID", target_table):
        if lowered.endswith(suffix.lower()):
            return column_name[: len(column_name) - len(suffix)]
    return column_name
