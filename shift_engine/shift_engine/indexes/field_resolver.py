"""Resolution of model names in index definitions to physical column names.

Index definitions may name a related model (``ClientStatus``) where the
physical index covers that relationship's foreign-key column
(``ClientStatusID``).  Names that are not relationship targets are assumed to
be physical columns already and pass through unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable

from shift_engine.models.schema import TableModel, name_key


def resolve_index_field_names(fields: Iterable[str], table: TableModel | None) -> list[str]:
    """Translate index field names to the columns that implement them.

    When two foreign keys reference the same target table, the last one
    declared wins.

    Parameters
    ----------
    fields:
        Field or model names from the index definition, in index order.
    table:
        The table owning the index.  ``None`` returns the names unchanged.

    Returns
    -------
    list[str]
        A new list of physical column names, in the same order.
    """
    if table is None:
        return list(fields)

    model_to_column: dict[str, str] = {}
    for fk in table.foreign_keys:
        model_to_column[fk.target_key] = fk.column_name

    return [model_to_column.get(name_key(field), field) for field in fields]
