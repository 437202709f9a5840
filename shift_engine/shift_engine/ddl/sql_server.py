"""SQL Server DDL generation for migration plans.

Turns :class:`MigrationStep` objects into T-SQL statements.  This is a pure
rendering layer: it never connects to a database.  Executing the statements
(and deciding what to do when one fails) is the caller's job.

:meth:`SqlServerDdlGenerator.generate_script` orders steps by action before
rendering (tables, then columns, then foreign keys, then the reserved
actions), which closes the planner's ordering gap for foreign keys between
tables created in the same plan.
"""

from __future__ import annotations

import logging

from shift_engine.config import Settings
from shift_engine.indexes.field_resolver import resolve_index_field_names
from shift_engine.indexes.naming import generate_index_name
from shift_engine.models.migration import MigrationAction, MigrationPlan, MigrationStep
from shift_engine.models.schema import DatabaseModel, FieldModel, ForeignKeyModel, IndexKind, IndexModel, TableModel
from shift_engine.type_registry.rendering import render_field_sql_type

logger = logging.getLogger(__name__)

_ACTION_ORDER: dict[MigrationAction, int] = {
    MigrationAction.CREATE_TABLE: 0,
    MigrationAction.ADD_COLUMN: 1,
    MigrationAction.ADD_FOREIGN_KEY: 2,
    MigrationAction.ALTER_COLUMN: 3,
    MigrationAction.ADD_INDEX: 4,
}

# Defaults used to back-fill existing rows when a NOT NULL column is added.
# Matched against the rendered type by prefix, first match wins.
_NUMERIC_PREFIXES = ("int", "bigint", "smallint", "tinyint", "decimal", "numeric", "float", "real")
_DEFAULTS_BY_PREFIX: tuple[tuple[tuple[str, ...], str], ...] = (
    (("bit",), "0"),
    (("datetime", "smalldatetime", "date"), "GETDATE()"),
    (("char", "nchar", "varchar", "nvarchar", "text", "ntext"), "''"),
    (("uniqueidentifier",), "NEWID()"),
)


def quote_identifier(name: str) -> str:
    """Bracket-quote a SQL Server identifier."""
    return "[" + name.replace("]", "]]") + "]"


class SqlServerDdlGenerator:
    """Renders migration steps as SQL Server DDL.

    Parameters
    ----------
    schema:
        Schema qualifying every table name.
    with_nocheck:
        Add foreign keys ``WITH NOCHECK`` (existing rows are not validated)
        and re-enable the constraint afterwards.
    """

    def __init__(self, schema: str = "dbo", with_nocheck: bool = True) -> None:
        self._schema = schema
        self._with_nocheck = with_nocheck

    @classmethod
    def from_settings(cls, settings: Settings) -> SqlServerDdlGenerator:
        return cls(schema=settings.default_schema, with_nocheck=settings.foreign_keys_with_nocheck)

    # -- Plan ---------------------------------------------------------------

    def generate_script(self, plan: MigrationPlan, target: DatabaseModel | None = None) -> list[str]:
        """Render every step of *plan*, ordered by action.

        Parameters
        ----------
        plan:
            The plan to render.
        target:
            The target schema, used to resolve model names in index steps.
        """
        statements: list[str] = []
        for step in sorted(plan.steps, key=lambda s: _ACTION_ORDER[s.action]):
            table = target.get_table(step.table_name) if target is not None else None
            statements.extend(self.statements_for_step(step, table))
        return statements

    def statements_for_step(self, step: MigrationStep, table: TableModel | None = None) -> list[str]:
        """Render one step.  *table* is only consulted for ``ADD_INDEX``."""
        logger.info("%s", step)

        if step.action == MigrationAction.CREATE_TABLE:
            statements = [self.create_table(step.table_name, step.fields)]
        elif step.action == MigrationAction.ADD_COLUMN:
            statements = [self.add_column(step.table_name, field) for field in step.fields]
        elif step.action == MigrationAction.ALTER_COLUMN:
            statements = [self.alter_column(step.table_name, field) for field in step.fields]
        elif step.action == MigrationAction.ADD_FOREIGN_KEY and step.foreign_key is not None:
            statements = self.add_foreign_key(step.table_name, step.foreign_key)
        elif step.action == MigrationAction.ADD_INDEX and step.index is not None:
            statements = [self.create_index(step.table_name, step.index, table)]
        else:
            statements = []

        for sql in statements:
            logger.debug(sql)
        return statements

    # -- Statements ---------------------------------------------------------

    def create_table(self, table_name: str, fields: list[FieldModel]) -> str:
        columns = [self.column_definition(field) for field in fields]

        primary_keys = [quote_identifier(f.name) for f in fields if f.is_primary_key]
        if primary_keys:
            pk_name = quote_identifier(f"PK_{table_name}")
            columns.append(f"CONSTRAINT {pk_name} PRIMARY KEY ({', '.join(primary_keys)})")

        body = ",\n  ".join(columns)
        return f"CREATE TABLE {self.qualified(table_name)} (\n  {body}\n)"

    def add_column(self, table_name: str, field: FieldModel) -> str:
        """Add a column.  NOT NULL columns get a default so existing rows are back-filled."""
        sql = f"ALTER TABLE {self.qualified(table_name)} ADD {self.column_definition(field)}"
        if not field.is_nullable and not field.is_identity:
            default = _default_for(field)
            if default is not None:
                sql += f" DEFAULT {default}"
        return sql

    def alter_column(self, table_name: str, field: FieldModel) -> str:
        null_sql = "NULL" if field.is_nullable else "NOT NULL"
        return (
            f"ALTER TABLE {self.qualified(table_name)} ALTER COLUMN "
            f"{quote_identifier(field.name)} {render_field_sql_type(field)} {null_sql}"
        )

    def add_foreign_key(self, table_name: str, foreign_key: ForeignKeyModel) -> list[str]:
        fk_name = quote_identifier(f"FK_{table_name}_{foreign_key.column_name}")
        table = self.qualified(table_name)
        nocheck = " WITH NOCHECK" if self._with_nocheck else ""

        statements = [
            f"ALTER TABLE {table}{nocheck} ADD CONSTRAINT {fk_name} "
            f"FOREIGN KEY ({quote_identifier(foreign_key.column_name)}) "
            f"REFERENCES {self.qualified(foreign_key.target_table)} "
            f"({quote_identifier(foreign_key.target_column_name)})"
        ]
        if self._with_nocheck:
            statements.append(f"ALTER TABLE {table} CHECK CONSTRAINT {fk_name}")
        return statements

    def create_index(self, table_name: str, index: IndexModel, table: TableModel | None = None) -> str:
        """Unique indexes become ``AK_`` constraints, the rest ``IX_`` indexes."""
        resolved = resolve_index_field_names(index.fields, table)
        index_name = quote_identifier(generate_index_name(index.is_unique, table_name, resolved))
        columns = ", ".join(quote_identifier(f) for f in resolved)
        kind = "CLUSTERED" if index.kind == IndexKind.CLUSTERED else "NONCLUSTERED"

        if index.is_unique:
            return f"ALTER TABLE {self.qualified(table_name)} ADD CONSTRAINT {index_name} UNIQUE {kind} ({columns})"
        return f"CREATE {kind} INDEX {index_name} ON {self.qualified(table_name)} ({columns})"

    # -- Fragments ----------------------------------------------------------

    def qualified(self, table_name: str) -> str:
        return f"{quote_identifier(self._schema)}.{quote_identifier(table_name)}"

    def column_definition(self, field: FieldModel) -> str:
        identity_sql = " IDENTITY(1,1)" if field.is_identity else ""
        null_sql = "NULL" if field.is_nullable else "NOT NULL"
        return f"{quote_identifier(field.name)} {render_field_sql_type(field)}{identity_sql} {null_sql}"


def _default_for(field: FieldModel) -> str | None:
    """Back-fill default for a NOT NULL column, chosen by type family."""
    type_sql = render_field_sql_type(field).lower()

    if type_sql.startswith(_NUMERIC_PREFIXES):
        # Reference columns default to the first row of the referenced table.
        return "1" if field.name.lower().endswith("id") else "0"

    for prefixes, default in _DEFAULTS_BY_PREFIX:
        if type_sql.startswith(prefixes):
            return default
    return None
