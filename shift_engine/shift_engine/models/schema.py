"""Schema snapshot models: databases, tables, mixins, fields, keys and indexes.

A :class:`DatabaseModel` is an immutable snapshot of a relational schema.  It
is produced either by loading model definition files (the *target*) or by
introspecting a live database (the *actual*); the planner does not care which.

Names are case-insensitive throughout.  Every named entity exposes a ``key``
(the lower-cased name) used for identity, while ``name`` keeps the original
spelling for display and DDL.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Reserved type code used by model files to pull in a mixin's fields.  It is
# expanded by the loader and must never reach a field declaration.
MIXIN_TYPE_MARKER = "mixin"


def name_key(name: str) -> str:
    """Return the case-insensitive identity key for a table or column name."""
    return name.lower()


class RelationshipType(str, Enum):
    """Cardinality of a foreign-key relationship."""

    ONE_TO_ONE = "ONE_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"


class IndexKind(str, Enum):
    """Physical index structure."""

    CLUSTERED = "CLUSTERED"
    NON_CLUSTERED = "NON_CLUSTERED"


# ---------------------------------------------------------------------------
# Leaf entities
# ---------------------------------------------------------------------------


class FieldModel(BaseModel):
    """A single column declaration.

    ``type`` is the raw type code as declared.  It is validated against the
    type registry only when rendered, so engine-specific types the registry
    does not know (``geometry``, ``xml`` ...) are accepted.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Column name, unique per table ignoring case.")
    type: str = Field(..., description="Raw type code, e.g. 'nvarchar' or 'decimal'.")
    is_primary_key: bool = Field(default=False, description="Whether the column is the primary key.")
    is_identity: bool = Field(default=False, description="Whether the column is an IDENTITY column.")
    is_nullable: bool = Field(default=False, description="Whether the column allows NULLs.")
    is_optional: bool = Field(
        default=False,
        description="Mixin fields only: the field may be absent when matching a table to the mixin.",
    )
    precision: int | None = Field(
        default=None,
        description="Length or numeric precision.  -1 marks a (max) length.",
    )
    scale: int | None = Field(default=None, description="Numeric scale.")

    @field_validator("type")
    @classmethod
    def reject_mixin_marker(cls, v: str) -> str:
        """The mixin marker is expanded by loaders and is never a column type."""
        if v == MIXIN_TYPE_MARKER:
            raise ValueError(f"'{MIXIN_TYPE_MARKER}' is reserved for mixin expansion and is not a field type.")
        return v

    @property
    def key(self) -> str:
        return name_key(self.name)

    def __str__(self) -> str:
        return f'Field:"{self.name}" Type:"{self.type}"'


class ForeignKeyModel(BaseModel):
    """A single-column reference from a local column to another table."""

    model_config = ConfigDict(frozen=True)

    column_name: str = Field(..., min_length=1, description="Local column holding the reference.")
    target_table: str = Field(..., min_length=1, description="Referenced table (the related model name).")
    target_column_name: str = Field(..., min_length=1, description="Referenced column, usually the target key.")
    is_nullable: bool = Field(default=False, description="Whether the reference is optional.")
    relationship_type: RelationshipType = Field(
        default=RelationshipType.ONE_TO_ONE,
        description="Declared relationship cardinality.",
    )

    @property
    def target_key(self) -> str:
        return name_key(self.target_table)

    def __str__(self) -> str:
        return f"{self.column_name} {self.target_table} {self.target_column_name}"


class IndexModel(BaseModel):
    """An index or alternate key over an ordered list of fields.

    Field names may be logical model names (``Client``) that still need
    resolving to physical foreign-key columns (``ClientID``); see
    :func:`shift_engine.indexes.resolve_index_field_names`.
    """

    model_config = ConfigDict(frozen=True)

    fields: list[str] = Field(..., min_length=1, description="Ordered field or model names.")
    is_unique: bool = Field(default=False, description="Unique indexes are emitted as alternate keys.")
    kind: IndexKind = Field(default=IndexKind.NON_CLUSTERED, description="Physical index structure.")


# ---------------------------------------------------------------------------
# Field containers
# ---------------------------------------------------------------------------


class _FieldSetModel(BaseModel):
    """Shared shape of tables and mixins: a named, ordered set of fields."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Name, unique per database ignoring case.")
    fields: list[FieldModel] = Field(default_factory=list, description="Ordered column declarations.")
    foreign_keys: list[ForeignKeyModel] = Field(default_factory=list, description="Outgoing references.")

    @field_validator("fields")
    @classmethod
    def validate_unique_field_names(cls, v: list[FieldModel]) -> list[FieldModel]:
        """Reject two fields whose names differ only by case."""
        seen: set[str] = set()
        for field in v:
            if field.key in seen:
                raise ValueError(f"Duplicate field name '{field.name}' (names are case-insensitive).")
            seen.add(field.key)
        return v

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def field_keys(self) -> frozenset[str]:
        """Case-insensitive keys of every field."""
        return frozenset(f.key for f in self.fields)

    def get_field(self, name: str) -> FieldModel | None:
        """Return the field called *name* (ignoring case), or ``None``."""
        wanted = name_key(name)
        for field in self.fields:
            if field.key == wanted:
                return field
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None


class MixinModel(_FieldSetModel):
    """A reusable field set merged into tables by the model loader."""


class TableModel(_FieldSetModel):
    """A table: fields, foreign keys, indexes, flag attributes and applied mixins."""

    indexes: list[IndexModel] = Field(default_factory=list, description="Declared indexes and alternate keys.")
    attributes: dict[str, bool] = Field(
        default_factory=dict,
        description="Boolean flags keyed by name, e.g. {'NoIdentity': True}.",
    )
    mixins: list[str] = Field(default_factory=list, description="Names of mixins merged into this table.")

    @property
    def primary_key(self) -> FieldModel | None:
        """The first field flagged as primary key, if any."""
        for field in self.fields:
            if field.is_primary_key:
                return field
        return None

    def __str__(self) -> str:
        body = "\n\t".join(str(f) for f in self.fields)
        return f'Name:"{self.name}"\nFields:{{\n\t{body}\n\t}}'


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


def _entry_name(entry: Any) -> str:
    if isinstance(entry, BaseModel):
        return entry.name  # type: ignore[attr-defined]
    if isinstance(entry, dict):
        return str(entry.get("name", ""))
    raise ValueError(f"Cannot determine the name of {entry!r}.")


def _keyed_by_name(v: Any) -> Any:
    """Accept a sequence of entries and key it by entry name."""
    if not isinstance(v, (list, tuple)):
        return v
    keyed: dict[str, Any] = {}
    seen: set[str] = set()
    for entry in v:
        name = _entry_name(entry)
        if name_key(name) in seen:
            raise ValueError(f"Duplicate name '{name}' (names are case-insensitive).")
        seen.add(name_key(name))
        keyed[name] = entry
    return keyed


def _rekey(entries: dict[str, Any], kind: str) -> dict[str, Any]:
    """Re-key *entries* by the case-insensitive name each entry carries."""
    keyed: dict[str, Any] = {}
    for entry in entries.values():
        if entry.key in keyed:
            raise ValueError(f"Duplicate {kind} name '{entry.name}' (names are case-insensitive).")
        keyed[entry.key] = entry
    return keyed


class DatabaseModel(BaseModel):
    """An immutable schema snapshot.

    ``tables`` and ``mixins`` are keyed by lower-cased name regardless of the
    keys supplied at construction; the entries keep their original spelling.
    Either a mapping or a list of entries is accepted.
    """

    model_config = ConfigDict(frozen=True)

    tables: dict[str, TableModel] = Field(default_factory=dict, description="Tables keyed by lower-cased name.")
    mixins: dict[str, MixinModel] = Field(default_factory=dict, description="Mixins keyed by lower-cased name.")

    @field_validator("tables", "mixins", mode="before")
    @classmethod
    def accept_sequences(cls, v: Any) -> Any:
        return _keyed_by_name(v)

    @field_validator("tables")
    @classmethod
    def key_tables_by_name(cls, v: dict[str, TableModel]) -> dict[str, TableModel]:
        return _rekey(v, "table")

    @field_validator("mixins")
    @classmethod
    def key_mixins_by_name(cls, v: dict[str, MixinModel]) -> dict[str, MixinModel]:
        return _rekey(v, "mixin")

    @classmethod
    def from_tables(
        cls,
        tables: Iterable[TableModel],
        mixins: Iterable[MixinModel] = (),
    ) -> DatabaseModel:
        """Build a snapshot from table (and optional mixin) models."""
        return cls(tables=list(tables), mixins=list(mixins))

    @property
    def table_names(self) -> list[str]:
        """Display names of all tables, in insertion order."""
        return [t.name for t in self.tables.values()]

    def get_table(self, name: str) -> TableModel | None:
        """Return the table called *name* (ignoring case), or ``None``."""
        return self.tables.get(name_key(name))

    def has_table(self, name: str) -> bool:
        return name_key(name) in self.tables

    def get_mixin(self, name: str) -> MixinModel | None:
        return self.mixins.get(name_key(name))
