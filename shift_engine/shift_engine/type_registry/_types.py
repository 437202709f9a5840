"""Field type vocabularies and their cross-reference tables.

Two closed vocabularies are defined here:

* **DMD field types** -- the engine-neutral vocabulary used in model
  definition files (``bool``, ``astring``, ``decimal`` ...).
* **SQL field types** -- the SQL Server column types the DMD vocabulary maps
  onto (``bit``, ``varchar``, ``decimal`` ...).

Every entry is an immutable record.  Cross references are stored as enum
identifiers and resolved through the lookup tables at call time, so neither
table depends on the other being built first.  Both tables are built once at
import and exposed read-only.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class PrecisionType(str, enum.Enum):
    """How a type carries precision and scale in its rendered form."""

    NONE = "none"
    PRECISION_ONLY = "precision_only"
    PRECISION_WITH_SCALE = "precision_with_scale"


class DmdFieldTypeId(str, enum.Enum):
    """Identifiers of the DMD (model definition) field types."""

    BOOL = "BOOL"
    GUID = "GUID"

    # ASCII strings
    ACHAR = "ACHAR"
    ASTRING = "ASTRING"

    # Unicode strings
    UCHAR = "UCHAR"
    USTRING = "USTRING"

    # Deprecated spellings of UCHAR / USTRING
    CHAR = "CHAR"
    STRING = "STRING"

    INT = "INT"
    LONG = "LONG"
    DECIMAL = "DECIMAL"
    FLOAT = "FLOAT"

    DATETIME = "DATETIME"


class SqlFieldTypeId(str, enum.Enum):
    """Identifiers of the SQL Server column types."""

    BIT = "BIT"
    UNIQUEIDENTIFIER = "UNIQUEIDENTIFIER"

    CHAR = "CHAR"
    VARCHAR = "VARCHAR"
    TEXT = "TEXT"

    NCHAR = "NCHAR"
    NVARCHAR = "NVARCHAR"
    NTEXT = "NTEXT"

    INT = "INT"
    BIGINT = "BIGINT"
    DECIMAL = "DECIMAL"
    NUMERIC = "NUMERIC"
    FLOAT = "FLOAT"
    MONEY = "MONEY"
    SMALLMONEY = "SMALLMONEY"

    DATETIME = "DATETIME"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DmdFieldType:
    """A DMD field type and the SQL type it is stored as."""

    id: DmdFieldTypeId
    code: str
    sql_type_id: SqlFieldTypeId
    precision_type: PrecisionType = PrecisionType.NONE
    default_precision: int | None = None
    default_scale: int | None = None
    replaced_by: DmdFieldTypeId | None = None

    @property
    def sql_type(self) -> SqlFieldType:
        """The SQL type this DMD type is stored as."""
        return get_sql_type(self.sql_type_id)

    @property
    def is_deprecated(self) -> bool:
        return self.replaced_by is not None

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True, slots=True)
class SqlFieldType:
    """A SQL Server column type and its canonical DMD type.

    Several SQL types may share a canonical DMD type (``numeric`` and
    ``money`` both read back as ``decimal``).  ``is_legacy_wide_text`` marks
    the deprecated ``text``/``ntext`` types, which always render as the
    ``(max)`` form of their canonical type; ``is_currency`` marks the money
    types, which always render with their fixed precision and scale.
    """

    id: SqlFieldTypeId
    code: str
    dmd_type_id: DmdFieldTypeId
    precision_type: PrecisionType = PrecisionType.NONE
    default_precision: int | None = None
    default_scale: int | None = None
    supports_max_length: bool = False
    max_length_marker: int | None = None
    is_legacy_wide_text: bool = False
    is_currency: bool = False

    @property
    def dmd_type(self) -> DmdFieldType:
        """The canonical DMD type for this SQL type."""
        return get_dmd_type(self.dmd_type_id)

    def __str__(self) -> str:
        return self.code


# ---------------------------------------------------------------------------
# Vocabulary tables
# ---------------------------------------------------------------------------

_MAX_LENGTH_MARKER = -1

_DMD_TYPES: tuple[DmdFieldType, ...] = (
    DmdFieldType(DmdFieldTypeId.BOOL, "bool", SqlFieldTypeId.BIT),
    DmdFieldType(DmdFieldTypeId.GUID, "guid", SqlFieldTypeId.UNIQUEIDENTIFIER),
    DmdFieldType(
        DmdFieldTypeId.ACHAR,
        "achar",
        SqlFieldTypeId.CHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=1,
    ),
    DmdFieldType(
        DmdFieldTypeId.ASTRING,
        "astring",
        SqlFieldTypeId.VARCHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=255,
    ),
    DmdFieldType(
        DmdFieldTypeId.UCHAR,
        "uchar",
        SqlFieldTypeId.NCHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=1,
    ),
    DmdFieldType(
        DmdFieldTypeId.USTRING,
        "ustring",
        SqlFieldTypeId.NVARCHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=255,
    ),
    DmdFieldType(
        DmdFieldTypeId.CHAR,
        "char",
        SqlFieldTypeId.NCHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=1,
        replaced_by=DmdFieldTypeId.UCHAR,
    ),
    DmdFieldType(
        DmdFieldTypeId.STRING,
        "string",
        SqlFieldTypeId.NVARCHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=255,
        replaced_by=DmdFieldTypeId.USTRING,
    ),
    DmdFieldType(DmdFieldTypeId.INT, "int", SqlFieldTypeId.INT),
    DmdFieldType(DmdFieldTypeId.LONG, "long", SqlFieldTypeId.BIGINT),
    DmdFieldType(
        DmdFieldTypeId.DECIMAL,
        "decimal",
        SqlFieldTypeId.DECIMAL,
        precision_type=PrecisionType.PRECISION_WITH_SCALE,
        default_precision=18,
        default_scale=0,
    ),
    DmdFieldType(DmdFieldTypeId.FLOAT, "float", SqlFieldTypeId.FLOAT),
    DmdFieldType(DmdFieldTypeId.DATETIME, "datetime", SqlFieldTypeId.DATETIME),
)

_SQL_TYPES: tuple[SqlFieldType, ...] = (
    SqlFieldType(SqlFieldTypeId.BIT, "bit", DmdFieldTypeId.BOOL),
    SqlFieldType(SqlFieldTypeId.UNIQUEIDENTIFIER, "uniqueidentifier", DmdFieldTypeId.GUID),
    SqlFieldType(
        SqlFieldTypeId.CHAR,
        "char",
        DmdFieldTypeId.ACHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=1,
    ),
    SqlFieldType(
        SqlFieldTypeId.VARCHAR,
        "varchar",
        DmdFieldTypeId.ASTRING,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=255,
        supports_max_length=True,
        max_length_marker=_MAX_LENGTH_MARKER,
    ),
    # Deprecated since SQL Server 2005 in favour of varchar(max).
    SqlFieldType(SqlFieldTypeId.TEXT, "text", DmdFieldTypeId.ASTRING, is_legacy_wide_text=True),
    SqlFieldType(
        SqlFieldTypeId.NCHAR,
        "nchar",
        DmdFieldTypeId.CHAR,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=1,
    ),
    SqlFieldType(
        SqlFieldTypeId.NVARCHAR,
        "nvarchar",
        DmdFieldTypeId.STRING,
        precision_type=PrecisionType.PRECISION_ONLY,
        default_precision=255,
        supports_max_length=True,
        max_length_marker=_MAX_LENGTH_MARKER,
    ),
    # Deprecated since SQL Server 2005 in favour of nvarchar(max).
    SqlFieldType(SqlFieldTypeId.NTEXT, "ntext", DmdFieldTypeId.STRING, is_legacy_wide_text=True),
    SqlFieldType(SqlFieldTypeId.INT, "int", DmdFieldTypeId.INT),
    SqlFieldType(SqlFieldTypeId.BIGINT, "bigint", DmdFieldTypeId.LONG),
    SqlFieldType(
        SqlFieldTypeId.DECIMAL,
        "decimal",
        DmdFieldTypeId.DECIMAL,
        precision_type=PrecisionType.PRECISION_WITH_SCALE,
        default_precision=18,
        default_scale=0,
    ),
    SqlFieldType(
        SqlFieldTypeId.NUMERIC,
        "numeric",
        DmdFieldTypeId.DECIMAL,
        precision_type=PrecisionType.PRECISION_WITH_SCALE,
        default_precision=18,
        default_scale=0,
    ),
    SqlFieldType(SqlFieldTypeId.FLOAT, "float", DmdFieldTypeId.FLOAT),
    SqlFieldType(
        SqlFieldTypeId.MONEY,
        "money",
        DmdFieldTypeId.DECIMAL,
        default_precision=19,
        default_scale=4,
        is_currency=True,
    ),
    SqlFieldType(
        SqlFieldTypeId.SMALLMONEY,
        "smallmoney",
        DmdFieldTypeId.DECIMAL,
        default_precision=10,
        default_scale=4,
        is_currency=True,
    ),
    SqlFieldType(SqlFieldTypeId.DATETIME, "datetime", DmdFieldTypeId.DATETIME),
)

_DMD_BY_ID = MappingProxyType({t.id: t for t in _DMD_TYPES})
_DMD_BY_CODE = MappingProxyType({t.code: t for t in _DMD_TYPES})
_SQL_BY_ID = MappingProxyType({t.id: t for t in _SQL_TYPES})
_SQL_BY_CODE = MappingProxyType({t.code: t for t in _SQL_TYPES})


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_dmd_type(type_id: DmdFieldTypeId) -> DmdFieldType:
    """Return the DMD type for *type_id*.  Raises ``ValueError`` if unknown."""
    return _DMD_BY_ID[DmdFieldTypeId(type_id)]


def get_sql_type(type_id: SqlFieldTypeId) -> SqlFieldType:
    """Return the SQL type for *type_id*.  Raises ``ValueError`` if unknown."""
    return _SQL_BY_ID[SqlFieldTypeId(type_id)]


def find_dmd_type(code: str | None) -> DmdFieldType | None:
    """Look up a DMD type by code, ignoring case and surrounding whitespace."""
    if not code:
        return None
    return _DMD_BY_CODE.get(code.strip().lower())


def find_sql_type(code: str | None) -> SqlFieldType | None:
    """Look up a SQL type by code, ignoring case and surrounding whitespace."""
    if not code:
        return None
    return _SQL_BY_CODE.get(code.strip().lower())


def all_dmd_types() -> tuple[DmdFieldType, ...]:
    return _DMD_TYPES


def all_sql_types() -> tuple[SqlFieldType, ...]:
    return _SQL_TYPES


def resolve_sql_type_code(code: str) -> str:
    """Translate a DMD type code to the SQL type code it is stored as.

    Codes that are not DMD codes (``nvarchar``, ``geometry`` ...) are returned
    unchanged.  Note that ``char`` is a deprecated DMD code and resolves to
    ``nchar``.
    """
    dmd_type = find_dmd_type(code)
    if dmd_type is None:
        return code
    return dmd_type.sql_type.code
