"""Migration plan models.

A :class:`MigrationPlan` is an ordered list of :class:`MigrationStep` objects,
each describing one additive DDL intent (create a table, add a column, add a
foreign key).  Plans are **deterministic**: the ``plan_id`` is derived from
the step content, never from random UUIDs or wall-clock time, so identical
inputs always yield an identical plan.
"""

from __future__ import annotations

import hashlib
from collections import Counter
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from shift_engine.models.schema import FieldModel, ForeignKeyModel, IndexModel, name_key

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def compute_deterministic_id(*parts: str) -> str:
    """Derive a deterministic SHA-256 hex ID from an ordered sequence of strings."""
    hasher = hashlib.sha256()
    for part in parts:
        hasher.update(part.encode("utf-8"))
        hasher.update(b"\x00")  # Null-byte domain separator prevents collisions
    return hasher.hexdigest()


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


class MigrationAction(str, Enum):
    """The DDL intent of a migration step.

    ``ALTER_COLUMN`` and ``ADD_INDEX`` are reserved: the planner never emits
    them, but consumers accept them so the plan shape stays stable.
    """

    CREATE_TABLE = "CREATE_TABLE"
    ADD_COLUMN = "ADD_COLUMN"
    ADD_FOREIGN_KEY = "ADD_FOREIGN_KEY"
    ALTER_COLUMN = "ALTER_COLUMN"
    ADD_INDEX = "ADD_INDEX"


# Actions whose step must carry at least one field.  CREATE_TABLE may be empty.
_COLUMN_ACTIONS = frozenset({MigrationAction.ADD_COLUMN, MigrationAction.ALTER_COLUMN})


class MigrationStep(BaseModel):
    """A single unit of DDL intent against one table."""

    action: MigrationAction = Field(..., description="What the step does.")
    table_name: str = Field(..., min_length=1, description="Table the step applies to.")
    fields: list[FieldModel] = Field(
        default_factory=list,
        description="Columns for CREATE_TABLE / ADD_COLUMN / ALTER_COLUMN.",
    )
    foreign_key: ForeignKeyModel | None = Field(default=None, description="Reference for ADD_FOREIGN_KEY.")
    index: IndexModel | None = Field(default=None, description="Index for ADD_INDEX.")

    @model_validator(mode="after")
    def validate_payload(self) -> MigrationStep:
        """Ensure each action carries the payload its consumer needs."""
        if self.action in _COLUMN_ACTIONS and not self.fields:
            raise ValueError(f"{self.action.value} step for '{self.table_name}' requires at least one field.")
        if self.action == MigrationAction.ADD_FOREIGN_KEY and self.foreign_key is None:
            raise ValueError(f"ADD_FOREIGN_KEY step for '{self.table_name}' requires a foreign_key.")
        if self.action == MigrationAction.ADD_INDEX and self.index is None:
            raise ValueError(f"ADD_INDEX step for '{self.table_name}' requires an index.")
        return self

    def content_parts(self) -> list[str]:
        """Ordered strings describing the step, used for plan identity."""
        parts = [self.action.value, self.table_name]
        parts.extend(f"{f.name}:{f.type}:{f.precision}:{f.scale}:{f.is_nullable}" for f in self.fields)
        if self.foreign_key is not None:
            fk = self.foreign_key
            parts.append(f"fk:{fk.column_name}:{fk.target_table}:{fk.target_column_name}")
        if self.index is not None:
            parts.append(f"ix:{','.join(self.index.fields)}:{self.index.is_unique}")
        return parts

    def __str__(self) -> str:
        if self.foreign_key is not None:
            return f"{self.action.value} {self.table_name} {self.foreign_key.column_name}"
        if self.fields and self.action != MigrationAction.CREATE_TABLE:
            return f"{self.action.value} {self.table_name} {', '.join(f.name for f in self.fields)}"
        return f"{self.action.value} {self.table_name}"


# ---------------------------------------------------------------------------
# Extras report
# ---------------------------------------------------------------------------


class ExtraColumnReport(BaseModel):
    """A column present in the actual schema but absent from the target."""

    table_name: str = Field(..., description="Table holding the column.")
    column_name: str = Field(..., description="The extra column.")
    data_type: str = Field(default="", description="Rendered SQL type of the column.")


class ExtraIndexReport(BaseModel):
    """An index present in the actual schema with no target counterpart."""

    table_name: str = Field(..., description="Table holding the index.")
    is_unique: bool = Field(default=False, description="Whether the index is unique.")
    fields: list[str] = Field(default_factory=list, description="Indexed columns.")


class ExtrasReport(BaseModel):
    """Schema objects only in the actual database.

    Informational only: the planner is additive and never drops these.
    """

    extra_tables: list[str] = Field(default_factory=list, description="Tables absent from the target.")
    extra_columns: list[ExtraColumnReport] = Field(
        default_factory=list,
        description="Columns absent from the target, for tables present in both.",
    )
    extra_indexes: list[ExtraIndexReport] = Field(
        default_factory=list,
        description="Indexes absent from the target, for tables present in both.",
    )

    @property
    def is_empty(self) -> bool:
        return not (self.extra_tables or self.extra_columns or self.extra_indexes)


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


class MigrationPlan(BaseModel):
    """An ordered, additive migration plan."""

    plan_id: str = Field(default="", description="Deterministic SHA-256 digest of the step content.")
    steps: list[MigrationStep] = Field(default_factory=list, description="Ordered migration steps.")
    extras: ExtrasReport | None = Field(
        default=None,
        description="Objects only in the actual schema.  Populated only when extras reporting is enabled.",
    )

    @classmethod
    def from_steps(cls, steps: list[MigrationStep], extras: ExtrasReport | None = None) -> MigrationPlan:
        """Build a plan whose ``plan_id`` is derived from *steps*."""
        parts: list[str] = []
        for step in steps:
            parts.extend(step.content_parts())
        return cls(plan_id=compute_deterministic_id(*parts), steps=steps, extras=extras)

    @property
    def is_empty(self) -> bool:
        return not self.steps

    def steps_for_table(self, table_name: str) -> list[MigrationStep]:
        """Steps that apply to *table_name* (ignoring case), in plan order."""
        wanted = name_key(table_name)
        return [s for s in self.steps if name_key(s.table_name) == wanted]

    def steps_by_action(self, action: MigrationAction) -> list[MigrationStep]:
        return [s for s in self.steps if s.action == action]

    def summary(self) -> dict[str, int]:
        """Step counts keyed by action value, sorted by action name."""
        counts = Counter(s.action.value for s in self.steps)
        return dict(sorted(counts.items()))
