"""Additive migration planner.

Diffs a *target* schema snapshot (what the model files declare) against an
*actual* snapshot (what the database holds) and emits the steps that bring
the actual schema up to the target.  The planner is a pure function: no I/O,
no mutation of its inputs, and the same inputs always yield the same plan.

Planning runs three phases, each walking the target tables in their snapshot
order and matching tables and columns by case-insensitive name:

1. **Missing tables** -- one ``CREATE_TABLE`` step carrying every field,
   immediately followed by one ``ADD_FOREIGN_KEY`` step per foreign key on
   that table.  Foreign keys pointing at *other* tables created by the same
   plan are not ordered after those tables' creation; consumers must
   tolerate this, e.g. by deferring constraint creation.
2. **Missing columns** -- one ``ADD_COLUMN`` step per target field absent
   from an existing table.  Foreign keys over new columns are left to
   phase 3.
3. **Missing foreign keys** -- one ``ADD_FOREIGN_KEY`` step per target
   foreign key whose *target table* is not referenced by any actual foreign
   key on the same table.  Matching is by referenced table only, so a second
   reference to an already-referenced table is considered satisfied.

The plan is additive: nothing is ever dropped or altered.  Objects present
only in the actual schema are reported through
:func:`shift_engine.diff.compute_extras` when ``report_extras`` is enabled.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from shift_engine.config import Settings
from shift_engine.diff.extras import compute_extras
from shift_engine.models.migration import MigrationAction, MigrationPlan, MigrationStep
from shift_engine.models.schema import DatabaseModel, ForeignKeyModel, TableModel

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class PlannerConfig(BaseModel):
    """Tunable knobs for the migration planner."""

    report_extras: bool = Field(
        default=False,
        description=(
            "When True, the plan carries an ExtrasReport listing tables, columns "
            "and indexes present only in the actual schema.  Extras never produce steps."
        ),
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> PlannerConfig:
        return cls(report_extras=settings.report_extras)


_DEFAULT_CONFIG = PlannerConfig()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_plan(
    target: DatabaseModel,
    actual: DatabaseModel,
    config: PlannerConfig | None = None,
) -> MigrationPlan:
    """Generate the additive migration plan from *actual* to *target*.

    Parameters
    ----------
    target:
        The desired schema.
    actual:
        The observed schema.
    config:
        Planner configuration.  Falls back to defaults when ``None``.

    Returns
    -------
    MigrationPlan
        The ordered steps, a deterministic ``plan_id`` and, when enabled, the
        extras report.
    """
    if config is None:
        config = _DEFAULT_CONFIG

    steps: list[MigrationStep] = []
    steps.extend(_plan_missing_tables(target, actual))
    steps.extend(_plan_missing_columns(target, actual))
    steps.extend(_plan_missing_foreign_keys(target, actual))

    extras = compute_extras(target, actual) if config.report_extras else None
    plan = MigrationPlan.from_steps(steps, extras=extras)

    if logger.isEnabledFor(logging.DEBUG):
        for step in plan.steps:
            logger.debug("Planned %s", step, extra={"step": step.model_dump(mode="json")})
    logger.info(
        "Planned %d migration step(s) for %d target table(s): %s",
        len(plan.steps),
        len(target.tables),
        plan.summary() or "no changes",
    )
    return plan


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------


def _plan_missing_tables(target: DatabaseModel, actual: DatabaseModel) -> list[MigrationStep]:
    """Phase 1: create each missing table, then add its foreign keys."""
    steps: list[MigrationStep] = []
    for table in target.tables.values():
        if actual.has_table(table.name):
            continue

        steps.append(
            MigrationStep(
                action=MigrationAction.CREATE_TABLE,
                table_name=table.name,
                fields=list(table.fields),
            )
        )
        steps.extend(_foreign_key_step(table, fk) for fk in table.foreign_keys)
    return steps


def _plan_missing_columns(target: DatabaseModel, actual: DatabaseModel) -> list[MigrationStep]:
    """Phase 2: add each target field missing from an existing table."""
    steps: list[MigrationStep] = []
    for target_table in target.tables.values():
        actual_table = actual.get_table(target_table.name)
        if actual_table is None:
            continue

        actual_keys = actual_table.field_keys
        steps.extend(
            MigrationStep(
                action=MigrationAction.ADD_COLUMN,
                table_name=target_table.name,
                fields=[field],
            )
            for field in target_table.fields
            if field.key not in actual_keys
        )
    return steps


def _plan_missing_foreign_keys(target: DatabaseModel, actual: DatabaseModel) -> list[MigrationStep]:
    """Phase 3: add each target foreign key whose referenced table is not yet referenced."""
    steps: list[MigrationStep] = []
    for target_table in target.tables.values():
        actual_table = actual.get_table(target_table.name)
        if actual_table is None:
            continue

        referenced = {fk.target_key for fk in actual_table.foreign_keys}
        steps.extend(
            _foreign_key_step(target_table, fk) for fk in target_table.foreign_keys if fk.target_key not in referenced
        )
    return steps


def _foreign_key_step(table: TableModel, fk: ForeignKeyModel) -> MigrationStep:
    return MigrationStep(
        action=MigrationAction.ADD_FOREIGN_KEY,
        table_name=table.name,
        foreign_key=fk,
    )
