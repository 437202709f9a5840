"""JSON persistence for migration plans.

Plans are written with sorted keys and a fixed indent, so two identical plans
serialise to identical bytes and can be stored, diffed and handed to an
external DDL executor.

A plan's ``plan_id`` is a digest of its steps.  Reading a plan recomputes
that digest and rejects the document when the two disagree, which catches
plans whose steps were edited after they were generated.  A document with an
empty ``plan_id`` has the digest filled in.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from shift_engine.models.migration import MigrationPlan


class PlanIdMismatchError(ValueError):
    """The stored ``plan_id`` does not match the digest of the plan's steps."""

    def __init__(self, stored: str, computed: str) -> None:
        self.stored = stored
        self.computed = computed
        super().__init__(f"plan_id {stored!r} does not match its steps (expected {computed!r}).")


def serialize_plan(plan: MigrationPlan) -> str:
    """Serialize *plan* to deterministic, 2-space indented JSON."""
    return json.dumps(plan.model_dump(mode="json"), indent=2, sort_keys=True, ensure_ascii=False)


def deserialize_plan(json_str: str) -> MigrationPlan:
    """Read a plan from JSON and verify its ``plan_id``.

    Raises
    ------
    pydantic.ValidationError
        If the document does not fit the plan schema, including step payload
        checks and the reserved ``mixin`` field type.
    PlanIdMismatchError
        If a non-empty ``plan_id`` differs from the digest of the steps.
    """
    plan = MigrationPlan.model_validate_json(json_str)
    return _with_verified_id(plan)


def validate_plan_schema(json_str: str) -> list[str]:
    """Check a JSON plan without raising.

    Returns
    -------
    list[str]
        One message per problem, empty when the plan is valid.
    """
    try:
        plan = MigrationPlan.model_validate_json(json_str)
    except ValidationError as exc:
        return [_format_error(err) for err in exc.errors()]

    try:
        _with_verified_id(plan)
    except PlanIdMismatchError as exc:
        return [f"plan_id: {exc}"]
    return []


def _with_verified_id(plan: MigrationPlan) -> MigrationPlan:
    computed = MigrationPlan.from_steps(plan.steps, extras=plan.extras)
    if not plan.plan_id:
        return computed
    if plan.plan_id != computed.plan_id:
        raise PlanIdMismatchError(plan.plan_id, computed.plan_id)
    return plan


def _format_error(err: Any) -> str:
    """``steps.0.action: Input should be ...`` style message for one pydantic error."""
    location = ".".join(str(part) for part in err.get("loc", ()))
    if not location:
        return str(err["msg"])
    return f"{location}: {err['msg']}"
