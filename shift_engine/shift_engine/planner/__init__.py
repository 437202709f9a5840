"""Deterministic additive migration planning."""

from shift_engine.planner.migration_planner import PlannerConfig, generate_plan
from shift_engine.planner.plan_serializer import (
    PlanIdMismatchError,
    deserialize_plan,
    serialize_plan,
    validate_plan_schema,
)

__all__ = [
    "PlanIdMismatchError",
    "PlannerConfig",
    "deserialize_plan",
    "generate_plan",
    "serialize_plan",
    "validate_plan_schema",
]
