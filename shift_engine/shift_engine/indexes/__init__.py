"""Index naming and index field resolution."""

from shift_engine.indexes.field_resolver import resolve_index_field_names
from shift_engine.indexes.naming import MAX_INDEX_NAME_LENGTH, generate_index_name

__all__ = [
    "MAX_INDEX_NAME_LENGTH",
    "generate_index_name",
    "resolve_index_field_names",
]
