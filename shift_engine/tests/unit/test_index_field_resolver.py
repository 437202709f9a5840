"""Unit tests for shift_engine.indexes.field_resolver."""

from __future__ import annotations

from shift_engine.indexes import resolve_index_field_names
from shift_engine.models.schema import FieldModel, ForeignKeyModel, TableModel


def _make_order(*foreign_keys: ForeignKeyModel) -> TableModel:
    return TableModel(
        name="Order",
        fields=[
            FieldModel(name="OrderID", type="int", is_primary_key=True),
            FieldModel(name="ClientID", type="int"),
            FieldModel(name="Notes", type="nvarchar"),
        ],
        foreign_keys=list(foreign_keys),
    )


def _fk(column: str, target: str) -> ForeignKeyModel:
    return ForeignKeyModel(column_name=column, target_table=target, target_column_name=f"{target}ID")


class TestResolveIndexFieldNames:
    def test_model_name_resolved_to_column(self):
        table = _make_order(_fk("ClientID", "Client"))
        assert resolve_index_field_names(["Client"], table) == ["ClientID"]

    def test_plain_column_unchanged(self):
        table = _make_order(_fk("ClientID", "Client"))
        assert resolve_index_field_names(["Notes"], table) == ["Notes"]

    def test_mixed_fields_keep_order(self):
        table = _make_order(_fk("ClientID", "Client"))
        assert resolve_index_field_names(["Notes", "Client"], table) == ["Notes", "ClientID"]

    def test_case_insensitive_match(self):
        table = _make_order(_fk("ClientID", "Client"))
        assert resolve_index_field_names(["client"], table) == ["ClientID"]

    def test_no_table_returns_copy(self):
        fields = ["Client", "Notes"]
        resolved = resolve_index_field_names(fields, None)
        assert resolved == fields
        assert resolved is not fields

    def test_table_without_foreign_keys(self):
        assert resolve_index_field_names(["Client"], _make_order()) == ["Client"]

    def test_last_foreign_key_to_same_target_wins(self):
        table = _make_order(_fk("CreatedByUserID", "User"), _fk("ModifiedByUserID", "User"))
        assert resolve_index_field_names(["User"], table) == ["ModifiedByUserID"]

    def test_input_not_mutated(self):
        fields = ["Client"]
        resolve_index_field_names(fields, _make_order(_fk("ClientID", "Client")))
        assert fields == ["Client"]
