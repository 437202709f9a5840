"""Unit tests for shift_engine.models.schema."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shift_engine.models.schema import (
    DatabaseModel,
    FieldModel,
    ForeignKeyModel,
    IndexKind,
    IndexModel,
    MixinModel,
    RelationshipType,
    TableModel,
    name_key,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_table(name: str = "Client", *field_names: str) -> TableModel:
    names = field_names or ("ClientID", "Name")
    return TableModel(name=name, fields=[FieldModel(name=n, type="int") for n in names])


# ---------------------------------------------------------------------------
# FieldModel
# ---------------------------------------------------------------------------


class TestFieldModel:
    def test_defaults(self):
        field = FieldModel(name="Amount", type="decimal")
        assert field.is_primary_key is False
        assert field.is_identity is False
        assert field.is_nullable is False
        assert field.is_optional is False
        assert field.precision is None
        assert field.scale is None

    def test_mixin_marker_rejected(self):
        with pytest.raises(ValidationError, match="reserved for mixin"):
            FieldModel(name="Audit", type="mixin")

    def test_unknown_type_accepted(self):
        assert FieldModel(name="Shape", type="geometry").type == "geometry"

    def test_empty_type_accepted(self):
        assert FieldModel(name="Legacy", type="").type == ""

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            FieldModel(name="", type="int")

    def test_key_is_lowercase(self):
        assert FieldModel(name="ClientID", type="int").key == "clientid"

    def test_frozen(self):
        field = FieldModel(name="Amount", type="decimal")
        with pytest.raises(ValidationError):
            field.name = "Total"  # type: ignore[misc]

    def test_str(self):
        assert str(FieldModel(name="Amount", type="decimal")) == 'Field:"Amount" Type:"decimal"'


# ---------------------------------------------------------------------------
# ForeignKeyModel / IndexModel
# ---------------------------------------------------------------------------


class TestForeignKeyModel:
    def test_default_relationship(self):
        fk = ForeignKeyModel(column_name="ClientID", target_table="Client", target_column_name="ClientID")
        assert fk.relationship_type == RelationshipType.ONE_TO_ONE
        assert fk.is_nullable is False

    def test_target_key(self):
        fk = ForeignKeyModel(column_name="ClientID", target_table="Client", target_column_name="ClientID")
        assert fk.target_key == "client"


class TestIndexModel:
    def test_defaults(self):
        index = IndexModel(fields=["Name"])
        assert index.is_unique is False
        assert index.kind == IndexKind.NON_CLUSTERED

    def test_requires_fields(self):
        with pytest.raises(ValidationError):
            IndexModel(fields=[])


# ---------------------------------------------------------------------------
# TableModel / MixinModel
# ---------------------------------------------------------------------------


class TestTableModel:
    def test_duplicate_field_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate field name"):
            _make_table("Client", "Name", "NAME")

    def test_get_field_case_insensitive(self):
        table = _make_table()
        assert table.get_field("clientid").name == "ClientID"
        assert table.get_field("Missing") is None

    def test_has_field(self):
        table = _make_table()
        assert table.has_field("NAME")
        assert not table.has_field("Email")

    def test_field_keys(self):
        assert _make_table().field_keys == frozenset({"clientid", "name"})

    def test_primary_key(self):
        table = TableModel(
            name="Client",
            fields=[
                FieldModel(name="Name", type="nvarchar"),
                FieldModel(name="ClientID", type="int", is_primary_key=True),
            ],
        )
        assert table.primary_key.name == "ClientID"

    def test_no_primary_key(self):
        assert _make_table().primary_key is None

    def test_field_order_preserved(self):
        table = _make_table("T", "B", "A", "C")
        assert [f.name for f in table.fields] == ["B", "A", "C"]

    def test_attributes_and_mixins(self):
        table = TableModel(name="Order", attributes={"NoIdentity": True}, mixins=["Audit"])
        assert table.attributes == {"NoIdentity": True}
        assert table.mixins == ["Audit"]

    def test_str(self):
        text = str(_make_table("Client", "Name"))
        assert text.startswith('Name:"Client"')
        assert 'Field:"Name" Type:"int"' in text


class TestMixinModel:
    def test_shares_field_validation(self):
        with pytest.raises(ValidationError):
            MixinModel(name="Audit", fields=[FieldModel(name="A", type="int"), FieldModel(name="a", type="int")])

    def test_key(self):
        assert MixinModel(name="Audit").key == "audit"


# ---------------------------------------------------------------------------
# DatabaseModel
# ---------------------------------------------------------------------------


class TestDatabaseModel:
    def test_from_list_keys_by_lowercase_name(self):
        db = DatabaseModel(tables=[_make_table("Client"), _make_table("Order", "OrderID")])
        assert set(db.tables) == {"client", "order"}
        assert db.tables["client"].name == "Client"

    def test_from_dict_rekeys(self):
        db = DatabaseModel(tables={"anything": _make_table("Client")})
        assert set(db.tables) == {"client"}

    def test_from_tables(self):
        db = DatabaseModel.from_tables([_make_table("Client")], [MixinModel(name="Audit")])
        assert db.has_table("CLIENT")
        assert db.get_mixin("audit").name == "Audit"

    def test_duplicate_tables_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            DatabaseModel(tables=[_make_table("Client"), _make_table("CLIENT")])

    def test_identical_duplicate_tables_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            DatabaseModel(tables=[_make_table("Client"), _make_table("Client")])

    def test_many_tables_keyed(self):
        db = DatabaseModel(tables=[_make_table(f"T{i}", "ID") for i in range(500)])
        assert len(db.tables) == 500
        assert db.has_table("t499")

    def test_get_table_case_insensitive(self):
        db = DatabaseModel.from_tables([_make_table("Client")])
        assert db.get_table("cLiEnT").name == "Client"
        assert db.get_table("Order") is None

    def test_table_names_in_insertion_order(self):
        db = DatabaseModel.from_tables([_make_table("Zeta", "Z"), _make_table("Alpha", "A")])
        assert db.table_names == ["Zeta", "Alpha"]

    def test_empty(self):
        db = DatabaseModel()
        assert db.tables == {}
        assert db.mixins == {}

    def test_from_dict_payload(self):
        db = DatabaseModel.model_validate(
            {"tables": [{"name": "Client", "fields": [{"name": "ClientID", "type": "int"}]}]}
        )
        assert db.get_table("client").get_field("clientid").type == "int"


def test_name_key():
    assert name_key("OrderLine") == "orderline"
