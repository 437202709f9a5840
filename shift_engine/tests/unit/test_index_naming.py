"""Unit tests for shift_engine.indexes.naming."""

from __future__ import annotations

import hashlib

from shift_engine.indexes import MAX_INDEX_NAME_LENGTH, generate_index_name


class TestShortNames:
    def test_alternate_key_prefix(self):
        assert generate_index_name(True, "Order", ["ClientID", "Reference"]) == "AK_Order_ClientID_Reference"

    def test_index_prefix(self):
        assert generate_index_name(False, "Order", ["CreatedOn"]) == "IX_Order_CreatedOn"

    def test_field_order_preserved(self):
        assert generate_index_name(False, "T", ["B", "A"]) == "IX_T_B_A"

    def test_empty_fields_keep_trailing_separator(self):
        assert generate_index_name(False, "T", []) == "IX_T_"

    def test_exactly_at_limit_is_unchanged(self):
        table = "T" * (MAX_INDEX_NAME_LENGTH - len("IX__F"))
        name = generate_index_name(False, table, ["F"])
        assert len(name) == MAX_INDEX_NAME_LENGTH
        assert name == f"IX_{table}_F"

    def test_accepts_generator(self):
        assert generate_index_name(True, "T", (f for f in ["A", "B"])) == "AK_T_A_B"


class TestLongNames:
    def test_truncated_to_limit(self):
        name = generate_index_name(False, "T" * 200, ["Field"])
        assert len(name) == MAX_INDEX_NAME_LENGTH

    def test_hash_of_untruncated_name(self):
        table = "Table" * 30
        base = f"AK_{table}_Reference"
        expected_hash = hashlib.sha256(base.encode("utf-8")).hexdigest()[:8]

        name = generate_index_name(True, table, ["Reference"])

        assert name == f"{base[:119]}_{expected_hash}"

    def test_one_over_limit_is_hashed(self):
        table = "T" * (MAX_INDEX_NAME_LENGTH - len("IX__F") + 1)
        name = generate_index_name(False, table, ["F"])
        assert len(name) == MAX_INDEX_NAME_LENGTH
        assert name[119] == "_"

    def test_shared_prefix_still_distinct(self):
        table = "T" * 130
        first = generate_index_name(False, table, ["Alpha"])
        second = generate_index_name(False, table, ["Beta"])
        assert first[:119] == second[:119]
        assert first != second

    def test_deterministic(self):
        table = "LongTableName" * 12
        assert generate_index_name(True, table, ["A"]) == generate_index_name(True, table, ["A"])

    def test_hash_suffix_is_lowercase_hex(self):
        suffix = generate_index_name(False, "T" * 200, ["F"])[-8:]
        assert all(ch in "0123456789abcdef" for ch in suffix)
