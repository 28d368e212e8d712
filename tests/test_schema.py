"""
tests/test_schema.py — Road-class label discovery.

Labels come from the result schema (cursor description), so they must be
derivable from an empty table too.
"""

from __future__ import annotations

import sqlite3

import pytest

from roadstats.constants import TOTAL_LABEL
from roadstats.datastore import open_datastore
from roadstats.errors import SchemaError
from roadstats.schema import derive_class_labels, introspect_class_labels


class TestDeriveClassLabels:

    def test_skips_key_and_appends_total(self):
        labels = derive_class_labels(["isocode", "Motorway", "Trunk"])
        assert labels == ("Motorway", "Trunk", "total")

    def test_preserves_column_order(self):
        labels = derive_class_labels(["isocode", "Tertiary", "Motorway", "Primary"])
        assert labels == ("Tertiary", "Motorway", "Primary", TOTAL_LABEL)

    def test_total_always_last(self):
        labels = derive_class_labels(["isocode", "Motorway"])
        assert labels[-1] == TOTAL_LABEL

    def test_key_only_yields_total_alone(self):
        assert derive_class_labels(["isocode"]) == (TOTAL_LABEL,)

    def test_no_columns_raises(self):
        with pytest.raises(SchemaError):
            derive_class_labels([])

    def test_result_is_immutable(self):
        assert isinstance(derive_class_labels(["k", "a"]), tuple)

    def test_class_column_named_total_rejected(self):
        """A real "total" column would be overwritten by the computed sum."""
        with pytest.raises(SchemaError) as exc_info:
            derive_class_labels(["isocode", "Motorway", "total"])
        assert "total" in exc_info.value.detail
        assert str(exc_info.value).startswith("Schema error:")

    def test_duplicate_class_columns_rejected(self):
        with pytest.raises(SchemaError) as exc_info:
            derive_class_labels(["isocode", "Motorway", "Trunk", "Motorway"])
        assert "Motorway" in exc_info.value.detail

    def test_key_column_name_may_repeat_as_class(self):
        """Only class names must be unique; the skipped key is not a label."""
        assert derive_class_labels(["Motorway", "Motorway"]) == ("Motorway", "total")


class TestIntrospectClassLabels:

    def test_reads_labels_from_table(self, make_db, sample_rows):
        db = make_db(sample_rows)
        with open_datastore(db) as conn:
            labels = introspect_class_labels(conn, "countrydata")
        assert labels == ("Motorway", "Trunk", "Primary", "total")

    def test_empty_table_still_has_labels(self, make_db):
        """Zero data rows: labels come from the schema, not from row values."""
        db = make_db([])
        with open_datastore(db) as conn:
            labels = introspect_class_labels(conn, "countrydata")
        assert labels == ("Motorway", "Trunk", "Primary", "total")

    def test_missing_table_raises_schema_error(self, make_db):
        db = make_db([])
        with open_datastore(db) as conn:
            with pytest.raises(SchemaError) as exc_info:
                introspect_class_labels(conn, "no_such_table")
        assert "no such table" in exc_info.value.detail
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)

    def test_key_column_checked(self, make_db):
        db = make_db([], columns=("code", "Motorway"))
        with open_datastore(db) as conn:
            with pytest.raises(SchemaError) as exc_info:
                introspect_class_labels(conn, "countrydata", key_column="isocode")
        assert "'code'" in str(exc_info.value)

    def test_custom_table_name(self, make_db):
        db = make_db([("FR", 1.0)], columns=("isocode", "Motorway"), table="road stats")
        with open_datastore(db) as conn:
            labels = introspect_class_labels(conn, "road stats", key_column="isocode")
        assert labels == ("Motorway", "total")

    def test_total_column_in_table_raises(self, make_db):
        db = make_db([("US", 5.0, 7.0)], columns=("isocode", "Motorway", "total"))
        with open_datastore(db) as conn:
            with pytest.raises(SchemaError):
                introspect_class_labels(conn, "countrydata", key_column="isocode")
