"""
roadstats.schema — Road-class discovery from the source table schema.

Class labels are the table's column names after the key column, in
column order, followed by the synthetic "total" label. Names are read
from the cursor description, never from row values, so an empty table
still yields its labels.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Sequence

from roadstats.constants import TOTAL_LABEL
from roadstats.datastore import quote_identifier, run_query
from roadstats.errors import SchemaError

logger = logging.getLogger("roadstats.schema")


def derive_class_labels(columns: Sequence[str]) -> tuple[str, ...]:
    """Skip the key column, keep the rest in order, append TOTAL_LABEL.

    Class names must be unique and must not collide with TOTAL_LABEL,
    since each label keys one value in the report.
    """
    if not columns:
        raise SchemaError("", "query returned no columns")
    classes = tuple(columns[1:])
    if TOTAL_LABEL in classes:
        raise SchemaError(
            "", f"class column '{TOTAL_LABEL}' collides with the computed total",
            prefix="Schema error",
        )
    seen: set[str] = set()
    for name in classes:
        if name in seen:
            raise SchemaError("", f"duplicate class column '{name}'", prefix="Schema error")
        seen.add(name)
    return classes + (TOTAL_LABEL,)


def introspect_class_labels(
    conn: sqlite3.Connection,
    table: str,
    key_column: str | None = None,
) -> tuple[str, ...]:
    """Sample one row of table and derive the class labels from its schema.

    When key_column is given, the first column must carry that name.
    """
    sql = f"SELECT * FROM {quote_identifier(table)} LIMIT 1"
    columns, _ = run_query(conn, sql, error_cls=SchemaError)
    if columns and key_column is not None and columns[0] != key_column:
        raise SchemaError(
            sql, f"first column of {table} is '{columns[0]}', expected '{key_column}'"
        )
    labels = derive_class_labels(columns)
    logger.info(json.dumps({
        "event": "class_labels",
        "table": table,
        "key_column": columns[0],
        "labels": list(labels),
    }))
    return labels
