"""
roadstats.datastore — SQLite boundary for the statistics builder.

open_datastore() is the ONLY place a connection is created. The database
is opened read-only: a missing file is an error, never an empty database.
The connection is closed on every exit path by the context manager.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from roadstats.errors import DatastoreConnectionError, QueryError, UsageError

logger = logging.getLogger("roadstats.datastore")


def quote_identifier(name: str) -> str:
    """Quote a table or column name for interpolation into SQL."""
    if not name:
        raise ValueError("identifier must be a non-empty string")
    return '"' + name.replace('"', '""') + '"'


@contextmanager
def open_datastore(path: str | Path | None) -> Iterator[sqlite3.Connection]:
    """Open a statistics database read-only and close it unconditionally."""
    if path is None or str(path).strip() == "":
        raise UsageError("No input file specified.")

    db_path = Path(path)
    if not db_path.is_file():
        raise DatastoreConnectionError(str(path), "no such file")

    uri = f"{db_path.resolve().as_uri()}?mode=ro"
    try:
        conn = sqlite3.connect(uri, uri=True)
        # Force the header read so a non-database file fails here.
        conn.execute("PRAGMA schema_version").fetchone()
    except sqlite3.Error as exc:
        raise DatastoreConnectionError(str(path), str(exc)) from exc

    logger.debug(json.dumps({"event": "datastore_open", "path": str(db_path)}))
    try:
        yield conn
    finally:
        conn.close()
        logger.debug(json.dumps({"event": "datastore_close", "path": str(db_path)}))


def run_query(
    conn: sqlite3.Connection,
    sql: str,
    params: Sequence[Any] = (),
    error_cls: type[QueryError] = QueryError,
) -> tuple[list[str], list[tuple[Any, ...]]]:
    """Execute sql and return (column names, rows).

    Column names come from the cursor description, so they are available
    even when the result has zero rows. Engine errors are re-raised as
    error_cls with the engine message verbatim.
    """
    try:
        cursor = conn.execute(sql, params)
        columns = [d[0] for d in cursor.description or ()]
        rows = cursor.fetchall()
    except sqlite3.Error as exc:
        raise error_cls(sql, str(exc)) from exc
    logger.debug(json.dumps({"event": "query", "sql": sql, "rows": len(rows)}))
    return columns, rows
