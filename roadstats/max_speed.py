"""
roadstats.max_speed — Maximum speed per main road class and country.

Reads (isocode, type, maxspeed) rows for the main road classes and
groups them by country. If a country lists the same class twice, the
later row wins. The CLI writes the result as canonical JSON (sorted keys).
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Sequence

from roadstats.constants import DEFAULT_KEY_COLUMN, MAX_SPEED_CLASSES, MAX_SPEED_TABLE
from roadstats.datastore import quote_identifier, run_query
from roadstats.errors import AggregationError

logger = logging.getLogger("roadstats.max_speed")


def fetch_max_speeds(
    conn: sqlite3.Connection,
    table: str = MAX_SPEED_TABLE,
    key_column: str = DEFAULT_KEY_COLUMN,
    classes: Sequence[str] = MAX_SPEED_CLASSES,
) -> dict[str, dict[str, Any]]:
    """Return {country_code: {road_class: maxspeed}}."""
    if not classes:
        raise ValueError("classes must not be empty")
    key = quote_identifier(key_column)
    placeholders = ",".join("?" for _ in classes)
    sql = (
        f"SELECT {key}, type, maxspeed FROM {quote_identifier(table)} "
        f"WHERE type IN ({placeholders}) AND {key} IS NOT ''"
    )
    _, rows = run_query(conn, sql, tuple(classes), error_cls=AggregationError)

    speeds: dict[str, dict[str, Any]] = {}
    for code, road_class, maxspeed in rows:
        if code is None or code == "":
            continue
        speeds.setdefault(str(code), {})[str(road_class)] = maxspeed

    logger.info(json.dumps({"event": "max_speeds", "countries": len(speeds)}))
    return speeds
